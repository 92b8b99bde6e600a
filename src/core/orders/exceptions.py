"""
Order persistence errors.

Lifecycle rule violations are not exceptions: they come back as
TransitionResult outcomes. These are raised when the store itself fails.
"""


class PersistenceError(Exception):
    """A database operation on orders failed."""


class OrderIdCollisionError(PersistenceError):
    """Every generated order id was already taken."""
