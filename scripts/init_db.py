#!/usr/bin/env python3
"""
Create the order tables and show what is already stored.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py sqlite+aiosqlite:///data/other.db
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.db.models import Base
from src.db.repository import OrderRepository
from src.db.sqlite import Database


async def main(url: str | None = None) -> None:
    database = Database(url=url, echo=False)

    print(f"Initializing order database at {database.url}")
    print("-" * 50)

    await database.init()
    for table in Base.metadata.sorted_tables:
        print(f"✅ Table ready: {table.name}")

    pending = await OrderRepository(database).list_pending()
    print("-" * 50)
    print(f"Pending orders: {len(pending)}")

    await database.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
