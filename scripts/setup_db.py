"""
Database setup script for Supabase.
Checks the connection and optionally seeds a sample blocked slot.
"""

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from charter.admin import AdminBlockManager
from charter.dates import add_months, today
from db import get_db_client
from models.booking import SlotType

SCHEMA_PATH = Path(__file__).parent.parent / "db" / "schema.sql"


async def create_sample_block():
    """Block next Monday's morning trip for boat maintenance."""
    current = today()
    next_monday = current + timedelta(days=7 - current.weekday())

    block = await AdminBlockManager(get_db_client()).create_block(
        next_monday, SlotType.AM, "maintenance"
    )
    print(f"Created block: {block.slot_type.value} on {block.date} ({block.reason})")


async def main():
    """Main setup function."""
    print("🚀 Setting up database...")
    print("\nNote: Make sure you've run the SQL in Supabase SQL Editor first!")
    print(f"Schema: {SCHEMA_PATH}\n")

    try:
        db = get_db_client()
        start = today()
        snapshot = await db.get_availability_snapshot(start, add_months(start, 3))
        print("✅ Database connection successful")
        print(
            f"   {len(snapshot.bookings)} confirmed bookings, "
            f"{len(snapshot.blocks)} blocked slots in the booking window"
        )

        response = input("\nCreate a sample blocked slot? (y/n): ")
        if response.lower() == "y":
            await create_sample_block()

        print("\n✅ Database setup complete!")

    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
