"""
Create the `meal_schedules` table on the database in DATABASE_URL.

    python -m scripts.init_db
"""
from __future__ import annotations

import asyncio

from services.db import create_tables


def main() -> None:
    asyncio.run(create_tables())
    print("✓ meal_schedules ready")


if __name__ == "__main__":
    main()
