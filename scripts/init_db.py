"""Database initialization script.

Run this script to create the template metadata tables used by the
database template store.

Usage:
    python -m scripts.init_db
"""

import asyncio

from template_ingest.core.config import get_settings
from template_ingest.db.session import close_db, init_db


async def main() -> None:
    """Initialize the database."""
    settings = get_settings()
    await init_db(settings)
    await close_db()
    print("Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(main())
