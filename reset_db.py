"""
Recreates the Invoicer schema on the configured database.

Every table is dropped, so every estimate, invoice, catalog row and
setting is lost. Requires the package to be installed (`pip install -e .`).

Usage:
    python reset_db.py --yes
"""

import asyncio
import sys

from invoicer.core.config import settings
from invoicer.core.database import engine
from invoicer.models import Base


async def reset() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print(f"Dropped {len(Base.metadata.tables)} tables.")
        await conn.run_sync(Base.metadata.create_all)
        print("Schema created.")
    await engine.dispose()


if __name__ == "__main__":
    if "--yes" not in sys.argv[1:]:
        print(f"This drops every table of the {settings.app_env} database. Re-run with --yes to confirm.")
        sys.exit(1)
    asyncio.run(reset())
