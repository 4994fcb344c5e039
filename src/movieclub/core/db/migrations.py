"""Reusable migration runner for both production and tests."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

from alembic.config import Config

from alembic import command


def run_migrations_sync(revision: str = "head", config_path: str = "alembic.ini") -> None:
    """Run Alembic migrations synchronously.

    Upgrading an already up-to-date database is a no-op.
    """
    alembic_cfg = Config(config_path)
    command.upgrade(alembic_cfg, revision)


async def run_migrations_async(revision: str = "head") -> None:
    """Run Alembic migrations from async context.

    Uses ThreadPoolExecutor to avoid event loop conflicts with Alembic.
    """
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor() as pool:
        await loop.run_in_executor(pool, run_migrations_sync, revision)


if __name__ == "__main__":
    run_migrations_sync()
