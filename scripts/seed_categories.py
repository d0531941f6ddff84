"""
Seed the default animal categories (Dogs, Cats, Birds, Rodents, Reptiles).

Nothing is inserted when the categories table already has rows.

Usage:
    python scripts/seed_categories.py
"""
import asyncio
import sys
from pathlib import Path

# Add parent directory to Python path so we can import petpal modules
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

# Load .env from project root before any petpal imports
from dotenv import load_dotenv
load_dotenv(ROOT / ".env")

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from petpal.config import Settings
from petpal.database import enable_sqlite_foreign_keys
from petpal.services.seed_service import DEFAULT_CATEGORIES, seed_default_categories


async def seed_categories():
    """Seed the default categories."""
    settings = Settings()

    engine = create_async_engine(settings.database_url, echo=False)
    if settings.is_sqlite:
        enable_sqlite_foreign_keys(engine)
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        added = await seed_default_categories(session)

    print(f"\n{'='*60}")
    if added:
        print(f"Seeding complete! Added: {', '.join(DEFAULT_CATEGORIES)}")
    else:
        print("Categories already present, nothing added")
    print(f"{'='*60}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_categories())
