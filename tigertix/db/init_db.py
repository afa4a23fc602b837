"""
Schema creation and demo data for local runs.
Production schemas are managed by alembic; see alembic/versions.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine

from tigertix.core.logging import get_logger
from tigertix.db.base import Base
from tigertix.db.session import create_session_factory
from tigertix.models import Event

logger = get_logger(__name__)

SEED_EVENTS = [
    {"name": "Homecoming Football Game", "date": "2025-10-15", "tickets": 50},
    {"name": "Spring Concert", "date": "2025-04-12", "tickets": 75},
    {"name": "Hackathon 2025", "date": "2025-11-08", "tickets": 100},
]


async def init_db(engine: AsyncEngine, seed: bool = True) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if not seed:
        return

    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        count = (await session.execute(select(func.count(Event.id)))).scalar_one()
        if count:
            return
        session.add_all([Event(**data) for data in SEED_EVENTS])
        await session.commit()
        logger.info("events_seeded", count=len(SEED_EVENTS))
