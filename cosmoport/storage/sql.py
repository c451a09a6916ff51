from sqlmodel import SQLModel, select
from sqlalchemy import delete, event, func
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession
from sqlalchemy.pool import StaticPool
from typing import Optional
import logging

from cosmoport.config import settings
from cosmoport.models import Ship
from cosmoport.services.filters import Specification
from cosmoport.storage.base import Page, PageRequest, ShipStorage, SortDirection

logger = logging.getLogger(__name__)


def _enable_case_sensitive_like(dbapi_connection, connection_record):
    # SQLite LIKE ignores ASCII case unless told otherwise
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


class SQLStorage(ShipStorage):
    """Ship storage on an async SQLAlchemy engine"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or settings.database_url
        self.engine: Optional[AsyncEngine] = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    async def initialize(self):
        """Initialize database connection and create tables"""
        if self.is_sqlite:
            self.engine = create_async_engine(
                self.database_url,
                echo=settings.debug,
                future=True,
                # SQLite specific settings
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
            event.listen(self.engine.sync_engine, "connect", _enable_case_sensitive_like)
        else:
            self.engine = create_async_engine(
                self.database_url, echo=settings.debug, future=True
            )

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(f"SQL storage initialized: {self.database_url}")

    async def close(self):
        """Dispose of the engine"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            logger.info("SQL storage closed")

    def get_session(self) -> AsyncSession:
        """Get database session"""
        if not self.engine:
            raise RuntimeError("Database not initialized")

        return AsyncSession(self.engine, expire_on_commit=False)

    async def find_by_id(self, ship_id: int) -> Optional[Ship]:
        """Get ship by ID"""
        session = self.get_session()
        try:
            statement = select(Ship).where(Ship.id == ship_id)
            result = await session.execute(statement)
            return result.scalar_one_or_none()
        finally:
            await session.close()

    async def save(self, ship: Ship) -> Ship:
        """Insert a new ship or update an existing one"""
        session = self.get_session()
        try:
            if ship.id is None:
                session.add(ship)
            else:
                # merge() copies the state of a detached instance into a persistent one
                ship = await session.merge(ship)
            await session.commit()
            await session.refresh(ship)
            return ship
        finally:
            await session.close()

    async def delete(self, ship: Ship) -> None:
        """Delete ship record"""
        session = self.get_session()
        try:
            await session.execute(delete(Ship).where(Ship.id == ship.id))
            await session.commit()
        finally:
            await session.close()

    async def find_all(self, spec: Specification, page: PageRequest) -> Page:
        """Get one page of ships matching the specification"""
        column = getattr(Ship, page.order.field_name)
        ordering = column.desc() if page.direction is SortDirection.DESC else column.asc()
        session = self.get_session()
        try:
            statement = (
                select(Ship)
                .where(spec.to_clause())
                .order_by(ordering, Ship.id.asc())
                .offset(page.offset)
                .limit(page.page_size)
            )
            result = await session.execute(statement)
            items = list(result.scalars().all())
            total = await self._count(session, spec)
            return Page(
                items=items,
                total=total,
                page_number=page.page_number,
                page_size=page.page_size,
            )
        finally:
            await session.close()

    async def count(self, spec: Specification) -> int:
        """Count ships matching the specification"""
        session = self.get_session()
        try:
            return await self._count(session, spec)
        finally:
            await session.close()

    async def _count(self, session: AsyncSession, spec: Specification) -> int:
        statement = select(func.count()).select_from(Ship).where(spec.to_clause())
        result = await session.execute(statement)
        return result.scalar_one()
