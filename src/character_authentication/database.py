"""
Database access for the character host.

Provides the async SQLAlchemy engine, the session factory and the model
registry authenticators use to find their own models.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Mapping

from sqlalchemy import Table
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from character_authentication.models import Account, AuditLog, Base, Identity

logger = logging.getLogger(__name__)


def authenticator_model_prefix(name: str) -> str:
    """Registry prefix for an authenticator's own models.

    Example:
        >>> authenticator_model_prefix("local")
        'Authentication$Local$'
    """
    return f"Authentication${name.capitalize()}$"


class Database:
    """Async engine, session factory and model registry.

    Models are registered under host names such as ``Core$Identity`` or
    ``Authentication$Local$Credential``.
    """

    def __init__(self, url: str, echo: bool = False, pooled: bool = True):
        """Create the engine for a database URL.

        Args:
            url: SQLAlchemy async URL (sqlite+aiosqlite, postgresql+asyncpg)
            echo: Enable SQL logging
            pooled: Disable to use NullPool (tests)
        """
        # Convert postgresql:// to postgresql+asyncpg:// if needed
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

        engine_options = {"echo": echo}
        if not pooled:
            engine_options["poolclass"] = NullPool
        elif not url.startswith("sqlite"):
            engine_options["pool_pre_ping"] = True

        self.url = url
        self.engine = create_async_engine(url, **engine_options)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,
        )

        self.models: Dict[str, type] = {}
        self.register_model("Core$Identity", Identity)
        self.register_model("Core$AuditLog", AuditLog)
        self.register_model("Authentication$Account", Account)

    def register_model(self, name: str, model: type) -> None:
        """Register a model class under its host name.

        Raises:
            ValueError: If another model already uses the name
        """
        existing = self.models.get(name)
        if existing is not None and existing is not model:
            raise ValueError(f"Model name already registered: {name}")
        self.models[name] = model
        logger.debug(f"Registered model {name} ({model.__name__})")

    def register_authenticator_models(self, name: str, models: Mapping[str, type]) -> None:
        """Register an authenticator's models under its naming prefix."""
        prefix = authenticator_model_prefix(name)
        for short_name, model in models.items():
            self.register_model(f"{prefix}{short_name}", model)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session, rolling back if the block raises.

        Usage:
            async with database.session() as db:
                result = await db.execute(select(Identity))
        """
        async with self.sessionmaker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    def tables(self) -> List[Table]:
        """Tables of the registered models, in dependency order"""
        registered = {model.__table__ for model in self.models.values()}
        return [table for table in Base.metadata.sorted_tables if table in registered]

    async def init_db(self) -> None:
        """
        Create the tables of registered models.

        Authenticator tables exist only once the authenticator's models are
        registered. Should only be used in development/testing.
        """
        tables = self.tables()
        async with self.engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: Base.metadata.create_all(sync_conn, tables=tables))

    async def drop_db(self) -> None:
        """
        Drop the tables of registered models.

        WARNING: This will delete all data!
        """
        tables = self.tables()
        async with self.engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: Base.metadata.drop_all(sync_conn, tables=tables))

    async def close(self) -> None:
        """Dispose the engine and its connections."""
        await self.engine.dispose()

