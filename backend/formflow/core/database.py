from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool, StaticPool

# Create base class for models (can be defined before engine)
Base = declarative_base()


def get_database_url(db_url: str) -> str:
    """Get properly formatted async database URL"""
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif db_url.startswith("sqlite:///"):
        db_url = db_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return db_url


def build_engine(db_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the relational store.

    Connection pooling strategy:
    - SQLite in-memory: StaticPool (one shared connection keeps the schema alive)
    - SQLite file: NullPool
    - PostgreSQL: default QueuePool with pre-ping
    """
    db_url = get_database_url(db_url)

    if "sqlite" in db_url:
        if ":memory:" in db_url or db_url.rstrip("/").endswith("sqlite+aiosqlite:"):
            return create_async_engine(
                db_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_async_engine(
            db_url,
            echo=echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )

    return create_async_engine(
        db_url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before use
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the given engine"""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create tables that do not exist yet"""
    import formflow.models  # noqa: F401 - register tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(engine: AsyncEngine) -> None:
    import formflow.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
