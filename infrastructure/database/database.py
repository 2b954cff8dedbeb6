from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy import text
from sqlalchemy.orm import declarative_base, sessionmaker
from config.settings import DATABASE_URL, SQL_ECHO

# Create engine; left unset when no database is configured
engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO) if DATABASE_URL else None

# Create session factory
SessionLocal = (
    sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=AsyncSession)
    if engine is not None
    else None
)

# Base for models
Base = declarative_base()

# Ensure all model modules register with Base metadata
from infrastructure.database import models as _models  # noqa: E402,F401


def _require_engine():
    if engine is None:
        raise ValueError("DATABASE_URL environment variable is not set. Please set it in your .env file.")
    return engine


async def get_db():
    _require_engine()
    db = SessionLocal()
    try:
        yield db
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    finally:
        await db.close()

async def create_tables():
    async with _require_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def drop_tables():
    async with _require_engine().begin() as conn:
        for table in Base.metadata.sorted_tables:
            await conn.execute(text(f"DROP TABLE IF EXISTS {table.name} CASCADE"))
