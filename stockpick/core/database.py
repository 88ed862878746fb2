"""
Stockpick Database Configuration
SQLAlchemy setup for the inventory store
"""
import logging
from typing import Generator, List, Optional

from sqlalchemy import MetaData, create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import settings

logger = logging.getLogger(__name__)

INVENTORY_TABLES = ("inventory_items", "product_conversion_rates")


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Build an engine suited to the inventory store's backend

    In-memory SQLite keeps a single shared connection so every session
    sees the same tables; file SQLite is opened for use across threads;
    server databases get a sized connection pool.
    """
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(database_url, connect_args=connect_args,
                                 poolclass=StaticPool, echo=echo)
        return create_engine(database_url, connect_args=connect_args, echo=echo)

    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_recycle=3600,  # Recycle connections after 1 hour
        pool_pre_ping=True,  # Validate connections before use
        echo=echo,
    )


engine = create_db_engine(settings.DATABASE_URL, echo=settings.DEBUG)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Metadata with naming convention for constraints
Base = declarative_base(metadata=MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}))


def get_db() -> Generator:
    """
    Dependency function to get database session

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None) -> List[str]:
    """
    Create the inventory tables that do not exist yet

    Returns the names of the tables created.
    """
    bind = bind or engine
    try:
        from stockpick.models import inventory  # noqa: F401

        existing = set(inspect(bind).get_table_names())
        Base.metadata.create_all(bind=bind)
        created = [name for name in INVENTORY_TABLES if name not in existing]
        if created:
            logger.info(f"Created inventory tables: {', '.join(created)}")
        return created

    except Exception as e:
        logger.error(f"Error initializing inventory store: {e}")
        raise


def check_db_connection(bind: Optional[Engine] = None) -> bool:
    """True when the inventory store answers a trivial query"""
    try:
        with (bind or engine).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Inventory store connection failed: {e}")
        return False
