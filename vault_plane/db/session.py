from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vault_plane.core.config import settings


def make_engine(url: str | None = None) -> Engine:
    """
    Create the engine the finders' queries are executed on.
    In-memory SQLite gets a single shared connection so every session sees one database.
    """
    url = url or settings.DATABASE_URL
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
