from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from storefront.core_settings import get_settings
from storefront.domain.models import Base

def build_engine(url: str, pool_size: int = 10, pool_timeout: float = 30.0) -> Engine:
    if url.startswith("sqlite"):
        # In-memory sqlite must share one connection between threads
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, future=True, **kwargs)
    # Bounded pool: callers queue for up to pool_timeout seconds once all connections are checked out
    return create_engine(
        url,
        echo=False,
        future=True,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
    )

settings = get_settings()
engine = build_engine(settings.database_url, settings.DB_POOL_SIZE, settings.DB_POOL_TIMEOUT)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

def get_db() -> Session:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_models():
    Base.metadata.create_all(engine)
