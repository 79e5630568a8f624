from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from precosmart.core.config import settings
from precosmart.models.organization import Base


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across the threads of the test client
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # Create tables in dev/test without running Alembic
    if settings.env in {"dev", "test"}:
        import precosmart.models  # noqa: F401  registers every table on Base.metadata

        Base.metadata.create_all(bind=engine)
