from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from gamenews.settings import settings

engine = create_engine(settings.database_url, future=True, echo=False)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create missing tables. Models must be imported so they register on Base."""
    from gamenews.models import post  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
