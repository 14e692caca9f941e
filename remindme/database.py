from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from remindme.config.settings import Settings

DATABASE_URL = Settings.DATABASE['url']


def build_engine(url: str, echo: bool = False):
    """Create an engine, adjusting connection args for the backend in use"""
    if url.startswith("sqlite"):
        # Sessions are opened from worker threads as well as the event loop
        if url in ("sqlite://", "sqlite:///:memory:"):
            return create_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool
            )
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})

    # If you're using PostgreSQL on Render or similar, keep sslmode=require
    return create_engine(url, echo=echo, connect_args={"sslmode": "require"})


engine = build_engine(DATABASE_URL, echo=Settings.DATABASE['echo'])

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_all_tables():
    """Create every table registered on Base"""
    # Models must be imported so they are registered on the metadata
    from remindme.models import Reminder, Notification  # noqa: F401
    Base.metadata.create_all(bind=engine)
