from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from docapproval.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str):
    """Create an engine; SQLite connections are shared across worker threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
