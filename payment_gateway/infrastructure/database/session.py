"""Database engine and session factory for the SQL snapshot store"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from payment_gateway.infrastructure.database.models import Base


def create_session_factory(database_url: str) -> sessionmaker:
    """Build an engine for `database_url`, create tables, return a session factory"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Payment requests run on Starlette's threadpool
        connect_args["check_same_thread"] = False

    engine = create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)
    Base.metadata.create_all(bind=engine)

    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
