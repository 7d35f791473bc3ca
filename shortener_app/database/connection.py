from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def create_session_factory(database_url: str, **engine_kwargs) -> sessionmaker:
    """
    Create an engine for `database_url` and return a session factory bound to it.

    SQLite needs check_same_thread=False because FastAPI runs sync code
    in a threadpool.
    """
    if database_url.startswith("sqlite"):
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        engine_kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(database_url, **engine_kwargs)
    return sessionmaker(autoflush=False, bind=engine)
