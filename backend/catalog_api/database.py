from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .config import settings


def build_engine(url: str):
    """Engine with SQLite specifics applied when needed."""
    is_sqlite = url.startswith("sqlite")
    # check_same_thread=False: SQLite connections are used from FastAPI worker threads
    connect_args = {"check_same_thread": False, "timeout": 30} if is_sqlite else {}
    engine = create_engine(url, connect_args=connect_args)

    if is_sqlite:
        # Foreign keys are off by default in SQLite
        @event.listens_for(engine, "connect")
        def enable_sqlite_fk(dbapi_connection, _):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(settings.resolved_database_url)

# SessionLocal: the main way to talk to the database
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# Dependency for FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
