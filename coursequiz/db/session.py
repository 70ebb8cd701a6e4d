from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from coursequiz.core.config import settings


def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        # SQLite connections are shared across FastAPI's worker threads
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_size=20,  # Maximum number of connections to keep
        max_overflow=10,  # Maximum number of connections that can be created beyond pool_size
        pool_timeout=30,  # Seconds to wait before giving up on getting a connection from the pool
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_pre_ping=True,
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
