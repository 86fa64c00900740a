from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from taskboard.core.config import settings

# SQLite needs cross-thread access under the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
