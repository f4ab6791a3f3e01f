"""SQLAlchemy engine, session factory and tables.

Users, recipes and feedback live in three tables. Recipes keep their queryable
attributes (cuisine, time, rating...) as columns and the full recipe document
as JSON. Sessions are request-scoped through `get_db`.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from src.utils.config import config


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_db_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared across FastAPI worker threads."""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Checks connection before use, auto-reconnects
        pool_size=10,
        max_overflow=20,
        pool_recycle=1800,  # Recycle connections every 30 min
    )


engine = create_db_engine(config.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class UserRecord(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(100), unique=True, nullable=False, index=True)
    preferences = Column(JSON, nullable=False, default=dict)
    favorite_recipe_ids = Column(JSON, nullable=False, default=list)
    feedback_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class RecipeRecord(Base):
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_id = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    cuisine_type = Column(String(100), nullable=False, index=True)
    cooking_time = Column(Integer, nullable=False)
    difficulty = Column(String(20), nullable=False)
    rating = Column(Float, nullable=False, default=0.0, index=True)
    total_ratings = Column(Integer, nullable=False, default=0)
    is_ai_generated = Column(Boolean, nullable=False, default=False)
    source = Column(String(50), nullable=False, default="user")
    # Full Recipe document (camelCase)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class FeedbackRecord(Base):
    __tablename__ = "recipe_feedback"
    __table_args__ = (
        UniqueConstraint("user_id", "recipe_id", name="uq_feedback_user_recipe"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_rating_range"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(100), nullable=False, index=True)
    recipe_id = Column(String(100), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    review = Column(Text)
    cooking_notes = Column(Text)
    taste_rating = Column(Integer)
    difficulty_rating = Column(Integer)
    presentation_rating = Column(Integer)
    is_favorite = Column(Boolean, nullable=False, default=False)
    would_cook_again = Column(Boolean, nullable=False, default=False)
    tags = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = engine) -> None:
    Base.metadata.create_all(bind=bind)
