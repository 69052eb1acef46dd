"""
SQLAlchemy database models for the API
"""

import logging
import os
import sqlite3

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    event,
    func,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker

from knowledge_hub.config import config

logger = logging.getLogger(__name__)

Base = declarative_base()

ARTICLE_STATUSES = ("draft", "published")


class Version(Base):
    """
    Product version an article applies to (e.g. "11.2.4")
    """

    __tablename__ = "versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(64), nullable=False, unique=True)

    def __repr__(self):
        return f"<Version(id={self.id}, label='{self.label}')>"


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


class Module(Base):
    __tablename__ = "modules"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(128), nullable=False, unique=True)

    def __repr__(self):
        return f"<Module(id={self.id}, name='{self.name}')>"


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True)

    def __repr__(self):
        return f"<Tag(id={self.id}, name='{self.name}')>"


class Article(Base):
    """
    Article model - a knowledge base entry, optionally linked to a
    version, category and module
    """

    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    summary = Column(Text, nullable=False)
    source_url = Column(String(512), nullable=False)
    status = Column(
        Enum(*ARTICLE_STATUSES, name="article_status"),
        nullable=False,
        default="published",
        server_default="published",
    )
    version_id = Column(Integer, ForeignKey("versions.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    module_id = Column(Integer, ForeignKey("modules.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())
    # Refreshed explicitly by every UPDATE issued from the store
    updated_at = Column(
        DateTime, nullable=False, index=True, server_default=func.current_timestamp()
    )

    def __repr__(self):
        return f"<Article(id={self.id}, title='{self.title}', status='{self.status}')>"


class ArticleTag(Base):
    __tablename__ = "article_tags"

    article_id = Column(
        Integer, ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)


class FAQ(Base):
    __tablename__ = "faqs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question = Column(Text, nullable=False)
    answer = Column(Text, nullable=False)
    article_id = Column(
        Integer, ForeignKey("articles.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at = Column(DateTime, nullable=False, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<FAQ(id={self.id}, article_id={self.article_id})>"


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores REFERENCES clauses unless enabled per connection."""
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Database configuration and session management
DATABASE_URL = config.database.sqlalchemy_url


def _engine_kwargs(url: str) -> dict:
    timeout = config.database.timeout
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"connect_args": {"check_same_thread": False, "timeout": timeout}}

    # Statements that run past DB_TIMEOUT fail with OperationalError
    if backend == "postgresql":
        connect_args = {"options": f"-c statement_timeout={int(timeout * 1000)}"}
    elif backend in ("mysql", "mariadb"):
        seconds = max(1, int(timeout))
        connect_args = {"read_timeout": seconds, "write_timeout": seconds}
    else:
        connect_args = {}
    return {
        "connect_args": connect_args,
        "pool_timeout": timeout,
        "pool_pre_ping": True,
    }


# Create engine
engine = create_engine(DATABASE_URL, echo=config.database.echo, **_engine_kwargs(DATABASE_URL))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Database session dependency for FastAPI endpoints

    Usage:
        @app.get("/items")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _database_type() -> str:
    # Don't log DATABASE_URL as it may contain credentials
    if DATABASE_URL.startswith("postgresql"):
        return "PostgreSQL"
    if DATABASE_URL.startswith("mysql"):
        return "MySQL"
    return "SQLite"


def init_db():
    """
    Initialize the database - create all tables
    """
    # Ensure database directory exists
    if DATABASE_URL.startswith("sqlite") and ":memory:" not in DATABASE_URL:
        db_path = DATABASE_URL.replace("sqlite:///", "")
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized successfully (type: %s)", _database_type())


def drop_db():
    """
    Drop all tables (useful for development/testing)
    """
    Base.metadata.drop_all(bind=engine)
    logger.info("Database tables dropped successfully (type: %s)", _database_type())
