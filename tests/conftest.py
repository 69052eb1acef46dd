"""Shared fixtures: in-memory database, seeded reference data, API client."""

import os

# Must be set before knowledge_hub reads its configuration
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from knowledge_hub.api.models.database import (  # noqa: E402
    FAQ,
    Article,
    ArticleTag,
    Base,
    Category,
    Module,
    Tag,
    Version,
    get_db,
)


@pytest.fixture()
def test_db():
    """Create an in-memory SQLite database with reference data and articles."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)
    session = TestSession()

    session.add_all(
        [
            Version(id=1, label="11.2.4"),
            Version(id=2, label="12.0.0"),
            Category(id=1, name="Troubleshooting", description="Known errors"),
            Category(id=2, name="Installation", description="Setup and upgrades"),
            Module(id=1, name="Reporting"),
            Module(id=2, name="Dashboards"),
            Tag(id=1, name="XQE"),
            Tag(id=2, name="JDBC"),
            Tag(id=3, name="Dispatcher"),
        ]
    )
    session.flush()

    session.add_all(
        [
            Article(
                id=1,
                title="XQE-DS-0014 after upgrade",
                summary="Query service cannot open the data source connection.",
                source_url="https://example.com/kb/1",
                status="published",
                version_id=2,
                category_id=1,
                module_id=1,
                updated_at=datetime(2025, 1, 1),
            ),
            Article(
                id=2,
                title="Dispatcher fails to start",
                summary="Port conflict prevents the dispatcher from registering.",
                source_url="https://example.com/kb/2",
                status="published",
                version_id=1,
                category_id=1,
                module_id=None,
                updated_at=datetime(2025, 1, 3),
            ),
            Article(
                id=3,
                title="Installing on RHEL 9",
                summary="Prerequisites for a clean installation.",
                source_url="https://example.com/kb/3",
                status="published",
                version_id=2,
                category_id=2,
                module_id=2,
                updated_at=datetime(2025, 1, 2),
            ),
            Article(
                id=4,
                title="Draft: JDBC driver matrix",
                summary="Work in progress xqe notes.",
                source_url="https://example.com/kb/4",
                status="draft",
                version_id=2,
                category_id=1,
                module_id=1,
                updated_at=datetime(2025, 1, 4),
            ),
        ]
    )
    session.flush()

    session.add_all(
        [
            ArticleTag(article_id=1, tag_id=1),
            ArticleTag(article_id=1, tag_id=2),
            ArticleTag(article_id=2, tag_id=3),
            FAQ(
                id=1,
                question="Where is the XQE log?",
                answer="Under logs/XQE.",
                article_id=1,
                created_at=datetime(2025, 2, 1),
            ),
            FAQ(
                id=2,
                question="Which JDBC driver do I need?",
                answer="The one matching your database version.",
                article_id=None,
                created_at=datetime(2025, 2, 2),
            ),
        ]
    )
    session.commit()

    yield session
    session.close()
    engine.dispose()


@pytest.fixture()
def client(test_db, monkeypatch):
    """Create a test client with the test database."""
    from knowledge_hub.api.main import app
    from knowledge_hub.config import config

    monkeypatch.setattr(config.security, "api_key", "")

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
