"""Tests for the articles API routes."""

from datetime import datetime, timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from knowledge_hub.api.errors import StorageFailure
from knowledge_hub.api.models.database import Article
from knowledge_hub.config import config


def test_list_articles_only_published_newest_first(client):
    """Drafts are hidden and rows are ordered by updated_at desc."""
    response = client.get("/api/articles")
    assert response.status_code == 200

    data = response.json()
    assert [a["id"] for a in data] == [2, 3, 1]
    assert data[0]["version"] == "11.2.4"
    assert data[0]["category"] == "Troubleshooting"
    assert data[0]["module"] is None


def test_search_without_filters_matches_list(client):
    listed = client.get("/api/articles").json()
    searched = client.get("/api/articles/search").json()
    assert searched == listed


def test_search_keyword_matches_title_or_summary(client):
    response = client.get("/api/articles/search", params={"keyword": "  XQE "})
    assert response.status_code == 200

    titles = [a["title"] for a in response.json()]
    # Matches title of article 1; the draft article also mentions xqe but is hidden
    assert titles == ["XQE-DS-0014 after upgrade"]

    response = client.get("/api/articles/search", params={"keyword": "port conflict"})
    assert [a["id"] for a in response.json()] == [2]


def test_search_exact_filters(client):
    response = client.get(
        "/api/articles/search",
        params={"version": "12.0.0", "category": "Troubleshooting", "module": "Reporting"},
    )
    assert [a["id"] for a in response.json()] == [1]

    response = client.get("/api/articles/search", params={"category": "troubleshooting"})
    assert response.json() == []


def test_search_all_sentinel_does_not_filter(client):
    response = client.get(
        "/api/articles/search",
        params={"version": "All", "category": "All", "module": "All", "keyword": ""},
    )
    assert [a["id"] for a in response.json()] == [2, 3, 1]


def test_search_storage_error_is_reported(client):
    with patch(
        "knowledge_hub.api.services.store.ArticleStore._all",
        side_effect=OperationalError("SELECT", {}, Exception("database is locked")),
    ):
        response = client.get("/api/articles/search", params={"keyword": "xqe"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Search failed"
    assert body["kind"] == "StorageFailure"
    assert "database is locked" in body["detail"]


def test_get_article_detail(client):
    response = client.get("/api/articles/3")
    assert response.status_code == 200

    data = response.json()
    assert data["title"] == "Installing on RHEL 9"
    assert data["category_id"] == 2
    assert data["category"] == "Installation"
    assert data["module_id"] == 2
    assert data["module"] == "Dashboards"
    assert data["version"] == "12.0.0"


def test_get_article_not_found(client):
    response = client.get("/api/articles/999")
    assert response.status_code == 404
    assert response.json()["kind"] == "NotFound"
    assert response.json()["detail"] is None


def test_create_article_returns_joined_labels(client):
    response = client.post(
        "/api/articles",
        json={
            "title": "Gateway timeout",
            "summary": "Increase the gateway timeout.",
            "source_url": "https://example.com/kb/5",
            "version_id": 1,
            "category_id": 2,
            "module_id": 1,
        },
    )
    assert response.status_code == 201

    data = response.json()
    assert response.headers["location"] == f"/api/articles/{data['id']}"
    assert data["status"] == "published"
    assert data["version"] == "11.2.4"
    assert data["category"] == "Installation"
    assert data["module"] == "Reporting"
    assert data["updated_at"] is not None

    assert client.get(f"/api/articles/{data['id']}").status_code == 200


def test_create_article_defaults_to_no_references(client):
    response = client.post(
        "/api/articles",
        json={"title": "T", "summary": "S", "source_url": "https://example.com/t"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["version_id"] is None
    assert data["version"] is None


def test_create_article_missing_required_field(client):
    for missing in ("title", "summary", "source_url"):
        body = {"title": "T", "summary": "S", "source_url": "https://example.com/t"}
        body[missing] = "   "
        response = client.post("/api/articles", json=body)
        assert response.status_code == 400
        assert response.json()["kind"] == "MissingRequiredField"

    response = client.post("/api/articles", json={"title": "Only a title"})
    assert response.status_code == 400
    assert response.json()["kind"] == "MissingRequiredField"


def test_create_article_invalid_reference(client):
    response = client.post(
        "/api/articles",
        json={
            "title": "T",
            "summary": "S",
            "source_url": "https://example.com/t",
            "version_id": 999,
        },
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidReference"

    # The failed insert left nothing behind
    assert len(client.get("/api/articles").json()) == 3


def test_create_article_storage_failure(client):
    with patch(
        "knowledge_hub.api.services.store.ArticleStore.create_article",
        side_effect=StorageFailure("Error creating article", detail="disk full"),
    ):
        response = client.post(
            "/api/articles",
            json={"title": "T", "summary": "S", "source_url": "https://example.com/t"},
        )

    assert response.status_code == 500
    assert response.json()["kind"] == "StorageFailure"
    assert response.json()["detail"] == "disk full"


def test_update_article_partial(client):
    response = client.put(
        "/api/articles/1",
        json={"title": "XQE-DS-0014 fixed", "module_id": 2, "id": 77, "unknown": "x"},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["id"] == 1
    assert data["title"] == "XQE-DS-0014 fixed"
    assert data["module"] == "Dashboards"
    # Untouched fields keep their values
    assert data["summary"].startswith("Query service")
    assert data["version"] == "12.0.0"

    # updated_at refreshed, so the article is now listed first
    assert client.get("/api/articles").json()[0]["id"] == 1


def test_update_article_can_clear_reference(client):
    response = client.put("/api/articles/1", json={"version_id": None})
    assert response.status_code == 200
    assert response.json()["version"] is None


def test_update_article_only_disallowed_keys(client):
    response = client.put("/api/articles/1", json={"id": 5, "updated_at": "2020-01-01"})
    assert response.status_code == 400
    assert response.json()["kind"] == "NoUpdatableFields"

    response = client.put("/api/articles/1", json={})
    assert response.status_code == 400
    assert response.json()["kind"] == "NoUpdatableFields"


def test_update_article_cannot_blank_required_field(client):
    response = client.put("/api/articles/1", json={"title": ""})
    assert response.status_code == 400
    assert response.json()["kind"] == "MissingRequiredField"


def test_update_missing_article_is_404_regardless_of_body(client):
    assert client.put("/api/articles/999", json={"title": "New"}).status_code == 404
    assert client.put("/api/articles/999", json={"nope": 1}).status_code == 404
    assert client.put("/api/articles/999", json={"title": ""}).status_code == 404

    # Bodies that would not even validate
    for body in ({"version_id": "abc"}, {"status": "archived"}, ["title"]):
        response = client.put("/api/articles/999", json=body)
        assert response.status_code == 404
        assert response.json()["kind"] == "NotFound"


def test_update_article_rejects_badly_typed_values(client):
    response = client.put("/api/articles/1", json={"version_id": "abc"})
    assert response.status_code == 400
    body = response.json()
    assert body["kind"] == "InvalidRequest"
    assert "version_id" in body["error"]
    assert body["detail"] is None

    response = client.put("/api/articles/1", json={"status": "archived"})
    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidRequest"

    # Nothing was written
    assert client.get("/api/articles/1").json()["version_id"] == 2


def test_non_integer_id_is_not_found(client):
    for method, path in (
        ("GET", "/api/articles/abc"),
        ("PUT", "/api/articles/abc"),
        ("DELETE", "/api/articles/abc"),
    ):
        response = client.request(method, path, json={"title": "New"})
        assert response.status_code == 404
        assert response.json()["kind"] == "NotFound"


def test_create_article_rejects_badly_typed_values(client):
    response = client.post(
        "/api/articles",
        json={
            "title": "T",
            "summary": "S",
            "source_url": "https://example.com/t",
            "category_id": "abc",
        },
    )
    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidRequest"
    assert set(response.json()) == {"error", "kind", "detail", "timestamp"}


def test_update_article_invalid_reference(client):
    response = client.put("/api/articles/1", json={"category_id": 999})
    assert response.status_code == 400
    assert response.json()["kind"] == "InvalidReference"

    # Original value kept
    assert client.get("/api/articles/1").json()["category_id"] == 1


def test_update_article_publishes_draft(client):
    response = client.put("/api/articles/4", json={"status": "published"})
    assert response.status_code == 200
    assert response.json()["status"] == "published"
    assert 4 in [a["id"] for a in client.get("/api/articles").json()]


def test_delete_article_twice(client):
    response = client.delete("/api/articles/2")
    assert response.status_code == 204
    assert response.content == b""

    response = client.delete("/api/articles/2")
    assert response.status_code == 404
    assert client.get("/api/articles/2").status_code == 404


def test_delete_article_removes_tag_links(client):
    assert client.delete("/api/articles/1").status_code == 204
    assert client.get("/api/articles/1/tags").json() == []
    # The FAQ survives, detached from the article
    faqs = client.get("/api/faqs").json()
    assert {f["id"]: f["article_id"] for f in faqs}[1] is None


def test_write_routes_require_api_key_when_configured(client, monkeypatch):
    monkeypatch.setattr(config.security, "api_key", "secret")
    body = {"title": "T", "summary": "S", "source_url": "https://example.com/t"}

    response = client.post("/api/articles", json=body)
    assert response.status_code == 401
    assert response.json()["kind"] == "MissingApiKey"

    response = client.post("/api/articles", json=body, headers={"X-API-Key": "wrong"})
    assert response.status_code == 403
    assert response.json()["kind"] == "InvalidApiKey"

    response = client.post("/api/articles", json=body, headers={"X-API-Key": "secret"})
    assert response.status_code == 201

    assert client.delete("/api/articles/2").status_code == 401
    # Reads stay public
    assert client.get("/api/articles").status_code == 200


def test_results_are_capped_at_100_newest_first(client, test_db):
    start = datetime(2025, 3, 1)
    test_db.add_all(
        [
            Article(
                id=100 + i,
                title=f"Bulk article {i}",
                summary="Generated for paging",
                source_url=f"https://example.com/bulk/{i}",
                status="published",
                category_id=1,
                updated_at=start + timedelta(minutes=i),
            )
            for i in range(120)
        ]
    )
    test_db.commit()

    expected = [100 + i for i in range(119, 19, -1)]
    for params in ({}, {"category": "Troubleshooting"}, {"keyword": "bulk"}):
        path = "/api/articles/search" if params else "/api/articles"
        response = client.get(path, params=params)
        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == expected

    assert len(client.get("/api/articles/search").json()) == 100
