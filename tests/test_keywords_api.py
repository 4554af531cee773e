"""Keyword catalog API tests."""

import pytest
from httpx import ASGITransport, AsyncClient

from notesearch.api.deps import get_catalog
from notesearch.main import app


@pytest.fixture
async def client(catalog):
    app.dependency_overrides[get_catalog] = lambda: catalog
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.clear()


async def test_export_catalog(client):
    response = await client.get("/api/keywords")

    assert response.status_code == 200
    data = response.json()
    assert data["expansions"]["咖啡"] == ["咖啡馆", "手冲"]
    assert set(data["themes"]) == {"买手店", "美食", "咖啡"}


async def test_preview_expansion(client):
    response = await client.get("/api/keywords/expand", params={"q": "悉尼 买手店"})

    assert response.status_code == 200
    assert response.json() == {
        "query": "悉尼 买手店",
        "terms": ["悉尼 买手店", "sydney", "精品店", "购物", "时尚"],
    }


async def test_set_expansion_dedupes_and_applies(client, catalog):
    response = await client.put(
        "/api/keywords/expansions/甜品", json={"terms": ["蛋糕", "", "蛋糕", "马卡龙"]}
    )

    assert response.status_code == 200
    assert response.json() == {"key": "甜品", "terms": ["蛋糕", "马卡龙"]}
    assert catalog.get_expansions("甜品") == ["蛋糕", "马卡龙"]

    preview = await client.get("/api/keywords/expand", params={"q": "甜品"})
    assert preview.json()["terms"] == ["甜品", "蛋糕", "马卡龙"]


async def test_remove_expansion(client, catalog):
    response = await client.delete("/api/keywords/expansions/咖啡")

    assert response.status_code == 204
    assert not catalog.has_seed("咖啡")


async def test_remove_unknown_expansion_is_ignored(client):
    response = await client.delete("/api/keywords/expansions/unknown")

    assert response.status_code == 204


async def test_set_and_remove_theme(client, catalog):
    response = await client.put("/api/keywords/themes/甜品", json={"terms": ["蛋糕", "甜点"]})

    assert response.status_code == 200
    assert catalog.get_theme_terms("甜品") == ["蛋糕", "甜点"]

    response = await client.delete("/api/keywords/themes/甜品")
    assert response.status_code == 204
    assert "甜品" not in catalog.list_themes()


async def test_set_expansion_requires_terms(client):
    response = await client.put("/api/keywords/expansions/甜品", json={})

    assert response.status_code == 422
