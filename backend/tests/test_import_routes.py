"""API tests for CSV bulk import and the import template download."""
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from conftest import OWNER_ID, FakeAssetStore

from assetbridge.core.config import settings
from assetbridge.core.deps import OwnerContext, get_asset_store, get_owner_context, get_view_cache
from assetbridge.main import app
from assetbridge.services.csv_source import parse_csv
from assetbridge.services.header_normalizer import CANONICAL_FIELDS
from assetbridge.services.view_cache import ViewCache

OWNER = OwnerContext(user_id="user-1", owner_id=OWNER_ID, owner_name="acme")

SAMPLE_CSV = (
    "Nome;Código;Localização;Situação;Valor;Data de Aquisição;Inalienável\n"
    "Notebook;NB001;Room 101;ativo;2.500,00;15/01/2023;sim\n"
    ";MON1;Room 102;;;;\n"
    "Cadeira;CH01;Room 101;manutenção;350;;não\n"
).encode("utf-8")


@pytest.fixture
def store():
    return FakeAssetStore()


@pytest.fixture
def view_cache():
    return ViewCache(ttl_seconds=300)


@pytest_asyncio.fixture
async def client(store, view_cache):
    app.dependency_overrides[get_owner_context] = lambda: OWNER
    app.dependency_overrides[get_asset_store] = lambda: store
    app.dependency_overrides[get_view_cache] = lambda: view_cache
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def _upload(content: bytes, filename: str = "assets.csv"):
    return {"file": (filename, content, "text/csv")}


@pytest.mark.asyncio
async def test_import_reports_successes_and_row_errors(client, store):
    response = await client.post("/api/v1/import/assets", files=_upload(SAMPLE_CSV))

    assert response.status_code == 200
    body = response.json()
    assert body["success_count"] == 2
    assert len(body["errors"]) == 1
    error = body["errors"][0]
    assert error["row_number"] == 3
    assert error["message"] == "name and code are required"
    assert error["data"]["code"] == "MON1"

    notebook, chair = store.inserted
    assert str(notebook.value) == "2500.00"
    assert notebook.acquisition_date.isoformat() == "2023-01-15"
    assert notebook.inalienable is True
    assert chair.status.value == "maintenance"
    assert chair.owner_id == OWNER_ID


@pytest.mark.asyncio
async def test_import_invalidates_cached_views(client, view_cache):
    await view_cache.put(OWNER_ID, "locations", ["Old Room"])
    await client.post("/api/v1/import/assets", files=_upload(SAMPLE_CSV))
    assert await view_cache.get(OWNER_ID, "locations") is None


@pytest.mark.asyncio
async def test_duplicate_codes_fail_per_row(client, store):
    content = b"name,code\nA,X1\nB,X1\n"
    response = await client.post("/api/v1/import/assets", files=_upload(content))
    body = response.json()
    assert body["success_count"] == 1
    assert body["errors"][0]["row_number"] == 3
    assert "uq_assets_owner_code" in body["errors"][0]["message"]


@pytest.mark.asyncio
async def test_malformed_file_is_422_and_imports_nothing(client, store):
    content = b"name,code\nA,1\nB,2,extra\n"
    response = await client.post("/api/v1/import/assets", files=_upload(content))
    assert response.status_code == 422
    assert response.json()["detail"] == "Could not read CSV file: line 3: expected 2 fields, found 3"
    assert store.inserted == []


@pytest.mark.asyncio
async def test_empty_file_is_422(client):
    response = await client.post("/api/v1/import/assets", files=_upload(b""))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_header_only_file_imports_zero_rows(client):
    response = await client.post("/api/v1/import/assets", files=_upload(b"name,code\n"))
    assert response.status_code == 200
    assert response.json() == {"success_count": 0, "errors": []}


@pytest.mark.asyncio
async def test_oversized_upload_is_413(client, monkeypatch):
    monkeypatch.setattr(settings, "IMPORT_MAX_BYTES", 10)
    response = await client.post("/api/v1/import/assets", files=_upload(SAMPLE_CSV))
    assert response.status_code == 413


@pytest.mark.asyncio
async def test_too_many_rows_is_422(client, store, monkeypatch):
    monkeypatch.setattr(settings, "IMPORT_MAX_ROWS", 2)
    response = await client.post("/api/v1/import/assets", files=_upload(SAMPLE_CSV))
    assert response.status_code == 422
    assert "limit is 2" in response.json()["detail"]
    assert store.inserted == []


@pytest.mark.asyncio
async def test_missing_file_is_422(client):
    response = await client.post("/api/v1/import/assets")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_template_is_importable(client):
    response = await client.get("/api/v1/import/assets/template")

    assert response.status_code == 200
    assert "assets_template.csv" in response.headers["content-disposition"]
    rows = parse_csv(response.content)
    assert len(rows) == 2
    assert list(rows[0]) == list(CANONICAL_FIELDS)
    assert rows[0]["code"] == "NB001"
