"""Shared fixtures: in-memory SQLite for query semantics, fake asset store, API overrides."""
import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from assetbridge.core.limiter import limiter
from assetbridge.db.base import Base
from assetbridge.models.asset import Asset
from assetbridge.services.asset_store import InsertOutcome

OWNER_ID = uuid.UUID("3b0e8a52-6c1d-4f7e-9a2b-5d4c3e2f1a0b")
OTHER_OWNER_ID = uuid.UUID("9f8e7d6c-5b4a-4392-8170-6f5e4d3c2b1a")
BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _disable_rate_limits():
    limiter.enabled = False
    yield
    limiter.enabled = True


# ─── Helpers ──────────────────────────────────────────────────────────────────

def make_asset(
    name: str = "Notebook",
    code: str = "NB001",
    owner_id: uuid.UUID = OWNER_ID,
    minutes: int = 0,
    **kwargs,
) -> Asset:
    """Build an unsaved Asset; ``minutes`` offsets created_at from BASE_TIME."""
    return Asset(
        id=kwargs.pop("id", uuid.uuid4()),
        owner_id=owner_id,
        name=name,
        code=code,
        status=kwargs.pop("status", "active"),
        inalienable=kwargs.pop("inalienable", False),
        created_at=BASE_TIME + timedelta(minutes=minutes),
        updated_at=BASE_TIME + timedelta(minutes=minutes),
        **kwargs,
    )


def full_asset(**overrides) -> Asset:
    """An asset with every exportable field populated."""
    fields = dict(
        name="Notebook Dell",
        code="NB001",
        location="Room 101",
        unit="Headquarters",
        status="maintenance",
        acquisition_date=date(2023, 1, 15),
        value=Decimal("2500.00"),
        serial_number="SN123456",
        color="Black",
        manufacturer="Dell",
        model="Inspiron 15",
        capacity="8GB RAM",
        voltage="Bivolt",
        origin="purchase",
        condition="New",
        holder="Jane Silva",
        inalienable=True,
        notes="Development notebook, 2nd floor",
    )
    fields.update(overrides)
    return make_asset(**fields)


class FakeAssetStore:
    """In-memory AssetStore: inserts are kept, queries return ``query_result``."""

    def __init__(self, query_result=None, fail_codes=(), raise_codes=()):
        self.inserted = []
        self.query_result = list(query_result or [])
        self.fail_codes = set(fail_codes)
        self.raise_codes = set(raise_codes)
        self.queries = []
        self.distinct_calls = []

    async def insert_one(self, record):
        if record.code in self.raise_codes:
            raise RuntimeError(f"connection reset while inserting {record.code}")
        if record.code in self.fail_codes or any(
            r.code == record.code and r.owner_id == record.owner_id for r in self.inserted
        ):
            return InsertOutcome.failure(
                'duplicate key value violates unique constraint "uq_assets_owner_code"'
            )
        self.inserted.append(record)
        return InsertOutcome.success(uuid.uuid4())

    async def query_many(self, constraints, limit=None):
        self.queries.append(("many", list(constraints), limit))
        return list(self.query_result)

    async def query_page(self, constraints, offset, limit):
        self.queries.append(("page", list(constraints), offset, limit))
        return list(self.query_result)[offset:offset + limit]

    async def distinct_values(self, owner_id, column):
        self.distinct_calls.append((owner_id, column))
        values = {getattr(a, column) for a in self.query_result if getattr(a, column)}
        return sorted(values)


# ─── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def sqlite_session():
    """Synchronous in-memory SQLite session with the assets table created."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture
def fake_store():
    return FakeAssetStore()
