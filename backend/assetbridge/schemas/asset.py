"""Pydantic schemas for asset records."""
import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from assetbridge.models.asset import AssetStatus


# ─── Validated record (import output, persistence input) ───

class AssetCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner_id: uuid.UUID
    name: str
    code: str
    location: str | None = None
    unit: str | None = None
    status: AssetStatus = AssetStatus.active
    acquisition_date: date | None = None
    value: Decimal | None = None
    serial_number: str | None = None
    color: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    capacity: str | None = None
    voltage: str | None = None
    origin: str | None = None
    condition: str | None = None
    holder: str | None = None
    inalienable: bool = False
    notes: str | None = None


# ─── Read ───

class AssetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    code: str
    location: str | None
    unit: str | None
    status: str
    acquisition_date: date | None
    value: Decimal | None
    serial_number: str | None
    color: str | None
    manufacturer: str | None
    model: str | None
    capacity: str | None
    voltage: str | None
    origin: str | None
    condition: str | None
    holder: str | None
    inalienable: bool
    notes: str | None
    created_at: datetime


# ─── Paginated list response ───

class AssetListResponse(BaseModel):
    items: list[AssetOut]
    page: int
    page_size: int
    has_more: bool


class DistinctValuesResponse(BaseModel):
    values: list[str]
