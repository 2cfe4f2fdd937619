"""Asset catalog endpoints — filtered browsing, filter dropdown values, export."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query, Request, Response

from assetbridge.api.v1.filters import filter_spec_params
from assetbridge.core.config import settings
from assetbridge.core.deps import OwnerContext, get_asset_store, get_owner_context, get_view_cache
from assetbridge.core.limiter import limiter
from assetbridge.schemas.asset import AssetListResponse, AssetOut, DistinctValuesResponse
from assetbridge.schemas.filters import FilterSpec
from assetbridge.services.asset_store import AssetStore
from assetbridge.services.export_naming import build_filename
from assetbridge.services.export_query import fetch_all
from assetbridge.services.export_serializers import ExportFormat, serialize
from assetbridge.services.filters import owner_constraints
from assetbridge.services.view_cache import ViewCacheBackend

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace('"', "")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


# ─── List assets ───

@router.get(
    "",
    response_model=AssetListResponse,
    summary="List assets, newest first, with the same filters as export",
)
async def list_assets(
    owner: Annotated[OwnerContext, Depends(get_owner_context)],
    store: Annotated[AssetStore, Depends(get_asset_store)],
    spec: Annotated[FilterSpec, Depends(filter_spec_params)],
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
):
    offset = (page - 1) * page_size
    # One extra row tells us whether another page exists without a COUNT query.
    rows = await store.query_page(owner_constraints(spec, owner.owner_id), offset, page_size + 1)
    items = [AssetOut.model_validate(a) for a in rows[:page_size]]
    return AssetListResponse(items=items, page=page, page_size=page_size, has_more=len(rows) > page_size)


# ─── Filter dropdown values ───

@router.get("/locations", response_model=DistinctValuesResponse, summary="Distinct asset locations")
async def list_locations(
    owner: Annotated[OwnerContext, Depends(get_owner_context)],
    store: Annotated[AssetStore, Depends(get_asset_store)],
    cache: Annotated[ViewCacheBackend, Depends(get_view_cache)],
):
    values = await cache.get_or_load(
        owner.owner_id, "locations", lambda: store.distinct_values(owner.owner_id, "location")
    )
    return DistinctValuesResponse(values=values)


@router.get("/units", response_model=DistinctValuesResponse, summary="Distinct asset units")
async def list_units(
    owner: Annotated[OwnerContext, Depends(get_owner_context)],
    store: Annotated[AssetStore, Depends(get_asset_store)],
    cache: Annotated[ViewCacheBackend, Depends(get_view_cache)],
):
    values = await cache.get_or_load(
        owner.owner_id, "units", lambda: store.distinct_values(owner.owner_id, "unit")
    )
    return DistinctValuesResponse(values=values)


# ─── Export ───

@router.get(
    "/export",
    summary="Export filtered assets as CSV, XLSX or PDF",
    description="Returns every matching asset (no pagination). 404 when the filters match nothing.",
    response_class=Response,
)
@limiter.limit(settings.RATE_LIMIT_EXPORT)
async def export_assets(
    request: Request,
    owner: Annotated[OwnerContext, Depends(get_owner_context)],
    store: Annotated[AssetStore, Depends(get_asset_store)],
    spec: Annotated[FilterSpec, Depends(filter_spec_params)],
    fmt: Annotated[ExportFormat, Query(alias="format")] = ExportFormat.csv,
):
    records = await fetch_all(store, spec, owner.owner_id)

    now = datetime.now(timezone.utc)
    filename = build_filename(
        owner.owner_name,
        fmt.extension,
        spec,
        now=now,
        prefix=settings.EXPORT_FILENAME_PREFIX,
        utc_offset_hours=settings.EXPORT_UTC_OFFSET_HOURS,
    )
    artifact = serialize(
        records,
        fmt,
        filename,
        owner_name=owner.owner_name,
        generated_at=now.astimezone(timezone(timedelta(hours=settings.EXPORT_UTC_OFFSET_HOURS))),
        product_name=settings.EXPORT_PRODUCT_NAME,
    )
    logger.info("Export owner=%s format=%s records=%d file=%s", owner.owner_id, fmt.value, len(records), filename)

    return Response(
        content=artifact.payload,
        media_type=artifact.media_type,
        headers={"Content-Disposition": content_disposition(artifact.filename)},
    )
