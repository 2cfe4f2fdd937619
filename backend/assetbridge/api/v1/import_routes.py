"""CSV bulk import endpoint for assets."""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile, status

from assetbridge.core.config import settings
from assetbridge.core.deps import OwnerContext, get_asset_store, get_owner_context, get_view_cache
from assetbridge.core.limiter import limiter
from assetbridge.schemas.imports import ImportResult
from assetbridge.services.asset_import import import_assets
from assetbridge.services.asset_store import AssetStore
from assetbridge.services.csv_source import parse_csv
from assetbridge.services.header_normalizer import CANONICAL_FIELDS
from assetbridge.services.view_cache import ViewCacheBackend

logger = logging.getLogger(__name__)

router = APIRouter()

TEMPLATE_FILENAME = "assets_template.csv"
TEMPLATE_SAMPLE_ROWS = (
    "Dell Notebook,NB001,Room 101,Headquarters,active,2023-01-15,2500.00,SN123456,Black,Dell,"
    "Inspiron 15,8GB RAM,Bivolt,purchase,New,Jane Silva,no,Development notebook",
    "Samsung Monitor,MON001,Room 102,Headquarters,active,2023-02-10,800.00,MON789,White,Samsung,"
    "24 inch,1920x1080,110V,purchase,Used,Mary Santos,no,Secondary monitor",
)


# ─── POST /import/assets ───

@router.post("/assets", response_model=ImportResult, summary="Bulk import assets from CSV")
@limiter.limit(settings.RATE_LIMIT_IMPORT)
async def import_assets_csv(
    request: Request,
    owner: Annotated[OwnerContext, Depends(get_owner_context)],
    store: Annotated[AssetStore, Depends(get_asset_store)],
    cache: Annotated[ViewCacheBackend, Depends(get_view_cache)],
    file: UploadFile = File(...),
):
    """Import every row of the uploaded CSV; failures are reported per row.

    The whole upload is rejected (nothing imported) only when the file itself
    is unreadable or too large. Otherwise each row is imported or listed in
    ``errors`` with its 1-based line number and the original row data.
    """
    content = await file.read()
    if len(content) > settings.IMPORT_MAX_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.IMPORT_MAX_BYTES} bytes",
        )

    rows = parse_csv(content)
    if len(rows) > settings.IMPORT_MAX_ROWS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"File has {len(rows)} rows; the limit is {settings.IMPORT_MAX_ROWS}",
        )

    async def client_connected() -> bool:
        return not await request.is_disconnected()

    result = await import_assets(rows, owner.owner_id, store, should_continue=client_connected)

    # Cached locations/units may now be stale.
    await cache.invalidate_owner(owner.owner_id)
    logger.info(
        "CSV import file=%s owner=%s imported=%d failed=%d",
        file.filename, owner.owner_id, result.success_count, len(result.errors),
    )
    return result


# ─── GET /import/assets/template ───

@router.get("/assets/template", summary="Download a CSV template for asset import")
async def import_template(
    owner: Annotated[OwnerContext, Depends(get_owner_context)],
):
    content = "\n".join([",".join(CANONICAL_FIELDS), *TEMPLATE_SAMPLE_ROWS]) + "\n"
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={TEMPLATE_FILENAME}"},
    )
