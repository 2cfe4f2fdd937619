"""Export query builder: the full, unpaginated record set for a FilterSpec."""
import logging
import uuid

from assetbridge.core.exceptions import NoMatchingRecordsError
from assetbridge.models.asset import Asset
from assetbridge.schemas.filters import FilterSpec
from assetbridge.services.asset_store import AssetStore
from assetbridge.services.filters import owner_constraints

logger = logging.getLogger(__name__)


async def fetch_all(store: AssetStore, spec: FilterSpec, owner_id: uuid.UUID) -> list[Asset]:
    """All of the owner's assets matching ``spec``, newest first.

    Raises NoMatchingRecordsError when nothing matches, so callers never build
    an empty export.
    """
    records = await store.query_many(owner_constraints(spec, owner_id), limit=None)
    if not records:
        logger.info("Export for owner=%s matched no records (filters=%s)", owner_id, spec.active_filters())
        raise NoMatchingRecordsError()
    return records
