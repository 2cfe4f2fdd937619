"""Bulk asset import: sequential, best-effort, one persistence call per row.

There is no transaction around the batch: every row succeeds or fails on its
own, and a failure (validation, backend rejection or an unexpected error) is
recorded against the row's 1-based source line number before moving on. The
header occupies line 1, so the first data row is line 2.
"""
import logging
import uuid
from collections.abc import Awaitable, Callable, Sequence

from assetbridge.schemas.imports import FieldIssue, ImportResult
from assetbridge.services.asset_store import AssetStore
from assetbridge.services.row_validator import RowValidationError, validate_row

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2
UNKNOWN_ERROR_MESSAGE = "Unknown error"
CANCELLED_MESSAGE = "import cancelled"


def _issue(row_number: int, message: str, row: dict[str, str]) -> FieldIssue:
    return FieldIssue(row_number=row_number, message=message, data=dict(row))


async def import_assets(
    rows: Sequence[dict[str, str]],
    owner_id: uuid.UUID,
    store: AssetStore,
    *,
    should_continue: Callable[[], Awaitable[bool]] | None = None,
) -> ImportResult:
    """Validate and persist ``rows`` in order, collecting per-row failures.

    Args:
        rows: Raw rows keyed by canonical field names (see parse_csv).
        owner_id: Tenant the new assets belong to; never read from the rows.
        store: Persistence collaborator; awaited once per valid row.
        should_continue: Optional async cancellation check, awaited before each row
            (e.g. "is the client still connected"). Once it returns False
            every remaining row is reported as cancelled.

    Returns:
        ImportResult where success_count + len(errors) == len(rows).
    """
    result = ImportResult()
    cancelled = False

    for idx, row in enumerate(rows, start=FIRST_DATA_ROW):
        if not cancelled and should_continue is not None and not await should_continue():
            cancelled = True
            logger.info("Import for owner=%s cancelled at row %d", owner_id, idx)
        if cancelled:
            result.errors.append(_issue(idx, CANCELLED_MESSAGE, row))
            continue

        try:
            record = validate_row(row, owner_id)
            outcome = await store.insert_one(record)
        except RowValidationError as exc:
            logger.debug("Row %d rejected: %s", idx, exc.message)
            result.errors.append(_issue(idx, exc.message, row))
            continue
        except Exception as exc:
            logger.warning("Row %d failed unexpectedly: %s", idx, exc, exc_info=True)
            result.errors.append(_issue(idx, str(exc) or UNKNOWN_ERROR_MESSAGE, row))
            continue

        if outcome.ok:
            result.success_count += 1
        else:
            logger.debug("Row %d rejected by store: %s", idx, outcome.error)
            result.errors.append(_issue(idx, outcome.error or UNKNOWN_ERROR_MESSAGE, row))

    logger.info(
        "Asset import finished owner=%s rows=%d imported=%d failed=%d",
        owner_id, len(rows), result.success_count, len(result.errors),
    )
    return result
