"""FilterSpec -> SQL constraints.

Both the paginated asset list and the export query build their WHERE clause
here, so a given FilterSpec always selects the same records on screen and in
the exported file.
"""
import uuid

from sqlalchemy import ColumnElement, or_

from assetbridge.models.asset import Asset
from assetbridge.schemas.filters import FilterSpec

CODE_LOOKUP_PREFIX = "code:"
PADDED_CODE_WIDTH = 4


def _contains(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _is_numeric(text: str) -> bool:
    return text.isascii() and text.isdigit()


def search_constraint(search_text: str) -> ColumnElement[bool]:
    """Name OR code contains the text, case-insensitively.

    A ``code:`` prefix (what the barcode scanner submits) is an exact code
    lookup instead; numeric codes match with or without leading zeros padded
    to four digits.
    """
    text = search_text.strip()
    if text.lower().startswith(CODE_LOOKUP_PREFIX):
        code = text[len(CODE_LOOKUP_PREFIX):].strip().lstrip("0") or "0"
        options = [Asset.code == code]
        if _is_numeric(code):
            options.append(Asset.code == code.zfill(PADDED_CODE_WIDTH))
        return or_(*options)

    pattern = _contains(text)
    return or_(
        Asset.name.ilike(pattern, escape="\\"),
        Asset.code.ilike(pattern, escape="\\"),
    )


def to_query_constraints(spec: FilterSpec) -> list[ColumnElement[bool]]:
    """Ordered constraints for ``spec``; unconstrained fields contribute nothing."""
    constraints: list[ColumnElement[bool]] = []
    if spec.search_text:
        constraints.append(search_constraint(spec.search_text))
    if spec.status is not None:
        constraints.append(Asset.status == spec.status.value)
    if spec.location:
        constraints.append(Asset.location == spec.location)
    if spec.unit:
        constraints.append(Asset.unit == spec.unit)
    return constraints


def owner_constraints(spec: FilterSpec, owner_id: uuid.UUID) -> list[ColumnElement[bool]]:
    """Tenant scope followed by the filter constraints."""
    return [Asset.owner_id == owner_id, *to_query_constraints(spec)]
