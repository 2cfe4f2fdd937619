"""Query-string -> FilterSpec, shared by the list and export endpoints."""
from typing import Annotated

from fastapi import HTTPException, Query, status
from pydantic import ValidationError

from assetbridge.schemas.filters import FilterSpec


def filter_spec_params(
    search: Annotated[str | None, Query(description="Case-insensitive match on name or code; 'code:<code>' for an exact code lookup")] = None,
    status_filter: Annotated[str | None, Query(alias="status", description="active | maintenance | decommissioned | all")] = None,
    location: Annotated[str | None, Query(description="Exact location, or 'all'")] = None,
    unit: Annotated[str | None, Query(description="Exact unit, or 'all'")] = None,
) -> FilterSpec:
    try:
        return FilterSpec(search_text=search, status=status_filter, location=location, unit=unit)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid filter: {exc.errors()[0]['msg']}",
        )
