"""Filter model shared by the paginated asset list and the export endpoint."""
from pydantic import BaseModel, ConfigDict, field_validator

from assetbridge.models.asset import AssetStatus

ALL = "all"


class FilterSpec(BaseModel):
    """Which subset of a tenant's catalog an operation targets.

    ``"all"``, empty strings and ``None`` all mean "no constraint", and are
    normalised to ``None`` so that equivalent specs compare equal.
    """
    model_config = ConfigDict(frozen=True)

    search_text: str | None = None
    status: AssetStatus | None = None
    location: str | None = None
    unit: str | None = None

    @field_validator("search_text", "location", "unit", mode="before")
    @classmethod
    def _blank_or_all_is_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        if not v or v.lower() == ALL:
            return None
        return v

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        if v is None or isinstance(v, AssetStatus):
            return v
        v = str(v).strip().lower()
        if not v or v == ALL:
            return None
        return v

    def active_filters(self) -> list[tuple[str, str]]:
        """(key, value) pairs of constrained fields, in a fixed order."""
        pairs = [
            ("search", self.search_text),
            ("status", self.status.value if self.status else None),
            ("location", self.location),
            ("unit", self.unit),
        ]
        return [(k, v) for k, v in pairs if v]
