"""Pydantic schemas for CSV bulk import results."""
from pydantic import BaseModel, ConfigDict


class FieldIssue(BaseModel):
    """One rejected row: 1-based source row number, reason and the row as read."""
    model_config = ConfigDict(frozen=True)

    row_number: int
    message: str
    data: dict[str, str | None]


class ImportResult(BaseModel):
    success_count: int = 0
    errors: list[FieldIssue] = []

    @property
    def total_rows(self) -> int:
        return self.success_count + len(self.errors)
