"""Persistence collaborator for the import/export pipeline.

The pipeline only needs four operations from storage: insert one validated
record, fetch every match for a set of constraints, fetch one page of
matches, and list distinct values of a column. ``AssetStore`` names that
contract; ``SqlAlchemyAssetStore`` implements it over an AsyncSession.
"""
import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from assetbridge.models.asset import Asset
from assetbridge.schemas.asset import AssetCreate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InsertOutcome:
    ok: bool
    error: str | None = None
    asset_id: uuid.UUID | None = None

    @classmethod
    def success(cls, asset_id: uuid.UUID | None = None) -> "InsertOutcome":
        return cls(ok=True, asset_id=asset_id)

    @classmethod
    def failure(cls, reason: str) -> "InsertOutcome":
        return cls(ok=False, error=reason)


class AssetStore(Protocol):
    async def insert_one(self, record: AssetCreate) -> InsertOutcome: ...

    async def query_many(
        self,
        constraints: Sequence[ColumnElement[bool]],
        limit: int | None = None,
    ) -> list[Asset]: ...

    async def query_page(
        self,
        constraints: Sequence[ColumnElement[bool]],
        offset: int,
        limit: int,
    ) -> list[Asset]: ...

    async def distinct_values(self, owner_id: uuid.UUID, column: str) -> list[str]: ...


def _backend_message(exc: Exception) -> str:
    # DBAPI errors carry the driver message on .orig; keep its first line.
    text = str(getattr(exc, "orig", None) or exc).strip()
    return text.splitlines()[0] if text else exc.__class__.__name__


def newest_first(constraints: Sequence[ColumnElement[bool]]):
    """Base statement shared by list and export: filtered, newest first."""
    return (
        select(Asset)
        .where(*constraints)
        .order_by(Asset.created_at.desc(), Asset.id.desc())
    )


class SqlAlchemyAssetStore:
    """AssetStore over an async SQLAlchemy session; one commit per inserted row."""

    DISTINCT_COLUMNS = ("location", "unit")

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_one(self, record: AssetCreate) -> InsertOutcome:
        fields = record.model_dump()
        fields["status"] = record.status.value
        asset = Asset(**fields)
        self.db.add(asset)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            return InsertOutcome.failure(_backend_message(exc))
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.warning("Insert of asset code=%s failed: %s", record.code, exc)
            return InsertOutcome.failure(_backend_message(exc))
        return InsertOutcome.success(asset.id)

    async def query_many(
        self,
        constraints: Sequence[ColumnElement[bool]],
        limit: int | None = None,
    ) -> list[Asset]:
        stmt = newest_first(constraints)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def query_page(
        self,
        constraints: Sequence[ColumnElement[bool]],
        offset: int,
        limit: int,
    ) -> list[Asset]:
        stmt = newest_first(constraints).offset(offset).limit(limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def distinct_values(self, owner_id: uuid.UUID, column: str) -> list[str]:
        if column not in self.DISTINCT_COLUMNS:
            raise ValueError(f"distinct values not supported for column '{column}'")
        col = getattr(Asset, column)
        stmt = (
            select(col)
            .where(Asset.owner_id == owner_id, col.is_not(None), col != "")
            .distinct()
            .order_by(col.asc())
        )
        result = await self.db.execute(stmt)
        return [v for v in result.scalars().all() if v]
