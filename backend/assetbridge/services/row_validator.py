"""Row validation and typed coercion for asset imports.

Only a missing ``name`` or ``code`` rejects a row. Every other field is
coerced best-effort: malformed numbers and dates become ``None``, unknown
statuses become ``active`` and anything but an affirmative token is ``False``.
"""
import re
import uuid
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from assetbridge.models.asset import AssetStatus
from assetbridge.schemas.asset import AssetCreate

REQUIRED_FIELDS_MESSAGE = "name and code are required"

_STATUS_ALIASES: dict[str, AssetStatus] = {
    "active": AssetStatus.active,
    "ativo": AssetStatus.active,
    "maintenance": AssetStatus.maintenance,
    "manutenção": AssetStatus.maintenance,
    "manutencao": AssetStatus.maintenance,
    "decommissioned": AssetStatus.decommissioned,
    "baixado": AssetStatus.decommissioned,
}

AFFIRMATIVE_TOKENS = frozenset({"sim", "yes", "true"})

_CURRENCY_PREFIXES = ("R$", "US$", "$", "€")
_CENTS = Decimal("0.01")
_DAY_FIRST_DATE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})")


class RowValidationError(ValueError):
    """Raised when a row cannot become an asset record."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ─── Field parsers ───

def clean_text(raw: str | None) -> str | None:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


def parse_status(raw: str | None) -> AssetStatus:
    text = clean_text(raw)
    if text is None:
        return AssetStatus.active
    return _STATUS_ALIASES.get(text.lower(), AssetStatus.active)


def parse_value(raw: str | None) -> Decimal | None:
    """Parse a monetary amount written with either decimal convention.

    When both separators appear the rightmost one is the decimal point, so
    "2.500,00" and "2,500.00" both read as 2500.00. A lone comma is a decimal
    comma. Anything unparseable or non-finite is None.
    """
    text = clean_text(raw)
    if text is None:
        return None
    for prefix in _CURRENCY_PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix):]
            break
    text = text.replace(" ", "").replace("\u00a0", "")

    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", ".")

    try:
        amount = Decimal(text)
        if not amount.is_finite():
            return None
        return amount.quantize(_CENTS)
    except InvalidOperation:
        return None


def parse_date(raw: str | None) -> date | None:
    """Accept ISO dates/datetimes and day-first DD/MM/YYYY (also with - or .)."""
    text = clean_text(raw)
    if text is None:
        return None

    match = _DAY_FIRST_DATE.match(text)
    if match:
        first, second, year = (int(g) for g in match.groups())
        # Day-first unless only the month-first reading is a real date.
        for day, month in ((first, second), (second, first)):
            try:
                return date(year, month, day)
            except ValueError:
                continue
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_bool(raw: str | None) -> bool:
    text = clean_text(raw)
    return text is not None and text.lower() in AFFIRMATIVE_TOKENS


# ─── Row rules ───

def check_required(row: dict[str, str]) -> str | None:
    """Return the rejection message if name or code is missing, else None."""
    if clean_text(row.get("name")) is None or clean_text(row.get("code")) is None:
        return REQUIRED_FIELDS_MESSAGE
    return None


def to_asset_record(row: dict[str, str], owner_id: uuid.UUID) -> AssetCreate:
    return AssetCreate(
        owner_id=owner_id,
        name=clean_text(row.get("name")),
        code=clean_text(row.get("code")),
        location=clean_text(row.get("location")),
        unit=clean_text(row.get("unit")),
        status=parse_status(row.get("status")),
        acquisition_date=parse_date(row.get("acquisition_date")),
        value=parse_value(row.get("value")),
        serial_number=clean_text(row.get("serial_number")),
        color=clean_text(row.get("color")),
        manufacturer=clean_text(row.get("manufacturer")),
        model=clean_text(row.get("model")),
        capacity=clean_text(row.get("capacity")),
        voltage=clean_text(row.get("voltage")),
        origin=clean_text(row.get("origin")),
        condition=clean_text(row.get("condition")),
        holder=clean_text(row.get("holder")),
        inalienable=parse_bool(row.get("inalienable")),
        notes=clean_text(row.get("notes")),
    )


def validate_row(row: dict[str, str], owner_id: uuid.UUID) -> AssetCreate:
    """Validate and coerce one normalised row; raises RowValidationError."""
    problem = check_required(row)
    if problem is not None:
        raise RowValidationError(problem)
    return to_asset_record(row, owner_id)
