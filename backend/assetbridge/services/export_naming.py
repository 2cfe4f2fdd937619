"""Deterministic, filter-aware export filenames."""
import re
from datetime import datetime, timedelta, timezone

from assetbridge.schemas.filters import FilterSpec

DEFAULT_PREFIX = "assets"
DEFAULT_UTC_OFFSET_HOURS = -3

_WHITESPACE = re.compile(r"\s+")
# Reserved on Windows or POSIX filesystems, plus control characters.
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


def safe_filename_text(text: str) -> str:
    """Replace characters filenames cannot hold with ``-``."""
    return _UNSAFE_FILENAME_CHARS.sub("-", text)


def filename_part(text: str) -> str:
    return safe_filename_text(_WHITESPACE.sub("", text))


def export_timestamp(now: datetime | None = None, utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS) -> str:
    """Minute-precision stamp in a fixed UTC offset, e.g. ``2024-05-01_1430h``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    shifted = now.astimezone(timezone(timedelta(hours=utc_offset_hours)))
    return shifted.strftime("%Y-%m-%d_%H%M") + "h"


def filter_suffix(spec: FilterSpec | None) -> str:
    if spec is None:
        return ""
    return "".join(f"_{key}-{filename_part(value)}" for key, value in spec.active_filters())


def build_filename(
    owner_name: str,
    extension: str,
    spec: FilterSpec | None = None,
    *,
    now: datetime | None = None,
    prefix: str = DEFAULT_PREFIX,
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS,
) -> str:
    """``{prefix}_{owner}_{timestamp}{_key-value...}.{extension}``.

    Same owner, extension, filters and minute always give the same name.
    """
    stamp = export_timestamp(now, utc_offset_hours)
    return f"{prefix}_{safe_filename_text(owner_name)}_{stamp}{filter_suffix(spec)}.{extension.lstrip('.')}"
