"""Parse an uploaded delimited-text file into normalised raw rows."""
import csv
import io
import logging

from assetbridge.core.exceptions import MalformedSourceError
from assetbridge.services.header_normalizer import HeaderNormalizer, default_normalizer

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = (",", ";", "\t", "|")

RawRow = dict[str, str]


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise MalformedSourceError(f"file is not valid UTF-8 text ({exc.reason} at byte {exc.start})")


def detect_delimiter(header_line: str) -> str:
    """Pick the candidate delimiter that occurs most often in the header line."""
    counts = {d: header_line.count(d) for d in CANDIDATE_DELIMITERS}
    best = max(CANDIDATE_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def _is_blank(fields: list[str]) -> bool:
    return all(not f.strip() for f in fields)


def _check_unique_header(raw: list[str], header: list[str], line: int) -> None:
    seen: dict[str, str] = {}
    for original, key in zip(raw, header):
        if not key.strip():
            continue
        if key in seen:
            raise MalformedSourceError(
                f"columns {seen[key]!r} and {original!r} both map to field '{key}'",
                line=line,
            )
        seen[key] = original


def parse_csv(content: bytes, normalizer: HeaderNormalizer = default_normalizer) -> list[RawRow]:
    """Read a header row plus data rows; keys are normalised via ``normalizer``.

    Raises MalformedSourceError when the file as a whole cannot be read: bad
    encoding, missing header, two header columns mapping to the same field,
    or a row whose field count does not match the header. Blank lines are
    skipped.
    """
    text = _decode(content)
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    if not first_line:
        raise MalformedSourceError("file is empty; a header row is required")

    delimiter = detect_delimiter(first_line)
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)

    header: list[str] | None = None
    rows: list[RawRow] = []
    try:
        for fields in reader:
            if not fields or _is_blank(fields):
                continue
            if header is None:
                header = [normalizer(h) for h in fields]
                _check_unique_header(fields, header, reader.line_num)
                continue
            if len(fields) != len(header):
                raise MalformedSourceError(
                    f"expected {len(header)} fields, found {len(fields)}",
                    line=reader.line_num,
                )
            rows.append(dict(zip(header, fields)))
    except csv.Error as exc:
        raise MalformedSourceError(f"unreadable CSV: {exc}", line=reader.line_num)

    logger.debug("Parsed %d data rows (delimiter=%r, columns=%s)", len(rows), delimiter, header)
    return rows
