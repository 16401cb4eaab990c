"""Locale-tolerant date/time normalization for pt/es/en listing pages.

Every successful parse is an aware datetime in the target timezone. Inputs
without a zone are read as wall-clock time in that timezone. Strategies are
tried in a fixed order and the first valid calendar date wins:

  1. ISO-8601 anywhere in the raw text
  2. numeric day/month/year formats on the cleaned text (whole string)
  3. named months: "4 de novembro de 2025", "4 November 2025", "Nov 4, 2025"
  4. a day/month/year triplet anywhere in the cleaned text

Date-only values from steps 2-4 default to noon local time.
"""

import re
import unicodedata
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from .config import get_timezone

NOON = 12

_ISO_RE = re.compile(
    r"(?<!\d)(\d{4})-(\d{2})-(\d{2})"
    r"(?:[Tt ](\d{2}):(\d{2})(?::(\d{2})(?:[.,](\d{1,6})\d*)?)?"
    r"(Z|z|[+-]\d{2}(?::?\d{2})?|\s+[+-]\d{2}:?\d{2}(?!\d))?)?"
)

# Optional trailing time: "18:45", ", 18:45", "- 18:45", "at 3:45 pm"
_TIME = r"(?:\s*(?:,|-|at)?\s*(\d{1,2}):(\d{2})\s*([ap]\.?\s?m\.?)?)?"

_NUMERIC_FORMATS = []
for _sep in ("/", "-", r"\."):
    _date = rf"(\d{{1,2}}){_sep}(\d{{1,2}}){_sep}(\d{{4}})"
    _NUMERIC_FORMATS.append(re.compile(_date + r"\s*(?:,|-)?\s*(\d{1,2}):(\d{2})"))
    _NUMERIC_FORMATS.append(re.compile(_date))

_DAY_MONTH_YEAR_RE = re.compile(
    r"(?<!\d)(\d{1,2})\s*(?:º|°|o)?\s+(?:de\s+)?([^\W\d_]+)\.?,?\s+(?:de\s+)?(\d{4})" + _TIME,
    re.IGNORECASE,
)
_MONTH_DAY_YEAR_RE = re.compile(
    r"\b([^\W\d_]+)\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})" + _TIME,
    re.IGNORECASE,
)
_LOOSE_NUMERIC_RE = re.compile(r"(?<!\d)(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})(?:\s+(\d{1,2}):(\d{2}))?")

_PREFIX_RE = re.compile(r"(?:Publicad[oa]|Atualizad[oa])\s+em\s*:?\s*", re.IGNORECASE)
_AS_HOUR_RE = re.compile(r"\b[àá]s\s+(\d{1,2})(?![\d:h])", re.IGNORECASE)
_AS_MARKER_RE = re.compile(r"\b[àá]s\s+(?=\d)", re.IGNORECASE)
_HOUR_SHORTHAND_RE = re.compile(r"\b(\d{1,2})h(\d{2})?(?:min)?\b", re.IGNORECASE)
_DASHES = str.maketrans({c: "-" for c in "‐‑‒–—―−"})

# Keys are lowercase and accent-free
ROMANCE_MONTHS = {
    "janeiro": 1, "jan": 1, "enero": 1, "ene": 1,
    "fevereiro": 2, "fev": 2, "febrero": 2, "feb": 2,
    "marco": 3, "mar": 3, "marzo": 3,
    "abril": 4, "abr": 4,
    "maio": 5, "mai": 5, "mayo": 5, "may": 5,
    "junho": 6, "jun": 6, "junio": 6,
    "julho": 7, "jul": 7, "julio": 7,
    "agosto": 8, "ago": 8,
    "setembro": 9, "set": 9, "septiembre": 9, "setiembre": 9, "sep": 9, "sept": 9,
    "outubro": 10, "out": 10, "octubre": 10, "oct": 10,
    "novembro": 11, "nov": 11, "noviembre": 11,
    "dezembro": 12, "dez": 12, "diciembre": 12, "dic": 12,
}

ENGLISH_MONTHS = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}


def _fold(word: str) -> str:
    decomposed = unicodedata.normalize("NFKD", word.lower().rstrip("."))
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def month_number(name: str, table: dict) -> int | None:
    """Resolve a month name or abbreviation against one month table."""
    return table.get(_fold(name or ""))


def _build(year, month, day, hour=0, minute=0, second=0, micro=0, tzinfo=None):
    try:
        return datetime(year, month, day, hour, minute, second, micro, tzinfo=tzinfo)
    except (ValueError, OverflowError):
        return None


def _hour(hour: str | None, meridiem: str | None = None) -> int:
    if hour is None:
        return NOON
    h = int(hour)
    if meridiem:
        pm = meridiem.lower().startswith("p")
        h = h % 12 + (12 if pm else 0)
    return h


def _offset(zone: str):
    if zone in ("Z", "z"):
        return timezone.utc
    sign = -1 if zone[0] == "-" else 1
    digits = zone[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:] or 0)
    try:
        return timezone(sign * timedelta(hours=hours, minutes=minutes))
    except ValueError:
        return None


def _from_iso(raw: str, tz: ZoneInfo) -> datetime | None:
    m = _ISO_RE.search(raw)
    if not m:
        return None
    year, month, day, hour, minute, second, fraction, zone = m.groups()
    tzinfo = _offset(zone.strip()) if zone else tz
    if tzinfo is None:
        return None
    micro = int((fraction or "0").ljust(6, "0"))
    dt = _build(
        int(year), int(month), int(day),
        int(hour or 0), int(minute or 0), int(second or 0), micro,
        tzinfo=tzinfo,
    )
    if dt is None:
        return None
    try:
        return dt.astimezone(tz)
    except (ValueError, OverflowError):
        return None


def clean_text(raw: str) -> str:
    """Strip boilerplate and rewrite time shorthands ("18h45" -> "18:45", "às 18" -> "18:00")."""
    text = (raw or "").replace("|", " ")
    text = _PREFIX_RE.sub("", text)
    text = text.translate(_DASHES)
    text = _AS_HOUR_RE.sub(r"\1:00", text)
    text = _AS_MARKER_RE.sub("", text)
    text = _HOUR_SHORTHAND_RE.sub(lambda m: f"{m.group(1)}:{m.group(2) or '00'}", text)
    return re.sub(r"\s+", " ", text).strip()


def _from_numeric(text: str, tz: ZoneInfo) -> datetime | None:
    for pattern in _NUMERIC_FORMATS:
        m = pattern.fullmatch(text)
        if not m:
            continue
        day, month, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if pattern.groups == 5:
            dt = _build(year, month, day, int(m.group(4)), int(m.group(5)), tzinfo=tz)
        else:
            dt = _build(year, month, day, NOON, tzinfo=tz)
        if dt:
            return dt
    return None


def _from_named_month(text: str, tz: ZoneInfo) -> datetime | None:
    for table in (ROMANCE_MONTHS, ENGLISH_MONTHS):
        for m in _DAY_MONTH_YEAR_RE.finditer(text):
            day, name, year, hour, minute, meridiem = m.groups()
            month = month_number(name, table)
            if month is None:
                continue
            dt = _build(int(year), month, int(day), _hour(hour, meridiem), int(minute or 0), tzinfo=tz)
            if dt:
                return dt

    for m in _MONTH_DAY_YEAR_RE.finditer(text):
        name, day, year, hour, minute, meridiem = m.groups()
        month = month_number(name, ENGLISH_MONTHS)
        if month is None:
            continue
        dt = _build(int(year), month, int(day), _hour(hour, meridiem), int(minute or 0), tzinfo=tz)
        if dt:
            return dt
    return None


def _from_loose_numeric(text: str, tz: ZoneInfo) -> datetime | None:
    for m in _LOOSE_NUMERIC_RE.finditer(text):
        day, month, year, hour, minute = m.groups()
        dt = _build(int(year), int(month), int(day), _hour(hour), int(minute or 0), tzinfo=tz)
        if dt:
            return dt
    return None


def normalize(raw: str | None, tz: ZoneInfo | None = None) -> datetime | None:
    """Reduce free-text date/time to an aware datetime in tz, or None.

    Never raises; anything that does not resolve to a valid calendar date
    yields None.
    """
    if not isinstance(raw, str) or not raw.strip():
        return None
    tz = tz or get_timezone()

    found = _from_iso(raw, tz)
    if found:
        return found

    text = clean_text(raw)
    for strategy in (_from_numeric, _from_named_month, _from_loose_numeric):
        found = strategy(text, tz)
        if found:
            return found
    return None


def to_iso(dt: datetime | None, tz: ZoneInfo | None = None) -> str | None:
    """Render an instant as ISO-8601 in the target timezone (with offset)."""
    if dt is None:
        return None
    return dt.astimezone(tz or get_timezone()).isoformat()
