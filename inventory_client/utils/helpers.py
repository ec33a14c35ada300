# inventory_client/utils/helpers.py
from datetime import date, datetime, timezone
import logging
from typing import Any, Mapping, Optional, Union

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)


def today_str() -> str:
    """Return today's date as ISO string (YYYY-MM-DD)."""
    return date.today().isoformat()


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    On parse failure returns `sentinel` when given, else str(v).
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        return str(sentinel) if sentinel is not None else str(v)
    return f"${x:,.{places}f}"


def fmt_date(value: Any) -> str:
    """YYYY-MM-DD for ISO timestamps; anything unparseable is shown as-is."""
    if not value:
        return ""
    dt = parse_datetime(value)
    return dt.date().isoformat() if dt else str(value)


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or timestamp (a trailing 'Z' is accepted).
    Naive values are treated as UTC. Returns None when unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def timestamp_of(value: Any) -> float:
    """Timestamp for sorting; absent or unparseable dates count as 0."""
    dt = parse_datetime(value)
    return dt.timestamp() if dt else 0.0


def get_path(record: Any, path: str, default=None):
    """
    Read a dotted path ("supplier.name") from nested mappings or attribute objects.
    """
    cur = record
    for key in path.split("."):
        if cur is None:
            return default
        if isinstance(cur, Mapping):
            cur = cur.get(key, None)
        else:
            cur = getattr(cur, key, None)
    return default if cur is None else cur


def set_path(target: dict, path: str, value) -> None:
    """Write a dotted path into nested dicts, creating intermediate dicts."""
    keys = path.split(".")
    cur = target
    for key in keys[:-1]:
        nxt = cur.get(key)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[key] = nxt
        cur = nxt
    cur[keys[-1]] = value
