# inventory_client/utils/validators.py

def non_empty(text) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text is not None and str(text).strip())


# ---- Numeric parsing ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed and value is None.
    Booleans are rejected so a checkbox value never sneaks in as 1/0.
    """
    if isinstance(x, bool):
        return False, None
    try:
        value = float(str(x).strip()) if isinstance(x, str) else float(x)
    except (TypeError, ValueError):
        return False, None
    if value != value:  # NaN
        return False, None
    return True, value


def try_parse_int(x):
    """
    Like try_parse_float, but only whole numbers are accepted ("10", "10.0").
    """
    ok, val = try_parse_float(x)
    if not ok or val is None or not float(val).is_integer():
        return False, None
    return True, int(val)


def as_number(x) -> float:
    """
    Numeric value for comparisons: missing or unparseable values count as 0.
    """
    if x is None or x == "":
        return 0.0
    ok, val = try_parse_float(x)
    return val if ok and val is not None else 0.0
