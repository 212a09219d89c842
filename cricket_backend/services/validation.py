"""Input coercion shared by the tournament and player routes."""
import math

MIN_MOBILE_LENGTH = 10


def coerce_bool(raw_value, default=False):
    if raw_value is None:
        return default
    if isinstance(raw_value, bool):
        return raw_value
    if isinstance(raw_value, (int, float)):
        return raw_value == 1
    return str(raw_value).strip().lower() in {'1', 'true', 'yes', 'on'}


def clean_text(raw_value, max_length):
    return str(raw_value or '').strip()[:max_length]


def is_blank(raw_value):
    return raw_value is None or str(raw_value).strip() == ''


def parse_int(raw_value):
    """Parse an integer from JSON or form text. Returns None when unparseable."""
    if raw_value is None or isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return raw_value
    if isinstance(raw_value, float):
        return int(raw_value) if raw_value.is_integer() else None
    try:
        return int(str(raw_value).strip())
    except (TypeError, ValueError):
        return None


def parse_number(raw_value):
    if raw_value is None or isinstance(raw_value, bool):
        return None
    try:
        value = float(str(raw_value).strip()) if isinstance(raw_value, str) else float(raw_value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def is_valid_mobile(raw_value):
    return len(str(raw_value or '').strip()) >= MIN_MOBILE_LENGTH
