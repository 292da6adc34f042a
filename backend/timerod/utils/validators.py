import re
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from flask import request
from timerod.errors import ValidationError

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])(?::([0-5][0-9]))?$")


def get_json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_str(data, field_name, max_length=None):
    """Stripped text value of a required field; numbers and objects are rejected."""
    value = data.get(field_name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Missing required fields: ['{field_name}']")
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{field_name} cannot exceed {max_length} characters")
    return value


def optional_str(value, field_name="value"):
    if value is None:
        return None
    if isinstance(value, (dict, list, bool)):
        raise ValidationError(f"{field_name} must be a string")
    value = str(value).strip()
    return value or None


def parse_int(value, field_name, required=False):
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field_name} is required")
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def parse_bool(value, field_name, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "1", "yes"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"false", "0", "no"}:
        return False
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValidationError(f"{field_name} must be a boolean")


def parse_decimal(value, field_name):
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def parse_date(value, field_name):
    """Accepts YYYY-MM-DD or a full ISO timestamp (the time part is dropped)."""
    if value is None or value == "":
        return None
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    text = str(value).strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    if "T" in text:
        return parse_datetime(text, field_name).date()
    raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")


def parse_datetime(value, field_name):
    """ISO 8601 timestamp. Aware values are normalised to naive UTC."""
    if value is None or value == "":
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field_name} format. Use ISO 8601 (YYYY-MM-DDTHH:MM:SS)")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_time(value, field_name):
    match = TIME_PATTERN.match(str(value or "").strip())
    if not match:
        raise ValidationError(f"Invalid {field_name} format (HH:MM:SS)")
    hours, minutes, seconds = match.groups()
    return time(int(hours), int(minutes), int(seconds or 0))


def parse_date_arg(name):
    return parse_date(request.args.get(name), name)
