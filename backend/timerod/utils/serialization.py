from enum import Enum
from decimal import Decimal
from datetime import datetime, date, time
from sqlalchemy.inspection import inspect

HIDDEN_COLUMNS = {"password_hash"}


def camelize(key):
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def serialize_value(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def to_dict(model_instance, exclude=(), include_hidden=False):
    """Column values of a model keyed in camelCase, ready for jsonify."""
    output = {}
    mapper = inspect(model_instance.__class__)

    for column in mapper.columns:
        key = column.key
        if key in exclude:
            continue
        if not include_hidden and key in HIDDEN_COLUMNS:
            continue

        output[camelize(key)] = serialize_value(getattr(model_instance, key))

    return output
