from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
import re

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to camelCase."""
    head, *tail = name.split("_")
    return head + "".join(part.capitalize() for part in tail)


def to_snake(name: str) -> str:
    """Convert a camelCase key to snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def convert_to_json_entity(data: dict, camel_case: bool = True, decimal_as_str: bool = False) -> dict:
    """Convert complex types to JSON compatible types."""
    entity = {}
    for key, value in data.items():
        if camel_case:
            key = to_camel(key)
        if value is None:
            entity[key] = None
        elif isinstance(value, Enum):
            entity[key] = value.value
        elif isinstance(value, Decimal):
            entity[key] = str(value) if decimal_as_str else float(value)
        elif isinstance(value, (datetime, date)):
            entity[key] = value.isoformat()
        elif isinstance(value, dict):
            entity[key] = convert_to_json_entity(value, camel_case, decimal_as_str)
        elif isinstance(value, (list, tuple)):
            entity[key] = [
                convert_to_json_entity(item, camel_case, decimal_as_str) if isinstance(item, dict) else item
                for item in value
            ]
        elif isinstance(value, (str, int, float, bool)):
            entity[key] = value
        else:
            entity[key] = str(value)
    return entity


def normalize_keys(data: dict) -> dict:
    """Map camelCase keys to snake_case, leaving snake_case keys untouched."""
    return {to_snake(key): value for key, value in data.items()}


def parse_decimal(value) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, Decimal):
        return value
    # str() keeps the shortest float repr so 1234.56 stays 1234.56
    return Decimal(str(value))


def parse_date(value) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if "T" in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def parse_datetime(value) -> datetime | None:
    """Parse an ISO timestamp. Values without an offset are taken as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
