# File: outreach_cms/api/v1/endpoints/common.py
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Union

from outreach_cms.core.exceptions import ValidationError
from outreach_cms.schemas.base import to_naive_utc

# OFFSET stays well inside a signed 64-bit integer
MAX_PAGE = 100_000
MAX_LIMIT = 100


def missing_fields(data: Dict[str, Any], required: Iterable[str]) -> list:
    """Required fields that are absent, null or blank"""
    missing = []
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def parse_date_param(value: Optional[str], name: str) -> Optional[Union[date, datetime]]:
    """Bare YYYY-MM-DD stays a calendar date; anything longer must be an ISO timestamp"""
    if not value:
        return None
    value = value.strip()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        return to_naive_utc(value)
    except ValueError:
        raise ValidationError(f"Invalid {name} format")
