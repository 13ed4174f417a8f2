"""
Field types shared by the response schemas.
"""

import json
from typing import Annotated, Any

from pydantic import BeforeValidator


def parse_json_field(value: Any) -> Any:
    """
    Decode a JSON-encoded text column.

    Values that are already decoded pass through untouched. Text that is not
    valid JSON is returned as-is rather than raising, so one bad row never
    breaks a listing.
    """
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


JsonText = Annotated[Any, BeforeValidator(parse_json_field)]
