"""Shape checks for catalog payloads (remote body or embedded file)."""

from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from .models import Control

_CONTROL_LIST = TypeAdapter(List[Control])


class CatalogShapeError(ValueError):
    """Payload does not carry a usable `controls` array."""


def parse_catalog_payload(payload: Any) -> List[Control]:
    """
    Validate a decoded JSON document of the form {"controls": [...]}.

    Args:
        payload: Decoded JSON value

    Returns:
        List of Control models in payload order

    Raises:
        CatalogShapeError: If the document is not a dict with a list of valid,
            uniquely identified control records
    """
    if not isinstance(payload, dict):
        raise CatalogShapeError(f"Expected a JSON object, got {type(payload).__name__}")
    raw_controls = payload.get("controls")
    if not isinstance(raw_controls, list):
        raise CatalogShapeError("Payload has no 'controls' array")

    try:
        controls = _CONTROL_LIST.validate_python(raw_controls)
    except ValidationError as e:
        raise CatalogShapeError(f"Invalid control records: {e.error_count()} validation error(s)") from e

    seen = set()
    for control in controls:
        if control.id in seen:
            raise CatalogShapeError(f"Duplicate control id: {control.id}")
        seen.add(control.id)

    return controls
