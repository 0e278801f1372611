# response_normalizer.py
"""
Turn the wrapper shapes some models emit into plain key/value data.

Local and smaller models sometimes answer with a JSON-Schema-like object
(``{"properties": {"matchScore": {"value": 80}}}``) or wrap single values as
``{"value": ...}`` instead of returning the plain object that was asked for.
"""
import logging
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)


def unwrap_schema(obj: Any) -> Any:
    if obj is None:
        return obj

    if isinstance(obj, list):
        return [unwrap_schema(item) for item in obj]

    if not isinstance(obj, Mapping):
        return obj

    properties = obj.get("properties")
    if isinstance(properties, Mapping):
        out = {}
        for key, value in properties.items():
            if isinstance(value, Mapping) and "value" in value:
                out[key] = value["value"]
            else:
                out[key] = unwrap_schema(value)
        logger.warning("Unwrapped schema-like response from model")
        return out

    if "value" in obj and len(obj) == 1:
        return obj["value"]

    return {key: unwrap_schema(value) for key, value in obj.items()}


def pick_field(key: str, *sources: Any) -> Optional[Any]:
    """
    Return the first value found for ``key`` across ``sources``.

    Each source is checked for a direct key, then ``properties.<key>.value``,
    then ``<key>.value``. Non-mapping sources are skipped.
    """
    for source in sources:
        if not isinstance(source, Mapping):
            continue

        if key in source:
            value = source[key]
            if isinstance(value, Mapping) and set(value) == {"value"}:
                return value["value"]
            return value

        properties = source.get("properties")
        if isinstance(properties, Mapping):
            prop = properties.get(key)
            if isinstance(prop, Mapping) and "value" in prop:
                return prop["value"]

    return None
