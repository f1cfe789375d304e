"""
Request payload validation.

Every rule of a model is evaluated and all failures are reported together,
one entry per field, in the order the model declares its fields.
"""

import json
import math
from typing import Any, Dict, List, Type

import structlog
from fastapi import Request
from pydantic import ValidationError

from library_api.errors import PayloadValidationError
from library_api.models import PayloadModel

logger = structlog.get_logger(__name__)


async def read_json_body(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a JSON object.

    An empty body is treated as an empty object.

    Raises:
        PayloadValidationError: If the body is not a JSON object
    """
    raw = await request.body()
    if not raw.strip():
        return {}

    try:
        payload = json.loads(raw)
    except ValueError:
        raise PayloadValidationError([{"field": "body", "message": "Body must be valid JSON"}])

    if not isinstance(payload, dict):
        raise PayloadValidationError([{"field": "body", "message": "Body must be a JSON object"}])

    return payload


def collect_errors(model: Type[PayloadModel], exc: ValidationError) -> List[Dict[str, Any]]:
    """Translate a pydantic ValidationError into field/message pairs, first failure per field."""
    errors: List[Dict[str, Any]] = []
    seen = set()

    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "body"
        if field in seen:
            continue
        seen.add(field)

        entry: Dict[str, Any] = {
            "field": field,
            "message": model.messages.get(field, error["msg"]),
        }
        value = error.get("input")
        # NaN and infinity have no JSON form
        if error["type"] != "missing" and not (isinstance(value, float) and not math.isfinite(value)):
            entry["value"] = value
        errors.append(entry)

    return errors


def validate_payload(model: Type[PayloadModel], payload: Dict[str, Any]) -> PayloadModel:
    """
    Check a payload against a model's rules.

    Args:
        model: Model declaring the field rules
        payload: Decoded request body

    Returns:
        The validated model instance

    Raises:
        PayloadValidationError: With every failed rule
    """
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        errors = collect_errors(model, e)
        logger.debug("Payload rejected", model=model.__name__, fields=[err["field"] for err in errors])
        raise PayloadValidationError(errors)
