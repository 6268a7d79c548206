"""Request parsing and validation helpers shared by the handlers."""

import json
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)

# Substring of a pydantic message -> message shown to API clients
_FRIENDLY_MESSAGES: tuple[tuple[str, str], ...] = (
    ("base64", "File must be a valid Base64-encoded string"),
    ("field required", "This field is required"),
    ("type", "Invalid value type"),
)


def sanitize_validation_errors(errors: Iterable[Mapping[str, Any]]) -> list[dict[str, str]]:
    """Reduce pydantic error dicts to ``{"field", "message"}`` pairs.

    Input values, URLs and ``ctx`` are dropped so nothing the client sent
    (such as a multi-megabyte base64 file) is echoed back.
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        message = str(err.get("msg", "Invalid value")).replace("Value error,", "").strip()
        lowered = message.lower()

        for needle, friendly in _FRIENDLY_MESSAGES:
            if needle in lowered:
                message = friendly
                break

        sanitized.append(
            {
                "field": ".".join(str(part) for part in err.get("loc", ())) or "body",
                "message": message,
            }
        )

    return sanitized


def load_json_body(event: Mapping[str, Any]) -> dict[str, Any] | None:
    """Parse the proxy event body as a JSON object.

    A missing body counts as ``{}``. Returns None for malformed JSON or a
    JSON value that is not an object.
    """
    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        return None

    return body if isinstance(body, dict) else None


def validate_request(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Raises:
        pydantic.ValidationError: If the data does not match the model
    """
    return model.model_validate(data)
