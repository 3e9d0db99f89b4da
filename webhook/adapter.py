"""Turn an inbound webhook request into the update dict polling produces.

Telegram POSTs the very same JSON object to a webhook that ``getUpdates``
returns inside its ``result`` list, so adapting a request is a JSON decode
plus strict failure reporting.  A handler written against polled updates
therefore works unchanged behind a webhook.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Dict, Mapping, Union

from sdk.exceptions import DecodingError

Body = Union[str, bytes, bytearray]


@dataclasses.dataclass(frozen=True)
class WebRequest:
    """The parts of an inbound HTTP request the adapter cares about."""

    body: Body
    headers: Mapping[str, str] = dataclasses.field(default_factory=dict)


def _body_of(request: Any) -> Any:
    if isinstance(request, Mapping):
        if "body" not in request:
            raise DecodingError("Webhook request has no body")
        return request["body"]
    try:
        return request.body
    except AttributeError:
        raise DecodingError(f"Cannot read a body from {type(request).__name__}") from None


def adapt(request: Any) -> Dict[str, Any]:
    """Decode the JSON body of *request* into an update dict.

    *request* may be a :class:`WebRequest`, any object with a ``body``
    attribute, or a mapping with a ``"body"`` key.  A body that is a
    readable stream is read in full first.

    Raises:
        DecodingError: If the body is missing, not UTF-8, not valid JSON,
            or does not decode to a JSON object.
    """
    body = _body_of(request)
    if hasattr(body, "read"):
        body = body.read()
    if isinstance(body, (bytes, bytearray)):
        try:
            body = bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodingError(f"Webhook body is not UTF-8: {exc}") from exc
    if not isinstance(body, str):
        raise DecodingError(f"Webhook body must be text, got {type(body).__name__}")

    try:
        update = json.loads(body)
    except json.JSONDecodeError as exc:
        raise DecodingError(f"Webhook body is not valid JSON: {exc}") from exc

    if not isinstance(update, dict):
        raise DecodingError(f"Webhook body must be a JSON object, got {type(update).__name__}")
    return update
