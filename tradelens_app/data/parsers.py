"""
Parsers for payloads returned by the external vision and decision providers.

Providers answer through an OpenAI-style chat-completion envelope whose
message content is itself a JSON document. These helpers unwrap that envelope
and decode the document into a plain dict for the normalization pipeline.
"""

import json
from typing import Any, Mapping, Union

try:
    import orjson
    HAS_ORJSON = True
except ImportError:
    HAS_ORJSON = False

from ..errors import MalformedDataError, MissingDataError


def parse_json_payload(raw_data: Union[str, bytes]) -> Any:
    """
    Parse raw JSON text.

    Uses orjson for better performance when available, falls back to standard json.

    Raises:
        MalformedDataError: If JSON parsing fails
    """
    try:
        if HAS_ORJSON:
            return orjson.loads(raw_data)
        else:
            return json.loads(raw_data)
    except Exception as e:
        # Handle both json.JSONDecodeError and orjson.JSONDecodeError
        if (isinstance(e, json.JSONDecodeError) or
                (HAS_ORJSON and hasattr(orjson, 'JSONDecodeError') and isinstance(e, orjson.JSONDecodeError))):
            raise MalformedDataError(f"Invalid JSON: {e}", raw_data=str(raw_data)[:100],
                                     expected_format="json")
        raise MalformedDataError(f"Unexpected JSON parsing error: {e}", raw_data=str(raw_data)[:100])


def parse_provider_payload(raw: Any) -> dict[str, Any]:
    """
    Decode a provider payload into a dictionary.

    Args:
        raw: Already-decoded mapping, or JSON text/bytes

    Returns:
        Decoded JSON object

    Raises:
        MissingDataError: If raw is None or blank
        MalformedDataError: If raw is not a JSON object
    """
    if raw is None:
        raise MissingDataError("Provider payload is missing", data_type="payload")

    if isinstance(raw, Mapping):
        return dict(raw)

    if isinstance(raw, (str, bytes)):
        if not raw.strip():
            raise MissingDataError("Provider payload is empty", data_type="payload")
        payload = parse_json_payload(raw)
        if not isinstance(payload, dict):
            raise MalformedDataError(
                f"Provider payload must be a JSON object, got {type(payload).__name__}",
                raw_data=str(raw)[:100],
                expected_format="object",
            )
        return payload

    raise MalformedDataError(
        f"Unsupported provider payload type: {type(raw).__name__}",
        expected_format="object",
    )


def extract_message_content(response: Any) -> str:
    """
    Pull the first choice's message content out of a chat-completion response.

    Returns ``"{}"`` when the envelope has no usable content, matching the
    empty-object fallback the pipeline treats as "not meaningful".
    """
    if not isinstance(response, Mapping):
        return "{}"
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices:
        return "{}"
    first = choices[0] if isinstance(choices[0], Mapping) else {}
    message = first.get("message") if isinstance(first.get("message"), Mapping) else {}
    content = message.get("content")
    return content if isinstance(content, str) and content else "{}"
