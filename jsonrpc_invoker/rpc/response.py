"""
JSON-RPC 2.0 response classification

A response is either a result (kept as raw JSON text for type-directed
decoding) or an error in one of three shapes:

- primitive: the value's string form becomes the message
- object: optional code, message and data; an object-valued data is kept
  as raw JSON text while a scalar data keeps its string form
- anything else: "unknown error, data = <raw JSON>"
"""

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from jsonrpc_invoker.rpc.errors import ProtocolError, RemoteError

UNKNOWN_ERROR_PREFIX = "unknown error, data = "

_PRIMITIVES = (str, int, float, bool)


@dataclass(frozen=True)
class ResponseOutcome:
    """Classified response: either error is set, or result_text holds the result"""
    result_text: str = "null"
    error: Optional[RemoteError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


def raw_json(value: Any) -> str:
    """Compact JSON text of a parsed value"""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def string_form(value: Any) -> str:
    """String form of a JSON primitive: strings as-is, other values as JSON text"""
    if isinstance(value, str):
        return value
    return raw_json(value)


def parse_response(text: str) -> Dict[str, Any]:
    """Parse response text into an envelope dict

    Raises:
        ProtocolError: The text is not JSON or its top level is not an object
    """
    try:
        envelope = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ProtocolError(f"response is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise ProtocolError(f"response is not a JSON object: {text[:200]}")
    return envelope


def _error_code(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ProtocolError(f"error code is not an integer: {raw_json(value)}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            try:
                value = float(value)
            except ValueError:
                pass
    # Fractional codes truncate toward zero
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    raise ProtocolError(f"error code is not an integer: {raw_json(value)}")


def _error_message(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, _PRIMITIVES):
        return string_form(value)
    raise ProtocolError(f"error message is not a primitive: {raw_json(value)}")


def _error_data(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return raw_json(value)
    return string_form(value)


def remote_error_from(error: Any) -> RemoteError:
    """Build a RemoteError from the value of a non-null error field

    Raises:
        ProtocolError: A structured error carries a malformed code or message
    """
    if isinstance(error, _PRIMITIVES):
        return RemoteError(message=string_form(error))

    if isinstance(error, dict):
        return RemoteError(
            code=_error_code(error.get("code")),
            message=_error_message(error.get("message")),
            data=_error_data(error.get("data")),
        )

    return RemoteError(message=UNKNOWN_ERROR_PREFIX + raw_json(error))


def classify_response(text: str) -> ResponseOutcome:
    """Classify raw response text

    A non-null error takes precedence over a result present in the same
    envelope. A missing result is reported as JSON null.

    Raises:
        ProtocolError: The response is not a well-formed envelope
    """
    envelope = parse_response(text)

    error = envelope.get("error")
    if error is not None:
        return ResponseOutcome(error=remote_error_from(error))

    return ResponseOutcome(result_text=raw_json(envelope.get("result")))
