"""
JSON value codec

Converts call arguments into JSON-ready values and JSON results back into
typed Python values. Protobuf messages go through json_format; every other
type goes through a pydantic TypeAdapter.
"""

import inspect
import json
import threading
from typing import Any, Dict, Optional, Type

from google.protobuf.json_format import MessageToDict, ParseDict, ParseError
from google.protobuf.message import Message
from pydantic import TypeAdapter
from pydantic.errors import PydanticUserError
from pydantic_core import PydanticSerializationError, to_jsonable_python

from jsonrpc_invoker.rpc.errors import DecodeError, InvalidArgument


def is_message_type(target_type: Any) -> bool:
    """Check whether a type is a protobuf message class"""
    return inspect.isclass(target_type) and issubclass(target_type, Message)


def protobuf_to_dict(message: Message) -> Dict[str, Any]:
    """Convert Protobuf message to dictionary

    Args:
        message: Protobuf message object

    Returns:
        Dict: Dictionary containing message fields
    """
    if message is None:
        return {}

    return MessageToDict(message, preserving_proto_field_name=True)


# Well-known types whose JSON form is not an object
_SCALAR_JSON_TYPES = frozenset(
    f"google.protobuf.{name}" for name in (
        "Value", "ListValue", "Duration", "Timestamp", "FieldMask",
        "DoubleValue", "FloatValue", "Int64Value", "UInt64Value", "Int32Value",
        "UInt32Value", "BoolValue", "StringValue", "BytesValue",
    )
)


def _is_well_known(message_type: Type[Message]) -> bool:
    return message_type.DESCRIPTOR.full_name in _SCALAR_JSON_TYPES


def json_to_protobuf(json_str: str, message_type: Type[Message]) -> Optional[Message]:
    """Convert JSON text to Protobuf message

    Args:
        json_str: JSON text
        message_type: Protobuf message type

    Returns:
        Message: Protobuf message object, or None for JSON null
    """
    data = json.loads(json_str)
    if data is None:
        return None
    if not isinstance(data, dict) and not _is_well_known(message_type):
        raise ParseError(f"{message_type.DESCRIPTOR.full_name} expects a JSON object, got {type(data).__name__}")

    message = message_type()
    ParseDict(data, message)
    return message


def _encode_fallback(value: Any) -> Any:
    if isinstance(value, Message):
        return protobuf_to_dict(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", None) or repr(target_type)


class Codec:
    """Type-directed JSON codec shared by all stubs of an invoker.

    TypeAdapters are built once per target type and cached.
    """

    def __init__(self):
        self._adapters: Dict[Any, TypeAdapter] = {}
        self._lock = threading.Lock()

    def encode(self, value: Any) -> Any:
        """Convert a call argument into a JSON-ready value

        Raises:
            TypeError: The value has no JSON representation
        """
        if isinstance(value, Message):
            return protobuf_to_dict(value)
        try:
            return to_jsonable_python(value, fallback=_encode_fallback)
        except PydanticSerializationError as e:
            raise TypeError(str(e)) from e

    def adapter_for(self, target_type: Any) -> TypeAdapter:
        """Get or build the TypeAdapter for a target type

        Raises:
            InvalidArgument: pydantic cannot build a schema for the type
        """
        with self._lock:
            adapter = self._adapters.get(target_type)
            if adapter is None:
                try:
                    adapter = TypeAdapter(target_type)
                except PydanticUserError as e:
                    raise InvalidArgument(
                        f"unsupported return type {_type_name(target_type)}: {e}"
                    ) from e
                self._adapters[target_type] = adapter
            return adapter

    def prepare(self, target_type: Any) -> None:
        """Validate a return type ahead of the first call"""
        if target_type is Any or is_message_type(target_type):
            return
        self.adapter_for(target_type)

    def decode(self, text: str, target_type: Any) -> Any:
        """Convert JSON text into a value of target_type

        Args:
            text: Raw JSON text of the result
            target_type: Declared return type; typing.Any returns plain JSON values

        Returns:
            Decoded value

        Raises:
            DecodeError: The payload does not fit the target type
        """
        try:
            if is_message_type(target_type):
                return json_to_protobuf(text, target_type)
            if target_type is Any:
                return json.loads(text)
            return self.adapter_for(target_type).validate_json(text)
        except InvalidArgument:
            raise
        except (ParseError, TypeError, ValueError) as e:
            raise DecodeError(f"cannot decode result as {_type_name(target_type)}: {e}") from e
