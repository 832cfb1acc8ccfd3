"""
JSON-RPC 2.0 Client Module

Turns interface classes into client stubs:
- params: JsonRpcParam declarations and argument binding
- request: request envelope construction
- response: response and remote error classification
- checker: interface validity policy
- invoker: stub factory and call pipeline
"""

from .checker import DefaultInterfaceChecker, InterfaceChecker
from .errors import (
    ConfigurationError,
    DecodeError,
    InvalidArgument,
    JsonRpcClientError,
    ProtocolError,
    RemoteError,
    TransportError,
)
from .invoker import JsonRpcInvoker
from .params import JsonRpcParam, MethodDescriptor

__all__ = [
    "JsonRpcInvoker",
    "JsonRpcParam",
    "MethodDescriptor",
    "InterfaceChecker",
    "DefaultInterfaceChecker",
    "JsonRpcClientError",
    "InvalidArgument",
    "ConfigurationError",
    "TransportError",
    "ProtocolError",
    "RemoteError",
    "DecodeError",
]
