"""
JSON-RPC 2.0 Client Invocation Engine

Turns an interface class into a client stub whose method calls are sent as
JSON-RPC 2.0 requests through a pluggable transport:

1. Parameter binding: positional list, or named object via JsonRpcParam
2. Request envelopes: {"jsonrpc": "2.0", "id", "method": "<handle>.<name>", "params"}
3. Response classification: result, or RemoteError in one of three shapes
4. Result decoding into the method's return annotation (pydantic, protobuf)

Transports: in-process callable, ZeroMQ REQ, HTTP POST.
All calls are traced and counted through OpenTelemetry.
"""

__version__ = "0.1.0"

from jsonrpc_invoker.config import InvokerConfig, TransportConfig
from jsonrpc_invoker.rpc import (
    ConfigurationError,
    DecodeError,
    DefaultInterfaceChecker,
    InterfaceChecker,
    InvalidArgument,
    JsonRpcClientError,
    JsonRpcInvoker,
    JsonRpcParam,
    ProtocolError,
    RemoteError,
    TransportError,
)
from jsonrpc_invoker.client import close, connect

__all__ = [
    "connect",
    "close",
    "JsonRpcInvoker",
    "JsonRpcParam",
    "InterfaceChecker",
    "DefaultInterfaceChecker",
    "InvokerConfig",
    "TransportConfig",
    "JsonRpcClientError",
    "InvalidArgument",
    "ConfigurationError",
    "TransportError",
    "ProtocolError",
    "RemoteError",
    "DecodeError",
]
