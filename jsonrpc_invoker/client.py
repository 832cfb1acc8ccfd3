"""
One-call stub creation from configuration
"""

import logging
from typing import Any, Optional, Type, TypeVar

from jsonrpc_invoker.config import InvokerConfig
from jsonrpc_invoker.rpc.invoker import JsonRpcInvoker
from jsonrpc_invoker.telemetry import setup_telemetry
from jsonrpc_invoker.transport.factory import TransportFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


def connect(interface: Type[T],
            handle: str,
            config: Optional[InvokerConfig] = None,
            invoker: Optional[JsonRpcInvoker] = None) -> T:
    """Build a transport from configuration and return a stub for interface

    The stub owns the transport; release it with close(stub).

    Args:
        interface: Class declaring the remote operations
        handle: Remote handle name
        config: Invoker configuration, read from the environment when None
        invoker: Invoker to create the stub with, a new one when None

    Returns:
        Stub implementing interface

    Raises:
        InvalidArgument: The interface is rejected; the transport is closed first
    """
    if config is None:
        config = InvokerConfig.from_env()
    setup_telemetry(config)
    logger.debug(f"Invoker configuration: {config.to_dict()}")

    transport = TransportFactory.create(config.transport.transport_type, config.transport)
    if invoker is None:
        invoker = JsonRpcInvoker(log_truncate=config.log_truncate)

    logger.info(f"Connecting {interface.__name__} to handle '{handle}' over {config.transport.transport_type}")
    try:
        return invoker.get(transport, handle, interface)
    except Exception:
        transport.close()
        raise


def close(stub: Any) -> None:
    """Close the transport behind a stub returned by connect()

    Stubs created directly with JsonRpcInvoker.get() share a transport the
    caller owns; closing through any one of them closes it for all.
    """
    transport = getattr(stub, "_jsonrpc_transport", None)
    if transport is None:
        raise TypeError(f"{stub!r} is not a JSON-RPC stub")
    closer = getattr(transport, "close", None)
    if callable(closer):
        closer()
