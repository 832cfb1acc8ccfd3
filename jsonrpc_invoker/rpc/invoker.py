"""
JSON-RPC stub factory

JsonRpcInvoker turns an interface class into a stub object. The stub is an
instance of a generated subclass of the interface; each public method of the
interface is replaced by a method that binds the arguments, sends a JSON-RPC
2.0 request through the transport and decodes the response.
"""

import functools
import logging
import time
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from jsonrpc_invoker.rpc.checker import DefaultInterfaceChecker, InterfaceChecker, interface_methods
from jsonrpc_invoker.rpc.errors import DecodeError, InvalidArgument, ProtocolError, TransportError
from jsonrpc_invoker.rpc.params import MethodDescriptor, bind_params, describe_method
from jsonrpc_invoker.rpc.request import RequestIdSource, build_request, serialize_request
from jsonrpc_invoker.rpc.response import classify_response
from jsonrpc_invoker.telemetry.metrics import increment_counter, record_latency
from jsonrpc_invoker.telemetry.tracer import create_span, current_trace_id
from jsonrpc_invoker.utils.serialization import Codec

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _make_stub_method(func: Callable, descriptor: MethodDescriptor) -> Callable:
    @functools.wraps(func)
    def stub_method(self, *args, **kwargs):
        return self._jsonrpc_invoker.invoke(
            self._jsonrpc_transport, self._jsonrpc_handle, descriptor, args, kwargs
        )

    # wraps() copies the abstract flag of the interface method
    stub_method.__isabstractmethod__ = False
    return stub_method


def _trace_note() -> str:
    trace_id = current_trace_id()
    return f" (trace_id={trace_id})" if trace_id else ""


def _stub_init(self, invoker: "JsonRpcInvoker", transport: Any, handle: str):
    self._jsonrpc_invoker = invoker
    self._jsonrpc_transport = transport
    self._jsonrpc_handle = handle


def _stub_repr(self) -> str:
    return f"<{type(self).__name__} handle={self._jsonrpc_handle!r}>"


class JsonRpcInvoker:
    """
    Creates JSON-RPC 2.0 client stubs for interface classes.

    A single invoker can serve any number of stubs; they share its codec and
    request id source.
    """

    def __init__(self,
                 checker: Optional[InterfaceChecker] = None,
                 codec: Optional[Codec] = None,
                 log_truncate: int = 200):
        """Initialize the invoker

        Args:
            checker: Interface validity policy, DefaultInterfaceChecker when None
            codec: Argument/result codec, a new Codec when None
            log_truncate: Maximum logged envelope length, 0 logs envelopes in full
        """
        self.checker = checker if checker is not None else DefaultInterfaceChecker()
        self.codec = codec if codec is not None else Codec()
        self.log_truncate = log_truncate
        self._ids = RequestIdSource()

    def get(self, transport: Any, handle: str, interface: Type[T]) -> T:
        """Create a stub implementing interface

        Args:
            transport: Object with a call(request_text) -> response_text method
            handle: Remote handle name, prefixed to every method name
            interface: Class declaring the remote operations

        Returns:
            Instance of a generated subclass of interface

        Raises:
            InvalidArgument: A required argument is missing or the interface is rejected
        """
        if transport is None or handle is None or interface is None:
            raise InvalidArgument("transport, handle and interface are required")
        if not callable(getattr(transport, "call", None)):
            raise InvalidArgument(f"transport {transport!r} has no call method")
        if not isinstance(handle, str):
            raise InvalidArgument(f"handle must be a string, got {type(handle).__name__}")

        self.checker.check(interface)

        namespace: Dict[str, Any] = {
            "__init__": _stub_init,
            "__repr__": _stub_repr,
            "__module__": interface.__module__,
        }
        for name, func in interface_methods(interface).items():
            try:
                descriptor = describe_method(func)
            except (NameError, TypeError) as e:
                raise InvalidArgument(f"cannot describe {interface.__name__}.{name}: {e}") from e
            if not descriptor.is_void:
                self.codec.prepare(descriptor.return_type)
            namespace[name] = _make_stub_method(func, descriptor)

        stub_class = type(interface)(f"{interface.__name__}Stub", (interface,), namespace)
        logger.debug(f"Created stub {stub_class.__name__} for handle '{handle}'")
        return stub_class(self, transport, handle)

    def invoke(self,
               transport: Any,
               handle: str,
               descriptor: MethodDescriptor,
               args: tuple,
               kwargs: Dict[str, Any]) -> Any:
        """Perform one JSON-RPC call

        Args:
            transport: Transport to send the request through
            handle: Remote handle name
            descriptor: Descriptor of the invoked method
            args: Positional call arguments
            kwargs: Keyword call arguments

        Returns:
            Decoded result, None for methods returning None

        Raises:
            ConfigurationError: Inconsistent parameter naming
            TransportError: The transport call failed
            ProtocolError: The response is not a JSON-RPC envelope
            RemoteError: The server reported an error
            DecodeError: The result does not fit the return type
        """
        params = bind_params(descriptor, args, kwargs, self.codec.encode)

        request_id = self._ids.next_id()
        method = f"{handle}.{descriptor.name}"
        request_text = serialize_request(build_request(handle, descriptor.name, request_id, params))

        span_attributes = {
            "rpc.system": "jsonrpc",
            "rpc.method": method,
            "rpc.jsonrpc.request_id": request_id,
        }
        with create_span("jsonrpc.call", span_attributes):
            logger.debug(f"JSON-RPC >> {self._truncate(request_text)}")
            increment_counter("rpc.client.requests", 1, {"method": method})
            start_time = time.time()

            try:
                response_text = transport.call(request_text)
            except Exception as e:
                logger.error(f"Transport failed while calling {method}: {str(e)}{_trace_note()}")
                increment_counter("rpc.client.errors", 1, {"type": "transport", "method": method})
                raise TransportError("unable to get data from transport", e) from e

            latency_ms = (time.time() - start_time) * 1000
            record_latency("rpc.client.latency", latency_ms, {"method": method})
            logger.debug(f"JSON-RPC << {self._truncate(response_text)}")

            try:
                outcome = classify_response(response_text)
            except ProtocolError as e:
                logger.error(f"Invalid JSON-RPC response for {method}: {str(e)}{_trace_note()}")
                increment_counter("rpc.client.errors", 1, {"type": "protocol", "method": method})
                raise

            if outcome.is_error:
                error = outcome.error
                logger.warning(f"RPC call {method} failed: {error.message}, code: {error.code}{_trace_note()}")
                increment_counter("rpc.client.errors", 1, {
                    "type": "remote",
                    "method": method,
                    "code": str(error.code if error.code is not None else -1)
                })
                raise error

            if descriptor.is_void:
                increment_counter("rpc.client.success", 1, {"method": method})
                return None

            try:
                result = self.codec.decode(outcome.result_text, descriptor.return_type)
            except DecodeError as e:
                logger.error(f"Cannot decode result of {method}: {str(e)}{_trace_note()}")
                increment_counter("rpc.client.errors", 1, {"type": "decode", "method": method})
                raise

            increment_counter("rpc.client.success", 1, {"method": method})
            return result

    def _truncate(self, text: Any) -> str:
        text = text if isinstance(text, str) else repr(text)
        if self.log_truncate and len(text) > self.log_truncate:
            return f"{text[:self.log_truncate]}..."
        return text
