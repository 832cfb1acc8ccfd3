"""
JSON-RPC stub contract tests

Drive generated stubs through an in-memory transport and verify the wire
requests they send and the values or errors they return.
"""

import abc
import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Annotated, Any, List, Optional
from unittest.mock import MagicMock, patch

import pytest
from google.protobuf import descriptor_pb2, wrappers_pb2

from jsonrpc_invoker.rpc.errors import (
    ConfigurationError,
    DecodeError,
    InvalidArgument,
    ProtocolError,
    RemoteError,
    TransportError,
)
from jsonrpc_invoker.rpc.invoker import JsonRpcInvoker
from jsonrpc_invoker.rpc.params import JsonRpcParam
from jsonrpc_invoker.rpc.request import MAX_REQUEST_ID
from jsonrpc_invoker.transport.interface import CallableTransport


class RecordingTransport:
    """Records every request and answers with a fixed response"""

    def __init__(self, response: Any = None):
        self.requests = []
        self.response = response if response is not None else {"jsonrpc": "2.0", "id": 1, "result": None}

    def call(self, request: str) -> str:
        self.requests.append(json.loads(request))
        if isinstance(self.response, str):
            return self.response
        return json.dumps(self.response)

    @property
    def last(self):
        return self.requests[-1]


@dataclass
class Point:
    x: int
    y: int


class Opaque:
    pass


class Calculator(abc.ABC):
    """Remote calculator"""

    @abc.abstractmethod
    def add(self, a: int, b: int) -> int:
        """Add two numbers"""

    @abc.abstractmethod
    def ping(self) -> None:
        ...

    @abc.abstractmethod
    def scale(self,
              point: Annotated[Point, JsonRpcParam("point")],
              factor: Annotated[float, JsonRpcParam("factor")]) -> Point:
        ...

    @abc.abstractmethod
    def broken(self, a: Annotated[int, JsonRpcParam("a")], b: int) -> int:
        ...

    def lookup(self, key: str) -> Optional[str]:
        ...

    def history(self, limit: int = 10) -> List[int]:
        ...

    def echo(self, value):
        ...

    def counter(self) -> wrappers_pb2.Int32Value:
        ...

    def schema(self) -> descriptor_pb2.FileDescriptorProto:
        ...


def result(value):
    return {"jsonrpc": "2.0", "id": 1, "result": value}


def error(value):
    return {"jsonrpc": "2.0", "id": 1, "error": value}


@pytest.fixture
def invoker():
    return JsonRpcInvoker()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def calc(invoker, transport):
    return invoker.get(transport, "calc", Calculator)


class TestStubCreation:
    """Test stub factory preconditions"""

    def test_stub_implements_interface(self, calc):
        assert isinstance(calc, Calculator)
        assert "calc" in repr(calc)
        assert calc.add.__name__ == "add"
        assert calc.add.__doc__ == "Add two numbers"

    def test_no_transport_activity_on_creation(self, transport, calc):
        assert transport.requests == []

    @pytest.mark.parametrize("args", [
        (None, "calc", Calculator),
        (RecordingTransport(), None, Calculator),
        (RecordingTransport(), "calc", None),
    ])
    def test_missing_arguments(self, invoker, args):
        with pytest.raises(InvalidArgument):
            invoker.get(*args)

    def test_transport_without_call(self, invoker):
        with pytest.raises(InvalidArgument, match="no call method"):
            invoker.get(object(), "calc", Calculator)

    def test_non_string_handle(self, invoker, transport):
        with pytest.raises(InvalidArgument):
            invoker.get(transport, 42, Calculator)

    def test_invalid_argument_is_value_error(self, invoker):
        with pytest.raises(ValueError):
            invoker.get(None, "calc", Calculator)

    def test_checker_is_consulted(self, transport):
        checker = MagicMock()
        JsonRpcInvoker(checker=checker).get(transport, "calc", Calculator)
        checker.check.assert_called_once_with(Calculator)

    def test_checker_rejection_propagates(self, transport):
        checker = MagicMock()
        checker.check.side_effect = InvalidArgument("rejected")
        with pytest.raises(InvalidArgument, match="rejected"):
            JsonRpcInvoker(checker=checker).get(transport, "calc", Calculator)

    def test_rejects_non_class(self, invoker, transport):
        with pytest.raises(InvalidArgument):
            invoker.get(transport, "calc", "Calculator")

    def test_rejects_undecodable_return_type(self, invoker, transport):
        class Service:
            def fetch(self) -> Opaque:
                ...

        with pytest.raises(InvalidArgument, match="unsupported return type"):
            invoker.get(transport, "svc", Service)

    def test_plain_class_interface(self, invoker):
        class Greeter:
            def greet(self, name: str) -> str:
                return "local"

        transport = RecordingTransport(result("hello bob"))
        greeter = invoker.get(transport, "greeter", Greeter)
        assert greeter.greet("bob") == "hello bob"
        assert transport.last["method"] == "greeter.greet"


class TestRequests:
    """Test the request envelopes sent by stubs"""

    def test_zero_parameters_omit_params(self, calc, transport):
        calc.ping()
        request = transport.last
        assert request["jsonrpc"] == "2.0"
        assert request["method"] == "calc.ping"
        assert "params" not in request
        assert isinstance(request["id"], int)
        assert 0 <= request["id"] < MAX_REQUEST_ID

    def test_unnamed_parameters_are_positional(self, calc, transport):
        transport.response = result(3)
        calc.add(1, 2)
        assert transport.last["params"] == [1, 2]

    def test_keyword_arguments_keep_declaration_order(self, calc, transport):
        transport.response = result(3)
        calc.add(b=2, a=1)
        assert transport.last["params"] == [1, 2]

    def test_defaults_are_sent(self, calc, transport):
        transport.response = result([])
        calc.history()
        assert transport.last["params"] == [10]

    def test_named_parameters_are_an_object(self, calc, transport):
        transport.response = result({"x": 2, "y": 4})
        calc.scale(Point(1, 2), 2.0)
        assert transport.last["params"] == {"point": {"x": 1, "y": 2}, "factor": 2.0}

    def test_partial_naming_fails_before_transport(self, calc, transport):
        with pytest.raises(ConfigurationError, match="broken"):
            calc.broken(1, 2)
        assert transport.requests == []

    def test_bad_call_signature(self, calc, transport):
        with pytest.raises(TypeError):
            calc.add(1)
        assert transport.requests == []

    def test_ids_vary_between_calls(self, calc, transport):
        for _ in range(20):
            calc.ping()
        assert len({request["id"] for request in transport.requests}) > 1


class TestResults:
    """Test result decoding"""

    def test_integer_result(self, calc, transport):
        transport.response = result(42)
        assert calc.add(40, 2) == 42

    def test_structured_result(self, calc, transport):
        transport.response = result({"x": 2, "y": 4})
        assert calc.scale(Point(1, 2), 2.0) == Point(2, 4)

    def test_optional_result(self, calc, transport):
        transport.response = result(None)
        assert calc.lookup("missing") is None

    def test_list_result(self, calc, transport):
        transport.response = result([3, 2, 1])
        assert calc.history(3) == [3, 2, 1]

    def test_unannotated_result_is_plain_json(self, calc, transport):
        transport.response = result({"nested": [1, "two"]})
        assert calc.echo("x") == {"nested": [1, "two"]}

    def test_protobuf_result(self, calc, transport):
        transport.response = result(7)
        value = calc.counter()
        assert isinstance(value, wrappers_pb2.Int32Value)
        assert value.value == 7

    @pytest.mark.parametrize("response", [
        result(None),
        {"jsonrpc": "2.0", "id": 1},
        result("ignored"),
    ])
    def test_void_method_returns_none_without_decoding(self, invoker, transport, response):
        transport.response = response
        calc = invoker.get(transport, "calc", Calculator)
        with patch.object(invoker.codec, "decode") as decode:
            assert calc.ping() is None
        decode.assert_not_called()

    def test_decode_error(self, calc, transport):
        transport.response = result("not a number")
        with pytest.raises(DecodeError):
            calc.add(1, 2)

    @pytest.mark.parametrize("value", [42, True, [1, 2], "abc"])
    def test_protobuf_result_shape_mismatch(self, calc, transport, value):
        transport.response = result(value)
        with patch("jsonrpc_invoker.rpc.invoker.increment_counter") as counter:
            with pytest.raises(DecodeError):
                calc.schema()
        counter.assert_called_with("rpc.client.errors", 1, {"type": "decode", "method": "calc.schema"})

    def test_missing_result_for_typed_method(self, calc, transport):
        transport.response = {"jsonrpc": "2.0", "id": 1}
        with pytest.raises(DecodeError):
            calc.add(1, 2)


class TestErrors:
    """Test remote, protocol and transport errors"""

    def test_primitive_error(self, calc, transport):
        transport.response = error("boom")
        with pytest.raises(RemoteError) as exc_info:
            calc.add(1, 2)
        assert exc_info.value.message == "boom"
        assert exc_info.value.code is None
        assert exc_info.value.data is None

    def test_structured_error(self, calc, transport):
        transport.response = error({"code": 404, "message": "not found"})
        with pytest.raises(RemoteError) as exc_info:
            calc.add(1, 2)
        assert exc_info.value.code == 404
        assert exc_info.value.message == "not found"
        assert exc_info.value.data is None

    def test_structured_error_with_object_data(self, calc, transport):
        transport.response = error({"code": -32000, "message": "failed", "data": {"field": "a"}})
        with pytest.raises(RemoteError) as exc_info:
            calc.add(1, 2)
        assert exc_info.value.data == '{"field":"a"}'

    def test_structured_error_with_scalar_data(self, calc, transport):
        transport.response = error({"message": "failed", "data": 12})
        with pytest.raises(RemoteError) as exc_info:
            calc.add(1, 2)
        assert exc_info.value.data == "12"

    def test_unknown_error_shape(self, calc, transport):
        transport.response = error([1, 2, 3])
        with pytest.raises(RemoteError) as exc_info:
            calc.add(1, 2)
        assert "[1,2,3]" in exc_info.value.message
        assert exc_info.value.message.startswith("unknown error, data = ")

    def test_error_takes_precedence_over_result(self, calc, transport):
        transport.response = {"jsonrpc": "2.0", "id": 1, "result": 3, "error": "boom"}
        with pytest.raises(RemoteError):
            calc.add(1, 2)

    def test_null_error_is_ignored(self, calc, transport):
        transport.response = {"jsonrpc": "2.0", "id": 1, "result": 3, "error": None}
        assert calc.add(1, 2) == 3

    def test_void_method_still_raises_remote_error(self, calc, transport):
        transport.response = error("boom")
        with pytest.raises(RemoteError):
            calc.ping()

    @pytest.mark.parametrize("response", ["not json", "[1, 2]", "42", ""])
    def test_malformed_response(self, calc, transport, response):
        transport.response = response
        with pytest.raises(ProtocolError):
            calc.add(1, 2)

    def test_transport_failure(self, invoker):
        cause = ConnectionError("connection refused")

        def fail(request):
            raise cause

        calc = invoker.get(CallableTransport(fail), "calc", Calculator)
        with patch("jsonrpc_invoker.rpc.invoker.classify_response") as classify:
            with pytest.raises(TransportError) as exc_info:
                calc.add(1, 2)
        classify.assert_not_called()
        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause


class TestObservability:
    """Test logging and metrics emitted per call"""

    def test_envelopes_logged_at_debug(self, calc, transport, caplog):
        transport.response = result(3)
        with caplog.at_level(logging.DEBUG, logger="jsonrpc_invoker.rpc.invoker"):
            calc.add(1, 2)
        assert any("JSON-RPC >>" in message and "calc.add" in message for message in caplog.messages)
        assert any("JSON-RPC <<" in message for message in caplog.messages)

    def test_logged_envelopes_are_truncated(self, transport, caplog):
        transport.response = result("x" * 500)
        calc = JsonRpcInvoker(log_truncate=50).get(transport, "calc", Calculator)
        with caplog.at_level(logging.DEBUG, logger="jsonrpc_invoker.rpc.invoker"):
            calc.lookup("key")
        response_logs = [m for m in caplog.messages if m.startswith("JSON-RPC <<")]
        assert response_logs
        assert len(response_logs[0]) < 100

    def test_counters(self, calc, transport):
        transport.response = result(3)
        with patch("jsonrpc_invoker.rpc.invoker.increment_counter") as counter:
            calc.add(1, 2)
        names = [c.args[0] for c in counter.call_args_list]
        assert names == ["rpc.client.requests", "rpc.client.success"]

    def test_remote_error_counter(self, calc, transport):
        transport.response = error({"code": 500, "message": "oops"})
        with patch("jsonrpc_invoker.rpc.invoker.increment_counter") as counter:
            with pytest.raises(RemoteError):
                calc.add(1, 2)
        counter.assert_called_with("rpc.client.errors", 1, {
            "type": "remote",
            "method": "calc.add",
            "code": "500"
        })

    def test_error_logs_carry_trace_id(self, calc, transport, caplog):
        transport.response = "not json"
        with patch("jsonrpc_invoker.rpc.invoker.current_trace_id", return_value="4bf92f3577b34da6a3ce929d0e0e4736"):
            with caplog.at_level(logging.ERROR, logger="jsonrpc_invoker.rpc.invoker"):
                with pytest.raises(ProtocolError):
                    calc.add(1, 2)
        assert any("trace_id=4bf92f3577b34da6a3ce929d0e0e4736" in message for message in caplog.messages)

    def test_error_logs_without_trace(self, calc, transport, caplog):
        transport.response = error({"code": 500, "message": "oops"})
        with caplog.at_level(logging.WARNING, logger="jsonrpc_invoker.rpc.invoker"):
            with pytest.raises(RemoteError):
                calc.add(1, 2)
        assert any("calc.add failed" in message for message in caplog.messages)
        assert not any("trace_id" in message for message in caplog.messages)


def test_concurrent_calls(invoker):
    """A single stub can be used from many threads"""
    lock = threading.Lock()
    seen_ids = []

    def answer(request):
        envelope = json.loads(request)
        with lock:
            seen_ids.append(envelope["id"])
        a, b = envelope["params"]
        return json.dumps({"jsonrpc": "2.0", "id": envelope["id"], "result": a + b})

    calc = invoker.get(CallableTransport(answer), "calc", Calculator)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda n: calc.add(n, n), range(100)))

    assert results == [n * 2 for n in range(100)]
    assert len(seen_ids) == 100
    assert all(0 <= request_id < MAX_REQUEST_ID for request_id in seen_ids)
