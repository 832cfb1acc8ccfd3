#!/usr/bin/env python
"""
Calculator Client Example

Declares a remote calculator interface and calls it through a JSON-RPC 2.0
stub. Pass a ZeroMQ address (tcp://host:port) or an HTTP URL to talk to a
real server; without arguments an in-process handler answers the calls.
"""

import sys
import json
import logging
from typing import Annotated, List

from jsonrpc_invoker import (
    InvokerConfig,
    JsonRpcInvoker,
    JsonRpcParam,
    RemoteError,
    TransportConfig,
    close,
    connect,
)
from jsonrpc_invoker.transport import CallableTransport

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

class Calculator:
    """Remote calculator service"""

    def add(self, a: int, b: int) -> int:
        ...

    def divide(self,
               dividend: Annotated[float, JsonRpcParam("dividend")],
               divisor: Annotated[float, JsonRpcParam("divisor")]) -> float:
        ...

    def history(self) -> List[int]:
        ...

def local_handler(request_text: str) -> str:
    """Answer calculator requests in-process"""
    request = json.loads(request_text)
    response = {"jsonrpc": "2.0", "id": request["id"]}
    method = request["method"]
    params = request.get("params")

    if method == "calculator.add":
        response["result"] = params[0] + params[1]
    elif method == "calculator.divide":
        if params["divisor"] == 0:
            response["error"] = {"code": -32602, "message": "division by zero", "data": {"divisor": 0}}
        else:
            response["result"] = params["dividend"] / params["divisor"]
    elif method == "calculator.history":
        response["result"] = [3, 2]
    else:
        response["error"] = {"code": -32601, "message": "Method not found"}
    return json.dumps(response)

def main():
    if len(sys.argv) > 1:
        address = sys.argv[1]
        transport_type = "http" if address.startswith("http") else "zeromq"
        config = InvokerConfig(transport=TransportConfig(transport_type=transport_type, server_address=address))
        calculator = connect(Calculator, "calculator", config)
    else:
        calculator = JsonRpcInvoker().get(CallableTransport(local_handler), "calculator", Calculator)

    try:
        logger.info(f"1 + 2 = {calculator.add(1, 2)}")
        logger.info(f"7 / 2 = {calculator.divide(7, 2)}")
        logger.info(f"history = {calculator.history()}")

        try:
            calculator.divide(1, 0)
        except RemoteError as e:
            logger.info(f"Remote error: code={e.code}, message={e.message}, data={e.data}")
    finally:
        close(calculator)

if __name__ == "__main__":
    main()
