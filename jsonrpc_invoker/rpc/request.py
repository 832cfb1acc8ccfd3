"""
JSON-RPC 2.0 request envelope construction
"""

import json
import random
import threading
from typing import Any, Dict, List, Optional, Union

JSONRPC_VERSION = "2.0"

# Request ids fit the non-negative range of a 32-bit signed integer
MAX_REQUEST_ID = 2 ** 31 - 1


class RequestIdSource:
    """Thread-safe source of random request ids"""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return self._random.randrange(MAX_REQUEST_ID)


def build_request(handle: str,
                  method_name: str,
                  request_id: int,
                  params: Optional[Union[List[Any], Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Create a JSON-RPC 2.0 request envelope

    Args:
        handle: Remote handle name, prefixed to the method name
        method_name: Name of the invoked interface method
        request_id: Request id
        params: Bound parameters; omitted from the envelope when None

    Returns:
        Dict: Request envelope
    """
    request: Dict[str, Any] = {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "method": f"{handle}.{method_name}",
    }
    if params is not None:
        request["params"] = params
    return request


def serialize_request(request: Dict[str, Any]) -> str:
    """Serialize a request envelope to compact JSON text"""
    return json.dumps(request, separators=(",", ":"), ensure_ascii=False)
