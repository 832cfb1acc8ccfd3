"""
Client Transports Module

Transports carry serialized JSON-RPC requests to a server and return the raw
response text:
- interface: transport contract and the in-process CallableTransport
- zeromq: ZeroMQ REQ socket transport
- http_client: HTTP POST transport
"""

from .interface import CallableTransport, ClientTransportInterface
from .zeromq import ZeroMQTransport
from .http_client import HttpTransport
from .factory import TransportFactory, TransportType

__all__ = [
    "ClientTransportInterface",
    "CallableTransport",
    "ZeroMQTransport",
    "HttpTransport",
    "TransportFactory",
    "TransportType"
]
