"""
Transport factory

Creates transport instances by name so the transport can be picked from
configuration at runtime.
"""

from jsonrpc_invoker.config import TransportConfig
from jsonrpc_invoker.transport.interface import ClientTransportInterface
from jsonrpc_invoker.transport.http_client import HttpTransport
from jsonrpc_invoker.transport.zeromq import ZeroMQTransport

class TransportType:
    """Transport type constants"""
    ZEROMQ = "zeromq"
    HTTP = "http"

class TransportFactory:
    """Factory creating client transports"""
    
    @staticmethod
    def create(transport_type: str, config: TransportConfig = None) -> ClientTransportInterface:
        """Create a client transport
        
        Args:
            transport_type: Transport type, "zeromq" or "http"
            config: Transport configuration; per-type defaults apply when None
            
        Returns:
            ClientTransportInterface: Transport instance
            
        Raises:
            ValueError: Unknown transport type
        """
        if config is None:
            config = TransportConfig(transport_type=transport_type)
            
        if transport_type.lower() == TransportType.ZEROMQ:
            return ZeroMQTransport(
                server_address=config.server_address or "tcp://localhost:5555",
                timeout_ms=config.timeout_ms
            )
        elif transport_type.lower() == TransportType.HTTP:
            return HttpTransport(
                url=config.server_address or "http://localhost:8080/jsonrpc",
                timeout_ms=config.timeout_ms,
                headers=config.headers
            )
        else:
            raise ValueError(f"Invalid transport type: {transport_type}")
