"""
Transport interface

Defines the contract every JSON-RPC client transport implements. The invoker
only needs call(); close() releases whatever connection the transport holds.
"""

import abc
from typing import Callable

class ClientTransportInterface(abc.ABC):
    """Client transport: sends request text and returns the response text"""
    
    @abc.abstractmethod
    def call(self, request: str) -> str:
        """Send a serialized JSON-RPC request and wait for the response
        
        Args:
            request: Request envelope as JSON text
            
        Returns:
            str: Response envelope as JSON text
            
        Raises:
            TimeoutError: Request timed out
            ConnectionError: Connection failed
        """
        pass
    
    def close(self) -> None:
        """Close the connection and release resources"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


class CallableTransport(ClientTransportInterface):
    """In-process transport delegating to a plain function"""

    def __init__(self, handler: Callable[[str], str]):
        self.handler = handler

    def call(self, request: str) -> str:
        return self.handler(request)
