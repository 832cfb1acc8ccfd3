"""
ZeroMQ transport

Sends JSON-RPC 2.0 request text over a ZeroMQ REQ socket and waits for the
reply on the same socket.
"""

import logging
import threading

import zmq

from jsonrpc_invoker.transport.interface import ClientTransportInterface

logger = logging.getLogger(__name__)

class ZeroMQTransport(ClientTransportInterface):
    """
    ZeroMQ REQ transport.
    A REQ socket allows one outstanding request, so calls are serialized; after
    a timeout the socket is replaced because it can no longer send.
    """
    
    def __init__(self, 
                 server_address: str = "tcp://localhost:5555", 
                 timeout_ms: int = 5000):
        """Initialize ZeroMQ transport
        
        Args:
            server_address: ZeroMQ server address
            timeout_ms: Request timeout in milliseconds
        """
        self.server_address = server_address
        self.timeout_ms = timeout_ms
        self.context = zmq.Context()
        self.socket = None
        self._lock = threading.Lock()
        self._connect()
        logger.info(f"ZeroMQ transport connected to {server_address}")
    
    def _connect(self):
        self.socket = self.context.socket(zmq.REQ)
        self.socket.setsockopt(zmq.RCVTIMEO, self.timeout_ms)
        self.socket.setsockopt(zmq.SNDTIMEO, self.timeout_ms)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.connect(self.server_address)
    
    def _reset(self):
        if self.socket is not None:
            self.socket.close()
        self._connect()
    
    def __del__(self):
        """Close socket and context"""
        self.close()
    
    def close(self):
        """Close the transport"""
        if getattr(self, 'socket', None) is not None:
            self.socket.close()
            self.socket = None
        if getattr(self, 'context', None) is not None:
            self.context.term()
            self.context = None
    
    def call(self, request: str) -> str:
        """Send request text and wait for the reply
        
        Args:
            request: Request envelope as JSON text
            
        Returns:
            str: Response envelope as JSON text
            
        Raises:
            TimeoutError: No reply within timeout_ms
            ConnectionError: ZeroMQ failure or closed transport
        """
        with self._lock:
            if self.socket is None:
                raise ConnectionError("ZeroMQ transport is closed")
            try:
                self.socket.send(request.encode('utf-8'))
                return self.socket.recv().decode('utf-8')
                
            except zmq.error.Again:
                logger.error(f"Request to {self.server_address} timed out after {self.timeout_ms}ms")
                self._reset()
                raise TimeoutError(f"ZeroMQ request timed out ({self.timeout_ms}ms)")
                
            except zmq.error.ZMQError as e:
                logger.error(f"ZeroMQ error: {str(e)}")
                self._reset()
                raise ConnectionError(f"ZeroMQ connection error: {str(e)}")
