"""
Configuration settings for the JSON-RPC invoker
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class TransportConfig:
    """Configuration for client transports"""
    transport_type: str = "zeromq"  # zeromq, http
    server_address: Optional[str] = None  # Per-transport default when None
    timeout_ms: int = 5000
    headers: Optional[Dict[str, str]] = None  # HTTP only

    def __post_init__(self):
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")

    @classmethod
    def from_env(cls) -> "TransportConfig":
        """Create config from environment variables"""
        return cls(
            transport_type=os.getenv("JSONRPC_TRANSPORT", "zeromq"),
            server_address=os.getenv("JSONRPC_SERVER_ADDRESS") or None,
            timeout_ms=_env_int("JSONRPC_TIMEOUT_MS", 5000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transport_type": self.transport_type,
            "server_address": self.server_address,
            "timeout_ms": self.timeout_ms,
        }


@dataclass
class InvokerConfig:
    """Main configuration for JSON-RPC stubs"""
    transport: TransportConfig = field(default_factory=TransportConfig)
    
    # Logging configuration
    log_truncate: int = 200  # Maximum logged envelope length, 0 disables truncation
    
    # Tracing configuration
    enable_tracing: bool = False
    service_name: str = "jsonrpc.client"
    otlp_endpoint: str = "localhost:4317"

    def __post_init__(self):
        if self.log_truncate < 0:
            raise ValueError(f"log_truncate must not be negative, got {self.log_truncate}")

    @classmethod
    def from_env(cls) -> "InvokerConfig":
        """Create config from environment variables"""
        return cls(
            transport=TransportConfig.from_env(),
            log_truncate=_env_int("JSONRPC_LOG_TRUNCATE", 200),
            enable_tracing=_env_bool("JSONRPC_ENABLE_TRACING", False),
            service_name=os.getenv("JSONRPC_SERVICE_NAME", "jsonrpc.client"),
            otlp_endpoint=os.getenv("JSONRPC_OTLP_ENDPOINT", "localhost:4317"),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "transport": self.transport.to_dict(),
            "log_truncate": self.log_truncate,
            "enable_tracing": self.enable_tracing,
            "service_name": self.service_name,
            "otlp_endpoint": self.otlp_endpoint,
        }
