"""spanweave logging — hexagonal logging port and structlog adapter."""

from spanweave.logging.port import LoggingPort
from spanweave.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
