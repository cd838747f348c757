"""
Shared utilities for Enclave.

Provides access to common functionality used across Gate implementations.
"""

from enclave.shared.gate import (
    GateLogger,
    GateErrorHandler,
    GateHealth,
    build_health_status,
    get_logger,
)

__all__ = [
    "GateLogger",
    "GateErrorHandler",
    "GateHealth",
    "build_health_status",
    "get_logger",
]
