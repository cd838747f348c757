"""
Shared Gate utilities for Enclave.

- GateLogger: per-gate loggers under the "enclave" namespace, on stderr
- GateErrorHandler: logs failures nothing else was prepared for
- GateHealth: Protocol for health checks
- build_health_status: Standard health payload
"""

from __future__ import annotations

import logging
import sys
from typing import (
    Any,
    Dict,
    List,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

NAMESPACE = "enclave"
LOG_FORMAT = "[%(name)s] %(levelname)s: %(message)s"


# =============================================================================
# GateLogger
# =============================================================================


class GateLogger:
    """
    Per-gate loggers under one namespace.

    Records go to stderr; stdout belongs to the stdio transport and must
    only ever carry protocol messages.
    """

    _loggers: Dict[str, logging.Logger] = {}
    _configured = False

    @classmethod
    def _ensure_configured(cls):
        if cls._configured:
            return

        namespace = logging.getLogger(NAMESPACE)
        if not namespace.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
            namespace.addHandler(handler)
            namespace.setLevel(logging.INFO)

        cls._configured = True

    @classmethod
    def get(cls, gate_name: str) -> logging.Logger:
        """
        Logger for one gate or gate component.

        Args:
            gate_name: e.g. "WorkspaceGate" or "WorkspaceGate.Walker"

        Returns:
            The "enclave.<gate_name>" logger
        """
        cls._ensure_configured()

        logger_name = f"{NAMESPACE}.{gate_name}"
        logger = cls._loggers.get(logger_name)
        if logger is None:
            logger = cls._loggers[logger_name] = logging.getLogger(logger_name)
        return logger

    @classmethod
    def set_level(cls, level: Union[int, str], gate_name: Optional[str] = None):
        """
        Change the log level of one gate, or of the whole namespace.

        Args:
            level: logging constant or level name ("debug", "INFO", ...)
            gate_name: Gate to change; None changes every gate

        Raises:
            ValueError: For an unknown level name
        """
        if isinstance(level, str):
            resolved = logging.getLevelName(level.upper())
            if not isinstance(resolved, int):
                raise ValueError(f"Unknown log level: {level}")
            level = resolved

        target = cls.get(gate_name) if gate_name else None
        if target is None:
            cls._ensure_configured()
            target = logging.getLogger(NAMESPACE)
        target.setLevel(level)


# =============================================================================
# GateErrorHandler
# =============================================================================


class GateErrorHandler:
    """Last-resort logging for failures a gate did not anticipate."""

    @staticmethod
    def handle(
        gate_name: str,
        operation: str,
        exception: Exception,
        default_return: Any = None,
        log_level: int = logging.ERROR,
    ) -> Any:
        """
        Log a failed operation and hand back a fallback value.

        Errors at ERROR or above are logged with their traceback.

        Args:
            gate_name: Gate whose logger receives the record
            operation: Name of the operation that failed
            exception: What was raised
            default_return: Returned unchanged to the caller
            log_level: Level of the log record

        Returns:
            default_return
        """
        GateLogger.get(gate_name).log(
            log_level,
            f"{operation} failed: {exception}",
            exc_info=exception if log_level >= logging.ERROR else None,
        )
        return default_return


# =============================================================================
# GateHealth
# =============================================================================


@runtime_checkable
class GateHealth(Protocol):
    """What a gate exposes so transports can report on it."""

    def is_healthy(self) -> bool:
        ...

    def get_health_status(self) -> Dict[str, Any]:
        ...

    def get_dependencies(self) -> List[str]:
        ...


def build_health_status(
    gate_name: str,
    initialized: bool,
    dependencies: List[str],
    checks: Dict[str, bool],
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Assemble the health payload shared by all gates.

    The gate is healthy when it is initialized and every check passed.
    """
    return {
        "gate": gate_name,
        "healthy": initialized and all(checks.values()),
        "initialized": initialized,
        "dependencies": dependencies,
        "checks": checks,
        "details": details or {},
    }


def get_logger(gate_name: str) -> logging.Logger:
    """Shortcut for GateLogger.get()."""
    return GateLogger.get(gate_name)
