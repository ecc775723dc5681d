"""
Service Layer
=============

Services sit between the host and the decision engine: they fetch the
snapshots the engine works on, persist the user's answers and report every
outcome as a ``ServiceResult`` instead of raising.
"""

import logging
from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class ServiceResult:
    """Outcome of a service call as handed back to the host."""
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    error_code: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success, "timestamp": self.timestamp.isoformat()}
        for key in ("data", "message", "error_code"):
            value = getattr(self, key)
            if value is not None and value != "":
                result[key] = value
        return result


class BaseService(ABC):
    """Shared initialization, health and error reporting for services."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"service.{name}")
        self._initialized = False

    def initialize(self) -> ServiceResult:
        self._initialized = True
        self.logger.info("%s service initialized", self.name)
        return self._success_result(message=f"{self.name} service initialized successfully")

    def health_check(self) -> ServiceResult:
        """Base check only reports whether ``initialize`` ran."""
        if not self._initialized:
            return self._error_result(f"{self.name} service not initialized", error_code="NOT_INITIALIZED")
        return self._success_result(data={"status": "healthy", "service": self.name})

    def _handle_error(self, error: Exception, operation: str) -> ServiceResult:
        """Log ``error`` with its traceback and turn it into a failed result."""
        error_msg = f"Error in {self.name}.{operation}: {error}"
        self.logger.error(error_msg, exc_info=True)
        return self._error_result(error_msg, error_code="OPERATION_FAILED")

    def _success_result(self, data: Any = None, message: Optional[str] = None) -> ServiceResult:
        return ServiceResult(success=True, data=data, message=message)

    def _error_result(self, message: str, error_code: str = "ERROR") -> ServiceResult:
        return ServiceResult(success=False, message=message, error_code=error_code)
