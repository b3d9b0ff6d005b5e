"""Base collector interface for host probes."""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional


class BaseCollector(ABC):
    """Abstract base class for fact collectors.

    A collector composes the individual host probes (service state, role
    markers, status API, filesystem) into a single report for the fact layer.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this collector.

        Returns:
            A short, lowercase identifier (e.g., 'self_service')
        """
        pass

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name for reports.

        Returns:
            A user-friendly name (e.g., 'PE Self Service')
        """
        pass

    @abstractmethod
    def collect(self) -> Dict[str, Any]:
        """Probe the host and build a report.

        Returns:
            Dictionary containing the collected facts. Structure varies by collector.

        Raises:
            CollectorError: If the report cannot be built at all.
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this collector can run on the current host.

        Returns:
            True if the collector can operate, False otherwise.
        """
        pass

    def get_status(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "available": self.is_available(),
        }

    def close(self) -> None:
        """Release anything the collector opened. Nothing by default."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class CollectorError(Exception):
    """Exception raised when a probe cannot produce a defined result."""

    def __init__(self, collector_name: str, message: str, cause: Optional[Exception] = None):
        self.collector_name = collector_name
        self.cause = cause
        super().__init__(f"[{collector_name}] {message}")
