"""Abstract service locator interface and shared discovery types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ServiceInstance:
    """A network location of one live instance of a named service."""

    address: str | None
    port: int | None

    @property
    def is_complete(self) -> bool:
        """Whether both address and port are known."""
        return bool(self.address) and bool(self.port)

    @property
    def base_url(self) -> str:
        """HTTP base URL for this instance."""
        return f"http://{self.address}:{self.port}"


@dataclass(frozen=True)
class ServiceRegistration:
    """How this process advertises itself to the discovery registry."""

    service_id: str
    name: str
    address: str
    port: int


class DiscoveryError(Exception):
    """Raised when the discovery registry cannot be reached or answers badly.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from the registry.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BaseServiceLocator(ABC):
    """Resolves logical service names to network locations.

    Implementations may also register the running process with the
    registry; ``start()`` and ``stop()`` bracket the process lifetime.
    """

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name of the discovery backend (e.g. 'consul')."""

    @abstractmethod
    async def resolve(self, service_name: str) -> list[ServiceInstance]:
        """Return all known instances of ``service_name``.

        Args:
            service_name: Logical service name.

        Returns:
            Instances in registry order; empty when none are registered.

        Raises:
            DiscoveryError: On transport or registry errors.
        """

    async def start(self) -> None:
        """Register this process with the registry (no-op by default)."""

    async def stop(self) -> None:
        """Deregister this process from the registry (no-op by default)."""
