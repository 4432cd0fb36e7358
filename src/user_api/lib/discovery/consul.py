"""Consul-backed service locator.

Talks to the Consul agent HTTP API (https://developer.hashicorp.com/consul/api-docs)
for catalog lookups and agent service registration.
"""

from urllib.parse import quote

import httpx
from loguru import logger

from user_api.lib.discovery.base import BaseServiceLocator, DiscoveryError, ServiceInstance, ServiceRegistration

DEFAULT_TIMEOUT = 5.0


class ConsulServiceLocator(BaseServiceLocator):
    """Service locator backed by a Consul agent.

    Args:
        base_url: Consul agent URL, e.g. ``http://127.0.0.1:8500``.
        registration: How to register this process; ``None`` disables
            registration so ``start()`` and ``stop()`` do nothing.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        *,
        registration: ServiceRegistration | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._registration = registration
        self._timeout = timeout
        self._registered = False

    @property
    def backend_name(self) -> str:
        return "consul"

    @property
    def registered(self) -> bool:
        """Whether ``start()`` registered this process and ``stop()`` has not run yet."""
        return self._registered

    async def resolve(self, service_name: str) -> list[ServiceInstance]:
        """Look up catalog nodes for a service.

        Args:
            service_name: Logical service name.

        Returns:
            One ServiceInstance per catalog entry, in catalog order.

        Raises:
            DiscoveryError: On transport errors, non-2xx answers, or a malformed body.
        """
        url = f"{self._base_url}/v1/catalog/service/{quote(service_name, safe='')}"
        response = await self._request("GET", url)

        try:
            data = response.json()
        except ValueError as e:
            msg = f"Consul returned invalid JSON for service '{service_name}'"
            logger.warning(msg)
            raise DiscoveryError(msg) from e

        return self._parse_catalog(data)

    async def start(self) -> None:
        """Register this process with the local Consul agent."""
        if self._registration is None:
            return
        reg = self._registration
        payload = {
            "ID": reg.service_id,
            "Name": reg.name,
            "Address": reg.address,
            "Port": reg.port,
        }
        await self._request("PUT", f"{self._base_url}/v1/agent/service/register", json=payload)
        self._registered = True
        logger.info(f"Registered service {reg.name} ({reg.service_id}) at {reg.address}:{reg.port} with Consul")

    async def stop(self) -> None:
        """Deregister this process from the local Consul agent."""
        if self._registration is None or not self._registered:
            return
        service_id = self._registration.service_id
        await self._request(
            "PUT",
            f"{self._base_url}/v1/agent/service/deregister/{quote(service_id, safe='')}",
        )
        self._registered = False
        logger.info(f"Deregistered service {service_id} from Consul")

    async def _request(self, method: str, url: str, **kwargs: object) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(method, url, **kwargs)  # type: ignore[arg-type]
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"Consul request timed out: {method} {url}")
            raise DiscoveryError("Consul request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Consul HTTP error {e.response.status_code}: {method} {url}")
            raise DiscoveryError(
                f"Consul returned HTTP {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.HTTPError as e:
            logger.warning(f"Consul connection error: {e}")
            raise DiscoveryError(f"Connection to Consul failed: {e}") from e
        return response

    @staticmethod
    def _parse_catalog(data: object) -> list[ServiceInstance]:
        """Convert a catalog response into ServiceInstance objects.

        Args:
            data: Decoded JSON body of ``/v1/catalog/service/<name>``.

        Returns:
            Parsed instances; ``ServiceAddress``/``ServicePort`` are kept as-is,
            so entries without them come back incomplete.

        Raises:
            DiscoveryError: If the body is not a list of objects.
        """
        if not isinstance(data, list):
            msg = "Consul catalog response is not a list"
            raise DiscoveryError(msg)

        instances: list[ServiceInstance] = []
        for entry in data:
            if not isinstance(entry, dict):
                msg = "Consul catalog entry is not an object"
                raise DiscoveryError(msg)
            port = entry.get("ServicePort")
            instances.append(
                ServiceInstance(
                    address=entry.get("ServiceAddress") or None,
                    port=port if isinstance(port, int) and port > 0 else None,
                )
            )
        return instances
