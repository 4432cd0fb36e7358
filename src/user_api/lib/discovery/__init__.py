"""Service discovery library: resolve peer services and register this process.

Public API:
    - BaseServiceLocator: Locator interface with start()/stop() lifecycle
    - ConsulServiceLocator: Consul agent implementation
    - ServiceInstance: Resolved address/port pair
    - ServiceRegistration: Self-registration data
    - DiscoveryError: Registry transport/response error
"""

from user_api.lib.discovery.base import BaseServiceLocator, DiscoveryError, ServiceInstance, ServiceRegistration
from user_api.lib.discovery.consul import ConsulServiceLocator

__all__ = [
    "BaseServiceLocator",
    "ConsulServiceLocator",
    "DiscoveryError",
    "ServiceInstance",
    "ServiceRegistration",
]
