"""User account microservice: authentication, provisioning, and discovery-backed login."""

__version__ = "0.1.0"
