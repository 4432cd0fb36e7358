"""ORM model registry: import all models so Alembic autogenerate discovers them."""

from user_api.models.user import User

__all__ = [
    "User",
]
