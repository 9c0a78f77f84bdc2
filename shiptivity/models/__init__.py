# Models package — import all models here so Alembic can discover them.

from shiptivity.models.client import Client  # noqa: F401
