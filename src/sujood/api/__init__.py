"""Web API layer."""

from sujood.api.app import create_app
from sujood.api.dependencies import get_app_state

__all__ = ["create_app", "get_app_state"]
