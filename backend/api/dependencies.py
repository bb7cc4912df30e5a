"""Shared dependencies for API routes."""

from config import settings
from services.completion_gateway import CompletionGateway

_gateway: CompletionGateway | None = None


def get_gateway() -> CompletionGateway:
    global _gateway
    if _gateway is None:
        _gateway = CompletionGateway.from_settings(settings)
    return _gateway
