"""Route dependencies reading process-wide objects from app.state."""

from fastapi import Request

from kacls.config import Settings
from kacls.services.key_wrapping import KeyWrappingService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_key_wrapping_service(request: Request) -> KeyWrappingService:
    return request.app.state.key_wrapping
