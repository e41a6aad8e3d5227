"""Settings dependency for request handlers."""

from fastapi import Request

from helmrbac.core.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings
