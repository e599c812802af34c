"""
Request-scoped access to the application's settings, workspace and gateway.

The values are created once in ``create_app`` and stored on ``app.state``;
tests swap them through ``app.dependency_overrides``.
"""

from fastapi import Request

from ..config import Settings
from ..services.gateway import ToolGateway
from ..services.infrastructure.storage import Workspace


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace


def get_gateway(request: Request) -> ToolGateway:
    return request.app.state.gateway
