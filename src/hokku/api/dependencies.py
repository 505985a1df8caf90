"""FastAPI dependencies for the webhook API."""

import secrets
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config.settings import HokkuSettings
from ..core.exceptions import AuthenticationError
from ..services import HealthService, IngestService

bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> HokkuSettings:
    return request.app.state.settings


def get_ingest_service(request: Request) -> IngestService:
    return request.app.state.ingest_service


def get_health_service(request: Request) -> HealthService:
    return request.app.state.health_service


def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: HokkuSettings = Depends(get_app_settings),
) -> None:
    """Check the bearer token when one is configured; no-op otherwise.

    Raises:
        AuthenticationError: missing or wrong token
    """
    expected = settings.get_auth_token()
    if not expected:
        return

    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("missing bearer token", error_code="MissingToken")

    if not secrets.compare_digest(credentials.credentials.encode("utf-8"), expected.encode("utf-8")):
        raise AuthenticationError("invalid bearer token", error_code="InvalidToken")
