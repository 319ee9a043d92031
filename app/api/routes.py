"""
FastAPI routes for the Google session boundary and calendar proxy.

``router`` is mounted under ``/api``; ``callback_router`` serves the OAuth
redirect target ``/auth/callback`` at the root.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from app.api.cookies import CookieSessionAdapter
from app.core.config import CALLBACK_PATH, GoogleSettings
from app.core.errors import (
    CalendarAccessError,
    ConfigurationMissingError,
    OAuthTokenExchangeError,
)
from app.dependencies import (
    get_cookie_session_adapter,
    get_google_settings,
    get_session_service,
)
from app.schemas import (
    AuthConfigResponse,
    AuthStatusResponse,
    AuthUrlResponse,
    ErrorResponse,
    LogoutResponse,
)

router = APIRouter()
callback_router = APIRouter()
logger = logging.getLogger(__name__)

OAUTH_SUCCESS_MESSAGE = "OAUTH_AUTH_SUCCESS"

_CALLBACK_SUCCESS_HTML = f"""<html>
  <body>
    <script>
      if (window.opener) {{
        window.opener.postMessage({{ type: '{OAUTH_SUCCESS_MESSAGE}' }}, '*');
        window.close();
      }} else {{
        window.location.href = '/';
      }}
    </script>
    <p>Authentication successful. You can close this window.</p>
  </body>
</html>
"""

SessionDependency = Annotated[Any, Depends(get_session_service)]
CookieDependency = Annotated[CookieSessionAdapter, Depends(get_cookie_session_adapter)]


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get(
    "/auth/google/url",
    response_model=AuthUrlResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_google_auth_url(session: SessionDependency) -> Any:
    """Issue the Google consent URL the UI opens in a pop-up."""
    try:
        url = session.authorization_url()
    except ConfigurationMissingError as exc:
        logger.error("Cannot build auth URL: %s", exc)
        return _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to generate auth URL")
    return AuthUrlResponse(url=url)


@router.get("/auth/status", response_model=AuthStatusResponse)
async def get_auth_status(
    request: Request,
    session: SessionDependency,
    cookies: CookieDependency,
) -> AuthStatusResponse:
    store = cookies.load(request)
    return AuthStatusResponse(is_authenticated=session.is_authenticated(store))


@router.post("/auth/logout", response_model=LogoutResponse)
async def logout(
    request: Request,
    session: SessionDependency,
    cookies: CookieDependency,
) -> JSONResponse:
    store = cookies.load(request)
    session.logout(store)
    response = JSONResponse(content=LogoutResponse().model_dump())
    return cookies.persist(store, response)


@router.get("/auth/config", response_model=AuthConfigResponse)
async def get_auth_config(
    google: Annotated[GoogleSettings, Depends(get_google_settings)],
) -> AuthConfigResponse:
    return AuthConfigResponse(redirect_uri=google.redirect_uri)


@router.get(
    "/calendar/events",
    responses={
        401: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def list_calendar_events(
    request: Request,
    session: SessionDependency,
    cookies: CookieDependency,
) -> JSONResponse:
    """Proxy the next upcoming events of the connected Google calendar."""
    store = cookies.load(request)
    try:
        events = await session.fetch_events(store)
    except CalendarAccessError as exc:
        outcome = exc.outcome
        response = JSONResponse(
            status_code=outcome.status_code,
            content=outcome.to_response_body(),
        )
        return cookies.persist(store, response)
    except ConfigurationMissingError as exc:
        logger.error("Cannot refresh access token: %s", exc)
        response = _error_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Failed to fetch events")
        return cookies.persist(store, response)

    return cookies.persist(store, JSONResponse(content=events))


@callback_router.get(CALLBACK_PATH, response_class=HTMLResponse)
async def handle_google_oauth_callback(
    request: Request,
    session: SessionDependency,
    cookies: CookieDependency,
    code: Optional[str] = Query(default=None, description="Authorization code returned by Google."),
) -> Response:
    """Exchange the authorization code, set session cookies and close the pop-up."""
    if not code:
        return PlainTextResponse("Missing code", status_code=HTTPStatus.BAD_REQUEST)

    store = cookies.load(request)
    try:
        await session.complete_callback(store, code)
    except (OAuthTokenExchangeError, ConfigurationMissingError) as exc:
        logger.error("Error exchanging authorization code: %s", exc)
        return PlainTextResponse(
            "Authentication failed", status_code=HTTPStatus.INTERNAL_SERVER_ERROR
        )

    return cookies.persist(store, HTMLResponse(_CALLBACK_SUCCESS_HTML))


def _error_response(status_code: HTTPStatus, message: str) -> JSONResponse:
    body = ErrorResponse(error=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


__all__ = ["callback_router", "router"]
