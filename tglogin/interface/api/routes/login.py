"""Telegram login callback route."""

import html
import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from tglogin.application.usecase.auth import LoginRequest, LoginUseCase
from tglogin.config import Settings
from tglogin.domain.error import LoginError, LoginErrorKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

ERROR_STATUS: dict[LoginErrorKind, int] = {
    LoginErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    LoginErrorKind.EXPIRED: status.HTTP_401_UNAUTHORIZED,
    LoginErrorKind.INVALID_PAYLOAD: status.HTTP_401_UNAUTHORIZED,
    LoginErrorKind.EXTERNAL_ID_CONFLICT: status.HTTP_409_CONFLICT,
    LoginErrorKind.SIGNUP_DISABLED: status.HTTP_403_FORBIDDEN,
    LoginErrorKind.ACCOUNT_CREATION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LoginErrorKind.ACCOUNT_UPDATE_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    LoginErrorKind.ALLOCATION_EXHAUSTED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Telegram Login</title></head>
<body>
<p>{message}</p>
<p><a href="{back_url}">&larr; Back</a></p>
</body>
</html>
"""


def render_error(error: LoginError, back_url: str) -> HTMLResponse:
    """Render a login failure as a small HTML page."""
    return HTMLResponse(
        content=ERROR_PAGE.format(
            message=html.escape(error.message),
            back_url=html.escape(back_url, quote=True),
        ),
        status_code=ERROR_STATUS.get(error.kind, status.HTTP_400_BAD_REQUEST),
    )


@router.get("/telegram/callback")
async def telegram_callback(
    request: Request,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
):
    """Handle the Telegram Login Widget redirect.

    The widget appends the signed user fields to this URL, next to the
    ``action`` marker and an optional ``redirect_to``.

    Returns:
        HTTP 302 to the computed target, with the session cookie when a new
        session was issued. Requests that are not login callbacks are sent to
        the home page. Rejected logins get an HTML error page.

    Example:
        GET /auth/telegram/callback?action=telegram_login&id=424242
            &first_name=Alice&username=alice&auth_date=1700000000&hash=...
    """
    login_request = LoginRequest(
        params=dict(request.query_params),
        session_token=request.cookies.get(settings.auth.cookie_name),
    )

    try:
        login_response = await login_use_case.execute(login_request)
    except LoginError as e:
        logger.warning(f"Telegram login rejected: kind={e.kind.value}")
        return render_error(e, settings.site.home_url)

    if login_response is None:
        return RedirectResponse(
            url=settings.site.home_url, status_code=status.HTTP_302_FOUND
        )

    logger.info(
        f"Telegram login succeeded: account={login_response.account_id}, "
        f"created={login_response.created}"
    )

    redirect_response = RedirectResponse(
        url=login_response.redirect_to, status_code=status.HTTP_302_FOUND
    )

    if login_response.session_token:
        is_production = settings.environment == "production"
        redirect_response.set_cookie(
            key=settings.auth.cookie_name,
            value=login_response.session_token,
            httponly=True,
            secure=is_production,
            samesite="lax",
            path="/",
            max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
        )

    return redirect_response
