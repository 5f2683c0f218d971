"""Logfire setup and instrumentation.

Domain services log through logfire directly:

    with logfire.span("account_reconciler.reconcile", telegram_id=identity.id):
        logfire.info("Account created", account_id=str(account.id))

Bot tokens, payload hashes and session tokens never go into attributes;
the scrubbing patterns below catch them if they slip through.
"""

import logfire
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine

from tglogin.config import Settings

SECRET_PATTERNS = ["hash", "bot_token", "auth_token"]


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire once at process start.

    Data leaves the host only when ``send_to_logfire`` is set or a token
    is configured.
    """
    obs = settings.observability
    send_to_logfire = (
        obs.send_to_logfire
        if obs.send_to_logfire is not None
        else bool(obs.logfire_token)
    )

    logfire.configure(
        service_name="tglogin",
        service_version=settings.git_sha,
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        token=obs.logfire_token or None,
        console=logfire.ConsoleOptions(
            span_style="show-parents",
            include_timestamps=True,
            verbose=settings.debug,
        ),
        scrubbing=logfire.ScrubbingOptions(extra_patterns=SECRET_PATTERNS),
    )

    logfire.info(
        "Observability configured",
        environment=settings.environment,
        send_to_logfire=send_to_logfire,
        login_enabled=bool(settings.login.bot_token),
    )


def _request_attributes(request, attributes):
    # Query values are the signed login payload, keep only the names.
    result = {**attributes}
    result.pop("values", None)
    result["path"] = request.url.path
    result["query_fields"] = sorted(request.query_params.keys())
    if request.client:
        result["client_host"] = request.client.host
    return result


def instrument_fastapi(app: FastAPI) -> None:
    """Trace requests without headers, since the session cookie lives there."""
    logfire.instrument_fastapi(
        app,
        capture_headers=False,
        request_attributes_mapper=_request_attributes,
    )


def instrument_sqlalchemy(engine: AsyncEngine) -> None:
    """Trace SQL issued through the account store engine."""
    logfire.instrument_sqlalchemy(engine=engine.sync_engine)
