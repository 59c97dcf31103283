from datetime import timedelta

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import health, rates, convert, ui
from .services.rates.base import RateProvider
from .services.rates.errors import MissingCurrencyError, RemoteError, ValidationError
from .services.rates.service import RateService


def create_app(
    settings_override: Settings | None = None,
    provider_override: RateProvider | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests.
    provider_override: swap the rate provider (tests, offline demos) while keeping
    the configured TTL. Each app owns a fresh RateService and therefore a fresh
    cache.
    """
    settings = settings_override or get_settings()
    init_logging(debug=settings.debug)

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )

    if provider_override is not None:
        rate_service = RateService(
            provider_override,
            ttl=timedelta(seconds=settings.rates_cache_ttl_seconds),
        )
    else:
        rate_service = RateService.from_settings(settings)
    app.state.settings = settings
    app.state.rate_service = rate_service

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(ValidationError, errors.amount_validation_handler)
    app.add_exception_handler(MissingCurrencyError, errors.missing_currency_handler)
    app.add_exception_handler(RemoteError, errors.remote_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(convert.router)
    app.include_router(ui.router)

    return app


app = create_app()
