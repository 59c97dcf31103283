from fastapi import Request

from currency_converter.core.config import Settings
from currency_converter.services.rates.service import RateService


def get_rate_service(request: Request) -> RateService:
    return request.app.state.rate_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
