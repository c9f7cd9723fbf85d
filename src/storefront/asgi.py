from __future__ import annotations

from fastapi import FastAPI

from storefront.adapters.inbound.web.fastapi_app import create_app
from storefront.bootstrap import build_usecases
from storefront.config import Settings


def create_asgi_app() -> FastAPI:
    return create_app(build_usecases(Settings.from_env()))
