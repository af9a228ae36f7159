# File: address_scout/server.py
"""address_scout.server: HTTP API (aiohttp.web) поверх AddressScraper.

Маршруты:
  GET  /ping     проверка живости
  POST /scrape   {"targets": ["https://..."]} -> найденные адреса
"""

from __future__ import annotations

import asyncio
import json
from typing import AsyncIterator, Awaitable, Callable, Optional

from aiohttp import web

from address_scout.aggregator import results_to_dicts
from address_scout.config import ScraperConfig
from address_scout.crawler.scraper import AddressScraper
from address_scout.logger import logger, route_access_log
from address_scout.utils import is_http_url

__all__ = ["create_app", "run_server"]

CONFIG_KEY = web.AppKey("config", ScraperConfig)
SCRAPER_KEY = web.AppKey("scraper", AddressScraper)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _error(status: int, message: str) -> web.Response:
    return web.json_response({"error": message}, status=status)


@web.middleware
async def cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    """Разрешает CORS только для origin-ов из конфига; OPTIONS отвечает 204."""
    if request.method == "OPTIONS":
        response: web.StreamResponse = web.Response(status=204)
    else:
        response = await handler(request)

    origin = request.headers.get("Origin")
    if origin and origin in request.app[CONFIG_KEY].allowed_origins:
        response.headers["Access-Control-Allow-Origin"] = origin
    response.headers["Access-Control-Allow-Methods"] = "POST, GET, OPTIONS, PUT, DELETE"
    response.headers["Access-Control-Allow-Headers"] = (
        "Accept, Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, Authorization"
    )
    response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


async def handle_ping(_: web.Request) -> web.Response:
    return web.json_response({"message": "pong"})


async def handle_scrape(request: web.Request) -> web.Response:
    config = request.app[CONFIG_KEY]
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error(400, "Invalid request")
    targets = payload.get("targets") if isinstance(payload, dict) else None
    if not isinstance(targets, list) or not all(isinstance(t, str) for t in targets):
        return _error(400, "Invalid request")
    if not targets:
        return _error(400, "Targets array must have at least one URL")
    if not all(is_http_url(t) for t in targets):
        return _error(400, "All targets must start with 'http://' or 'https://'")

    scraper = request.app[SCRAPER_KEY]
    try:
        results = await asyncio.wait_for(scraper.scrape(targets), timeout=config.request_timeout)
    except asyncio.TimeoutError:
        logger.warning("Scrape of %s timed out after %s s", targets, config.request_timeout)
        return _error(408, f"Request timed out after {config.request_timeout:g} seconds")
    except Exception as exc:
        logger.exception("Scrape of %s failed", targets)
        return _error(500, f"Failed to scrape targets: {exc}")

    return web.json_response(
        {"message": "Data fetched successfully", "results": results_to_dicts(results)}
    )


def create_app(
    config: Optional[ScraperConfig] = None,
    scraper: Optional[AddressScraper] = None,
) -> web.Application:
    """Собирает aiohttp-приложение.

    Если *scraper* не передан, он создаётся при старте приложения и
    закрывается при остановке; его кэши живут всё время работы сервера.
    """
    config = config or (scraper.config if scraper else ScraperConfig())
    app = web.Application(middlewares=[cors_middleware])
    app[CONFIG_KEY] = config

    if scraper is not None:
        app[SCRAPER_KEY] = scraper
    else:
        async def scraper_ctx(app: web.Application) -> AsyncIterator[None]:
            async with AddressScraper(config) as owned:
                app[SCRAPER_KEY] = owned
                yield

        app.cleanup_ctx.append(scraper_ctx)

    app.router.add_get("/ping", handle_ping)
    app.router.add_post("/scrape", handle_scrape)
    return app


def run_server(config: Optional[ScraperConfig] = None, host: str = "0.0.0.0", port: int = 8080) -> None:
    route_access_log()
    logger.info("Starting HTTP API on %s:%d", host, port)
    web.run_app(create_app(config), host=host, port=port, print=None)
