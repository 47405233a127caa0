import logging

import uvicorn

from api_server import app
from hypixel import HypixelClient
from inventory_cache import InventoryCache
from inventory_service import InventoryService
from logging_config import setup_logging
from settings import load_settings

logger = logging.getLogger("main")


def build_service(settings) -> InventoryService:
    """Wire the process-wide cache and Hypixel client into one service."""
    cache = InventoryCache(settings.database_path, default_ttl=settings.default_ttl)
    cache.initialize()
    client = HypixelClient(settings.hypixel_api_key)
    return InventoryService(cache, client, default_ttl=settings.default_ttl)


def main():
    settings = load_settings()
    setup_logging(settings)
    if not settings.hypixel_api_key:
        logger.warning("[Settings] HYPIXEL_API_KEY is not set, profile requests will be rejected")

    app.state.service = build_service(settings)

    logger.info("[API] Starting uvicorn on %s:%d", settings.host, settings.port)
    # log_config=None keeps uvicorn on the handlers installed above
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
