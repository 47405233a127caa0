import json
import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

SETTINGS_PATH = "Settings.json"


def parse_settings_value(v: Union[str, int, float]) -> Union[int, float]:
    if isinstance(v, (int, float)):
        return v
    if "." in v:
        return float(v.replace(",", ""))
    else:
        return int(v.replace(",", ""))


@dataclass(frozen=True)
class Settings:
    hypixel_api_key: Optional[str] = None
    database_path: str = os.path.join("Cache", "inventory_cache.db")
    default_ttl: float = 3600.0
    host: str = "127.0.0.1"
    port: int = 8000
    log_dir: str = "logs"
    log_level: str = "INFO"


def load_settings(path: str = SETTINGS_PATH) -> Settings:
    """
    Read Settings.json. Missing keys (or a missing file) fall back to the
    defaults; HYPIXEL_API_KEY in the environment overrides the file.
    """
    data: dict = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as file:
            data = json.load(file)
    else:
        logger.warning("[Settings] %s doesn't exist, using defaults", path)

    defaults = Settings()
    cache = data.get("CACHE", {})
    server = data.get("SERVER", {})
    logging_section = data.get("LOGGING", {})

    return Settings(
        hypixel_api_key=os.environ.get("HYPIXEL_API_KEY") or data.get("HYPIXEL_API_KEY") or None,
        database_path=cache.get("DatabasePath", defaults.database_path),
        default_ttl=float(parse_settings_value(cache.get("DefaultTTL", defaults.default_ttl))),
        host=server.get("Host", defaults.host),
        port=int(parse_settings_value(server.get("Port", defaults.port))),
        log_dir=logging_section.get("Directory", defaults.log_dir),
        log_level=logging_section.get("Level", defaults.log_level),
    )
