from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from .board import DEFAULT_HEIGHT, DEFAULT_WIDTH

logger = logging.getLogger(__name__)

# Largest width or height accepted from a client.
MAX_SIDE = 50


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s=%d must be positive, using %d", name, value, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    save_path: str = 'save.json'
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            width=_int_env('WAFFLE_WIDTH', DEFAULT_WIDTH),
            height=_int_env('WAFFLE_HEIGHT', DEFAULT_HEIGHT),
            save_path=os.getenv('WAFFLE_SAVE_PATH', 'save.json'),
            log_level=os.getenv('WAFFLE_LOG_LEVEL', 'INFO').upper(),
        )


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
