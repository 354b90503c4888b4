# chore_wars/core/logger.py
import logging
import os
import traceback
from logging.handlers import TimedRotatingFileHandler
from typing import Any, Dict, Optional

import requests

from chore_wars import config

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "chore_wars.log"

EMBED_COLOR_ERROR = 0xE74C3C
EMBED_COLOR_CRITICAL = 0x8E44AD
TRACE_TAIL = 1000


class DiscordErrorHandler(logging.Handler):
    """Mirrors ERROR records to a Discord webhook as an embed"""

    def __init__(self, webhook_url: Optional[str] = None, timeout: float = 5.0):
        super().__init__(level=logging.ERROR)
        self.webhook_url = webhook_url
        self.timeout = timeout

    def build_payload(self, record: logging.LogRecord) -> Dict[str, Any]:
        description = f"```\n{self.format(record)}\n```"
        if record.exc_info:
            trace = "".join(traceback.format_exception(*record.exc_info))
            description += f"\n**Stack Trace (End):**\n```python\n{trace[-TRACE_TAIL:]}```"

        color = EMBED_COLOR_CRITICAL if record.levelno >= logging.CRITICAL else EMBED_COLOR_ERROR
        return {
            "username": "Chore Wars",
            "embeds": [{
                "title": f"😰 {record.levelname} in {record.name}",
                "description": description,
                "color": color,
            }],
        }

    def emit(self, record: logging.LogRecord):
        url = self.webhook_url or config.DISCORD_WEBHOOK_ERROR
        if not url or record.levelno < logging.ERROR:
            return
        try:
            requests.post(url, json=self.build_payload(record), timeout=self.timeout)
        except Exception:
            self.handleError(record)


def _file_handler(formatter: logging.Formatter) -> TimedRotatingFileHandler:
    os.makedirs(config.LOG_DIR, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=os.path.join(config.LOG_DIR, LOG_FILE_NAME),
        when='midnight',
        backupCount=7,
        encoding='utf-8',
        delay=True,
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(name: str, webhook_url: Optional[str] = None) -> logging.Logger:
    """Named logger writing to console and the daily log file.

    ERROR records also go to Discord when a webhook is configured.
    Calling it again for the same name replaces the handlers.
    """
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.handlers.clear()
    logger.setLevel(getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)
    logger.addHandler(_file_handler(formatter))

    target_url = webhook_url or config.DISCORD_WEBHOOK_ERROR
    if target_url:
        discord = DiscordErrorHandler(webhook_url=target_url)
        discord.setFormatter(formatter)
        logger.addHandler(discord)

    return logger
