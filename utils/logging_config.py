"""
Centralized Logging Configuration

Root logger setup for the API process:
- level from LOG_LEVEL
- daily rotated file in logs/storefront.log, kept LOG_RETENTION_DAYS days
- console output for container logs
- customer PII and credentials masked when LOG_MASK_SECRETS is on

Call setup_logging() once, before the app is created (see run.py).
"""

import logging
import logging.handlers
import re
from pathlib import Path
from typing import Pattern

import config

LOG_FORMAT = '%(asctime)s | %(name)-25s | %(levelname)-8s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Order matters: card numbers are masked before the shorter phone pattern can match part of them
MASKING_RULES: list[tuple[Pattern, str]] = [
    (re.compile(r'(api[_-]?(?:key|secret)["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-]{20,})', re.IGNORECASE),
     r'\1[REDACTED_API_KEY]'),
    (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-:]{20,})', re.IGNORECASE), r'\1[REDACTED_TOKEN]'),
    (re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.IGNORECASE), r'\1[REDACTED_BEARER_TOKEN]'),
    (re.compile(r'((?:password|pass)["\']?\s*[:=]\s*["\']?)([^\s"\']+)', re.IGNORECASE), r'\1[REDACTED_PASSWORD]'),
    (re.compile(r'\b(?:\d[ -]?){12,18}\d\b'), '[REDACTED_CARD]'),
    (re.compile(r'\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b'), '[REDACTED_EMAIL]'),
    # Mauritian numbers: +230 then 7 or 8 digits, optionally grouped
    (re.compile(r'\+230[\s-]?\d{3,4}[\s-]?\d{4}\b'), '[REDACTED_PHONE]'),
    (re.compile(r'(address["\']?\s*[:=]\s*["\']?)([^"\']{10,})', re.IGNORECASE), r'\1[REDACTED_ADDRESS]'),
]

# Driver and server chatter kept out of the request logs
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "aiohttp.access")


def mask(text: str) -> str:
    for pattern, replacement in MASKING_RULES:
        text = pattern.sub(replacement, text)
    return text


class SecretMaskingFilter(logging.Filter):
    """
    Rewrites log records so that e-mail addresses, phone numbers, card
    numbers, shipping addresses and credentials never reach a handler.

    Only string arguments are masked; numbers and objects pass unchanged.
    The record is never dropped.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = mask(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(mask(arg) if isinstance(arg, str) else arg for arg in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: mask(value) if isinstance(value, str) else value
                           for key, value in record.args.items()}
        return True


def _build_handlers(log_dir: Path, level: int, retention_days: int, mask_secrets: bool) -> list[logging.Handler]:
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_dir / "storefront.log",
        when="midnight",
        backupCount=retention_days,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()

    handlers = [file_handler, console_handler]
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        if mask_secrets:
            handler.addFilter(SecretMaskingFilter())
    return handlers


def setup_logging(log_dir: Path | str = "logs") -> None:
    """
    Replace the root logger's handlers with the storefront handlers.

    uvicorn is started with log_config=None, so its loggers propagate here too.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True)

    level_name = str(getattr(config, "LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    retention_days = getattr(config, "LOG_RETENTION_DAYS", 5)
    mask_secrets = getattr(config, "LOG_MASK_SECRETS", True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in _build_handlers(log_dir, level, retention_days, mask_secrets):
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(
        f"Logging initialized: level={level_name}, retention={retention_days} days, "
        f"masking={'on' if mask_secrets else 'off'}"
    )
