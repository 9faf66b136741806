"""
Utility functions and helpers for the review engine.

This module provides common functionality used across multiple components,
including date handling, text processing, JSON recovery and logging setup.
"""
import hashlib
import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from config.settings import Settings as settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_JSON_BLOCK = re.compile(r"(\{.*\}|\[.*\])", re.DOTALL)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the engine.

    Args:
        level: Log level name (defaults to settings.LOG_LEVEL)
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT
    )
    logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    # Provider SDKs log every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def ensure_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_date(dt: datetime) -> str:
    """
    Format a date for prompts, e.g. "Mon Jan 15 2024".

    Args:
        dt: Datetime to format

    Returns:
        Human-readable date without time of day
    """
    return dt.strftime("%a %b %d %Y")


def format_period(dt: datetime) -> str:
    """Monthly bucket label without zero padding, e.g. "2024-3"."""
    return f"{dt.year}-{dt.month}"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """
    Truncate text to a maximum length, adding a suffix if truncated.

    This intelligently truncates at word boundaries when possible.

    Args:
        text: Text to truncate
        max_length: Maximum length including suffix
        suffix: String to append if text is truncated

    Returns:
        Truncated text
    """
    if len(text) <= max_length:
        return text

    effective_length = max_length - len(suffix)
    truncated = text[:effective_length]
    last_space = truncated.rfind(' ')

    if last_space > effective_length * 0.8:
        truncated = truncated[:last_space]

    return truncated + suffix


def chunk_words(text: str, chunk_size: int = 500) -> List[str]:
    """
    Split text into chunks of at most chunk_size words.

    Args:
        text: Text to chunk
        chunk_size: Number of words per chunk

    Returns:
        List of text chunks (empty for blank text)
    """
    words = text.split()
    return [
        " ".join(words[i:i + chunk_size])
        for i in range(0, len(words), chunk_size)
    ]


def content_hash(text: str, length: int = 16) -> str:
    """Short, stable digest of a piece of text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    values = list(values)
    if not values:
        return 0.0
    return sum(values) / len(values)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def extract_json(text: str) -> Optional[Any]:
    """
    Decode JSON from model output.

    Models frequently wrap JSON in prose or markdown fences, so when the whole
    text does not decode, the outermost object or array is tried instead.

    Args:
        text: Raw model output

    Returns:
        The decoded value, or None if nothing decodes
    """
    if not text:
        return None

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    match = _JSON_BLOCK.search(text)
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError:
            return None
    return None
