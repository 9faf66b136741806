# ============= review_engine/utils/__init__.py =============
'''Utilities package for common helper functions.'''

from .helpers import (
    configure_logging,
    ensure_utc,
    utc_now,
    format_date,
    format_period,
    truncate_text,
    chunk_words,
    content_hash,
    mean,
    clamp,
    extract_json
)

__all__ = [
    'configure_logging',
    'ensure_utc',
    'utc_now',
    'format_date',
    'format_period',
    'truncate_text',
    'chunk_words',
    'content_hash',
    'mean',
    'clamp',
    'extract_json'
]
