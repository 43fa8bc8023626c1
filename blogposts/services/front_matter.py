import datetime
import logging
from typing import Any, Dict, Optional, Tuple

import frontmatter
from frontmatter.default_handlers import JSONHandler, TOMLHandler, YAMLHandler

logger = logging.getLogger(__name__)

HANDLERS = [YAMLHandler(), TOMLHandler(), JSONHandler()]
FORMAT_NAMES = {YAMLHandler: "yaml", TOMLHandler: "toml", JSONHandler: "json"}

_TRUE_STRINGS = {"true", "yes", "on", "1"}
_FALSE_STRINGS = {"false", "no", "off", "0"}


class FrontMatterError(ValueError):
    """Raised when a post header is present but cannot be parsed."""


def detect_format(text: str) -> Optional[str]:
    handler = frontmatter.detect_format(text.lstrip("\ufeff"), HANDLERS)
    return FORMAT_NAMES.get(type(handler)) if handler else None


def parse_front_matter(text: str) -> Tuple[Dict[str, Any], str, Optional[str]]:
    """
    Split a post into (metadata, body, format).

    Files without a header come back with empty metadata and the whole text
    as body. A header that fails to parse raises FrontMatterError.
    """
    text = text.lstrip("\ufeff")
    handler = frontmatter.detect_format(text, HANDLERS)
    if handler is None:
        return {}, text, None

    try:
        parsed = frontmatter.loads(text, handler=handler)
    except Exception as e:
        raise FrontMatterError(
            f"Malformed {FORMAT_NAMES[type(handler)]} header: {e}"
        ) from e

    return dict(parsed.metadata), parsed.content, FORMAT_NAMES[type(handler)]


def coerce_date(value) -> Optional[datetime.datetime]:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.datetime.fromisoformat(raw)
        except ValueError:
            logger.debug(f"Unparseable date value: {value!r}")
            return None
    return None


def coerce_draft(value) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    return None


def is_timezone_aware(value: datetime.datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def to_timestamp(value: Optional[datetime.datetime]) -> Optional[float]:
    """POSIX timestamp for ordering; naive values are read as UTC."""
    if value is None:
        return None
    if not is_timezone_aware(value):
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.timestamp()
