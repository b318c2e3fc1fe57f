from __future__ import annotations

import re
from typing import Callable, Iterable, TypeVar
from urllib.parse import urlparse

T = TypeVar("T")


def is_valid_url(url: str) -> bool:
    """Basic URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except ValueError:
        return False


def extract_domain(url: str) -> str:
    """Extract domain from URL for display."""
    try:
        return urlparse(url).netloc
    except ValueError:
        return url


def normalize_text(text: str) -> str:
    text = text.replace("\xa0", " ")
    text = re.sub(r"\r\n?", "\n", text)
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def dedupe_by_url(items: Iterable[T], key: Callable[[T], str]) -> list[T]:
    """Keep the first item for each URL, preserving order."""
    seen: set[str] = set()
    deduped: list[T] = []
    for item in items:
        url = key(item).strip()
        if url in seen:
            continue
        seen.add(url)
        deduped.append(item)
    return deduped
