"""Versioned cache keys for the public event listings.

Listing responses are cached per query string. Any write to an event or a
registration bumps the version, which orphans every cached listing at once.
"""

from collections.abc import Callable
from typing import Any

from django.conf import settings
from django.core.cache import cache
from django.utils.http import urlencode

LISTING_VERSION_KEY = "events:listings:version"


def listing_version() -> int:
    cache.add(LISTING_VERSION_KEY, 1, None)
    return cache.get(LISTING_VERSION_KEY, 1)


def listing_key(name: str, params: dict[str, Any]) -> str:
    query = urlencode(sorted(params.items()))
    return f"events:listings:v{listing_version()}:{name}:{query}"


def cached_listing(name: str, params: dict[str, Any], build: Callable[[], Any]) -> Any:
    key = listing_key(name, params)
    data = cache.get(key)
    if data is None:
        data = build()
        cache.set(key, data, settings.EVENTS_LIST_CACHE_SECONDS)
    return data


def invalidate_listings() -> None:
    cache.add(LISTING_VERSION_KEY, 1, None)
    try:
        cache.incr(LISTING_VERSION_KEY)
    except ValueError:
        cache.set(LISTING_VERSION_KEY, 2, None)
