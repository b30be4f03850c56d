"""Process-wide catalog used by the API layer.

Services receive the catalog through their constructor; only the views
call ``get_catalog`` to build them.
"""

from __future__ import annotations

from functools import lru_cache

from django.conf import settings

from modules.catalog.repositories import ICatalog, InMemoryCatalog


@lru_cache(maxsize=1)
def get_catalog() -> ICatalog:
    return InMemoryCatalog.from_fixture(settings.CATALOG_FIXTURE)
