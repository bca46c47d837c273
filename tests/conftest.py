import pytest
from django.core.cache import cache

LOCAL_CACHE = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "gigfin-tests",
    }
}


@pytest.fixture(autouse=True)
def _clear_entry_cache(settings):
    # one process here, and lib tests must not touch the database cache table
    settings.CACHES = LOCAL_CACHE
    # entry lists are cached per user id and ids get reused across rolled-back tests
    cache.clear()
    yield
    cache.clear()
