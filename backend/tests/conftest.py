"""Root conftest - shared test configuration."""

import os

# Tests never reach a real database or ESI
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("ESI_BASE_URL", "http://esi.test")
