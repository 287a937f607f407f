"""Root conftest - shared test configuration."""

import os

# Tests never talk to a real database or mail relay
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("MAIL_ENABLED", "false")
os.environ.setdefault("LOG_FORMAT", "text")
