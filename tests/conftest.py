"""Test environment: in-memory SQLite and a cheap bcrypt cost before app settings load."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret-" * 8)
