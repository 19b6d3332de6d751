"""
Pytest configuration for tests.

Points config at a throwaway data directory and an in-memory SQLite
database BEFORE any microposts modules are imported, so nothing touches
~/.microposts.
"""
import os
import tempfile

os.environ["MICROPOSTS_DATA_DIR"] = tempfile.mkdtemp(prefix="microposts-test-")
os.environ["MICROPOSTS_DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("MICROPOSTS_LOG_LEVEL", None)
