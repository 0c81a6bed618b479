"""Test environment: settings are read at import time, so set them before any smanzy import."""

import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production-0123456789abcdef0123456789abcdef0123"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["APP_ENV"] = "dev"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="smanzy-uploads-")
