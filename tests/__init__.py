"""Test package. Settings are read at import time, so the test environment is fixed here first."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs512-signing-0123456789abcdef"
os.environ["JWT_ALGORITHM"] = "HS512"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["TRANSACTION_ID_PREFIX"] = "TXN"
os.environ["LOG_LEVEL"] = "WARNING"
