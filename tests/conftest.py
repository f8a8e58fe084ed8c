"""Pytest bootstrap configuration.

Pin SDK environment variables before any module builds the default
settings, so a developer's own TINVEST_* values never leak into tests.
"""
import os

os.environ["TINVEST_TOKEN"] = "t.env-token"
os.environ["TINVEST_ENVIRONMENT"] = "production"
os.environ.pop("TINVEST_TARGET", None)
os.environ.pop("TINVEST_TLS__ENABLED", None)
os.environ.pop("TINVEST_TLS__CA", None)
