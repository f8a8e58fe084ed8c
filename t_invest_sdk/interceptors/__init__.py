"""Client interceptors attached to every SDK channel."""
from .auth import AuthInterceptor, MetadataInterceptor
from .logging import LoggingInterceptor

__all__ = [
    "AuthInterceptor",
    "MetadataInterceptor",
    "LoggingInterceptor",
]
