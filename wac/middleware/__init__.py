from .logging_middleware import DEMO_MODE_HEADER, RequestLoggingMiddleware

__all__ = [
    "DEMO_MODE_HEADER",
    "RequestLoggingMiddleware",
]
