from .request_logging import RequestLoggingMiddleware
from .gzip_request import GzipRequestMiddleware
from .error_handlers import register_error_handlers

__all__ = ["RequestLoggingMiddleware", "GzipRequestMiddleware", "register_error_handlers"]
