from classvote.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
