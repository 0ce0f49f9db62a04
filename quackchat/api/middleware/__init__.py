"""API middleware."""

from quackchat.api.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
