"""
Cartoonify errors.
Every error carries the HTTP status it is rendered with.
"""
from typing import Optional


class CartoonifyError(Exception):
    """Base class for errors rendered through the response envelope."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingInput(CartoonifyError):
    status_code = 400


class InvalidInput(CartoonifyError):
    status_code = 400


class UnsupportedMediaType(CartoonifyError):
    status_code = 400


class PayloadTooLarge(CartoonifyError):
    status_code = 413


class MethodNotAllowed(CartoonifyError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class ConfigurationError(CartoonifyError):
    status_code = 500


class UpstreamNoOutput(CartoonifyError):
    status_code = 500


class UpstreamError(CartoonifyError):
    """
    The generation or storage capability failed.

    The upstream status is mirrored when it is a real error status,
    otherwise the request fails with 500.
    """

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        if upstream_status is not None and 400 <= upstream_status < 600:
            self.status_code = upstream_status


class NotFound(CartoonifyError):
    status_code = 404
