"""
Response Composer: the uniform JSON envelope.
"""
import logging
from typing import Any, Dict, Tuple

from .errors import CartoonifyError

logger = logging.getLogger(__name__)


def ok_envelope(**payload: Any) -> Dict[str, Any]:
    body = {"ok": True}
    body.update({k: v for k, v in payload.items() if v is not None})
    return body


def error_envelope(message: str) -> Dict[str, Any]:
    return {"ok": False, "error": message}


def render_error(exc: Exception) -> Tuple[int, Dict[str, Any]]:
    """Map an exception to (status, envelope)."""
    if isinstance(exc, CartoonifyError):
        logger.warning(f"{type(exc).__name__}: {exc.message}")
        return exc.status_code, error_envelope(exc.message)
    logger.error("Unexpected error while handling request", exc_info=exc)
    return 500, error_envelope(str(exc) or type(exc).__name__)
