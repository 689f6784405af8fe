"""
Cartoonify Azure Function
HTTP-Triggered function serving preview, generate-hd and ping under /api/{action}.
"""
import azure.functions as func
import json
import logging
from typing import Optional

from pydantic import ValidationError

from app.config import Settings
from app.cors import CorsPolicy
from app.cartoonify import CartoonifyService, build_service
from app.cartoonify.errors import InvalidInput, MethodNotAllowed, NotFound, PayloadTooLarge
from app.cartoonify.models import GenerateHDRequest, PreviewRequest
from app.cartoonify.responses import render_error

logger = logging.getLogger(__name__)

# Built on first invocation and reused by the warm worker
_settings: Optional[Settings] = None
_service: Optional[CartoonifyService] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def get_service() -> CartoonifyService:
    global _service
    if _service is None:
        _service = build_service(get_settings())
    return _service


def _read_body(req: func.HttpRequest, max_bytes: int) -> dict:
    raw = req.get_body() or b""
    if len(raw) > max_bytes:
        raise PayloadTooLarge(f"Request body exceeds {max_bytes} bytes")
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        raise InvalidInput("Invalid JSON body")
    if not isinstance(body, dict):
        raise InvalidInput("Request body must be a JSON object")
    return body


def _dispatch(req: func.HttpRequest, service: CartoonifyService) -> dict:
    action = (req.route_params.get("action") or "").strip("/").lower()
    method = req.method.upper()

    if action == "ping":
        if method != "GET":
            raise MethodNotAllowed()
        return service.ping(check_storage=req.params.get("check") == "storage")

    if action == "styles":
        if method != "GET":
            raise MethodNotAllowed()
        return service.list_styles()

    if action not in ("preview", "generate-hd"):
        raise NotFound(f"Unknown action: {action}")
    if method != "POST":
        raise MethodNotAllowed()

    body = _read_body(req, service.settings.max_body_bytes)
    try:
        if action == "preview":
            return service.preview(PreviewRequest(**body))
        return service.generate_hd(GenerateHDRequest(**body))
    except ValidationError as e:
        errors = e.errors()
        detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
        raise InvalidInput(f"Invalid request body: {detail}")


def main(req: func.HttpRequest) -> func.HttpResponse:
    """
    HTTP Trigger handler for Cartoonify.

    Expected JSON body for preview / generate-hd:
    {
        "imageBase64": "data:image/png;base64,...",   (or "sourceUrl", or "imageData" + "mimeType")
        "style": "urban",
        "draftKey": "optional, generate-hd only"
    }
    """
    origin = req.headers.get("origin")
    try:
        settings = get_settings()
    except Exception as e:
        status, result = render_error(e)
        return func.HttpResponse(
            json.dumps(result),
            status_code=status,
            mimetype="application/json",
            headers=CorsPolicy(["*"]).headers(origin)
        )

    headers = CorsPolicy(settings.allowed_origins).headers(origin)

    # Preflight is answered before the service is built
    if req.method.upper() == "OPTIONS":
        return func.HttpResponse(status_code=204, headers=headers)

    logger.info(f"Cartoonify function triggered: {req.method} {req.route_params.get('action')}")

    try:
        status, result = 200, _dispatch(req, get_service())
    except Exception as e:
        status, result = render_error(e)

    return func.HttpResponse(
        json.dumps(result),
        status_code=status,
        mimetype="application/json",
        headers=headers
    )
