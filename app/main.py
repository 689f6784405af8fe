import logging
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .cors import CorsPolicy
from .cartoonify import CartoonifyService, build_service
from .cartoonify.errors import CartoonifyError, PayloadTooLarge
from .cartoonify.models import GenerateHDRequest, PreviewRequest
from .cartoonify.responses import error_envelope, render_error

logger = logging.getLogger(__name__)


def get_service(request: Request) -> CartoonifyService:
    return request.app.state.service


def create_app(settings: Optional[Settings] = None, service: Optional[CartoonifyService] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Settings are read from the environment when not given; the service is
    built from the settings when not given.
    """
    settings = settings or Settings.from_env()

    # Configure logging
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    app = FastAPI(
        title="Cartoonify API",
        description="Photo stylization with preview and HD generation",
        version="1.0.0"
    )
    app.state.settings = settings
    app.state.service = service or build_service(settings)
    cors = CorsPolicy(settings.allowed_origins)

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        """
        CORS headers on every response; preflight and oversized bodies are
        answered before routing.
        """
        headers = cors.headers(request.headers.get("origin"))

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            body_size = int(content_length)
        elif request.method == "POST":
            # Chunked uploads carry no Content-Length; the cached body is replayed downstream
            body_size = len(await request.body())
        else:
            body_size = 0
        if body_size > settings.max_body_bytes:
            status, body = render_error(PayloadTooLarge(f"Request body exceeds {settings.max_body_bytes} bytes"))
            return JSONResponse(body, status_code=status, headers=headers)

        try:
            response = await call_next(request)
        except Exception as e:
            status, body = render_error(e)
            return JSONResponse(body, status_code=status, headers=headers)

        response.headers.update(headers)
        return response

    @app.exception_handler(CartoonifyError)
    async def cartoonify_error_handler(request: Request, exc: CartoonifyError):
        status, body = render_error(exc)
        return JSONResponse(body, status_code=status)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(error_envelope(str(exc.detail)), status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg", "invalid value") if errors else "invalid value"
        return JSONResponse(error_envelope(f"Invalid request body: {detail}"), status_code=400)

    @app.post("/preview")
    def preview(body: PreviewRequest, service: CartoonifyService = Depends(get_service)):
        """
        Low resolution stylized preview, returned as a data URL.
        """
        return service.preview(body)

    @app.post("/generate-hd")
    def generate_hd(body: GenerateHDRequest, service: CartoonifyService = Depends(get_service)):
        """
        Full resolution stylization.

        Returns hdUrl/hdKey when stored, or hdBase64 when storage is
        unavailable. draftKey only names the stored file.
        """
        return service.generate_hd(body)

    @app.get("/ping")
    def ping(check: Optional[str] = None, service: CartoonifyService = Depends(get_service)):
        """
        Liveness report. ?check=storage also writes a marker object.
        """
        return service.ping(check_storage=check == "storage")

    @app.get("/styles")
    def list_styles(service: CartoonifyService = Depends(get_service)):
        """
        Get the configured styles and the default used for unknown keys.
        """
        return service.list_styles()

    @app.get("/files/{filename:path}")
    def get_file(filename: str, service: CartoonifyService = Depends(get_service)):
        """
        Retrieve a stored preview source or HD result.
        """
        content, media_type = service.get_file(filename)
        return Response(content=content, media_type=media_type)

    return app


app = create_app()


def run():
    """Serve the app with uvicorn on HOST:PORT."""
    settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
