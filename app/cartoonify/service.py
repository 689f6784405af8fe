"""
Cartoonify Service
Runs the preview / generate-hd pipeline:
normalize input -> resolve style -> generate -> persist -> envelope.
"""
import logging
import mimetypes
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from ..storage import StorageService
from .clients import BaseGenerator, GenerationRequest, GeneratorResult, TargetSize, get_generator
from .errors import ConfigurationError, NotFound, UpstreamError, UpstreamNoOutput
from .images import ImageArtifact, fetch_remote_image, normalize_input, to_data_url
from .models import GenerateHDRequest, ImageRequest, PreviewRequest
from .persistence import PersistenceAdapter
from .responses import ok_envelope
from .styles import StyleCatalog

logger = logging.getLogger(__name__)

# Generators always return PNG
OUTPUT_MIME_TYPE = "image/png"


class CartoonifyService:
    """
    Stateless request pipeline.

    Holds only objects built once at startup (settings, style catalog,
    generator, persistence); nothing is shared between requests.
    """

    def __init__(
        self,
        settings,
        generator: BaseGenerator,
        persistence: PersistenceAdapter,
        styles: StyleCatalog,
        fetch: Optional[Callable[[str], ImageArtifact]] = None,
    ):
        """
        Initialize CartoonifyService.

        Args:
            settings: Settings instance
            generator: Image generation capability
            persistence: PersistenceAdapter wrapping the storage backend
            styles: Style lookup table
            fetch: Remote image loader, defaults to an HTTP GET
        """
        self.settings = settings
        self.generator = generator
        self.persistence = persistence
        self.styles = styles
        self.fetch = fetch or (lambda url: fetch_remote_image(url, timeout=settings.upstream_timeout))

    def normalize(self, body: ImageRequest) -> ImageArtifact:
        return normalize_input(
            image_base64=body.imageBase64,
            source_url=body.sourceUrl,
            image_data=body.imageData,
            mime_type=body.mimeType,
            fetch=self.fetch,
        )

    def generate(self, artifact: ImageArtifact, prompt: str, target_size: TargetSize) -> bytes:
        """
        Submit exactly one generation request.

        Raises:
            ConfigurationError: the generator is missing credentials
            UpstreamError: the generator failed
            UpstreamNoOutput: the generator succeeded without an image
        """
        missing = self.generator.get_missing_config()
        if missing:
            raise ConfigurationError(f"Generator '{self.generator.name}' not configured: missing {', '.join(missing)}")

        request = GenerationRequest(artifact=artifact, prompt=prompt, target_size=target_size)
        result: GeneratorResult = self.generator.generate(request)

        if result.success:
            return result.data
        if result.error:
            logger.warning(f"Generation failed: {result.response_info}")
            raise UpstreamError(result.error, result.status_code)
        raise UpstreamNoOutput("No image returned from the image API")

    def preview(self, body: PreviewRequest) -> Dict[str, Any]:
        """
        Low resolution stylization returned inline.

        When the caller uploaded the image, the source is also stored so a
        later generate-hd call can reference it by sourceUrl.
        """
        artifact = self.normalize(body)
        style = self.styles.resolve(body.style)
        logger.info(f"Preview: style={style.key}, type={artifact.mime_type}, bytes={len(artifact.data)}")

        output = self.generate(artifact, style.prompt_text, self.settings.preview_size)

        if body.sourceUrl and not body.imageBase64:
            source_url = body.sourceUrl
        else:
            reference = self.persistence.persist(
                artifact.data,
                self.settings.preview_folder,
                mime_type=artifact.mime_type,
                enabled=body.persist,
            )
            source_url = reference.url if reference else None

        return ok_envelope(previewBase64=to_data_url(output, OUTPUT_MIME_TYPE), sourceUrl=source_url)

    def generate_hd(self, body: GenerateHDRequest) -> Dict[str, Any]:
        """
        Full resolution stylization, persisted when storage is available.

        Falls back to returning the image inline if storage is disabled
        or the upload fails.
        """
        artifact = self.normalize(body)
        style = self.styles.resolve(body.style)
        logger.info(f"Generate HD: style={style.key}, type={artifact.mime_type}, draftKey={body.draftKey}")

        output = self.generate(artifact, style.prompt_text, self.settings.hd_size)

        reference = self.persistence.persist(
            output,
            self.settings.hd_folder,
            mime_type=OUTPUT_MIME_TYPE,
            name_hint=body.draftKey,
            enabled=body.persist,
        )
        if reference is None:
            return ok_envelope(hdBase64=to_data_url(output, OUTPUT_MIME_TYPE))
        return ok_envelope(hdUrl=reference.url, hdKey=reference.key)

    def ping(self, check_storage: bool = False) -> Dict[str, Any]:
        """
        Liveness report.

        Args:
            check_storage: also write a small marker object to the health
                folder and report the outcome as writeTest
        """
        storage = self.persistence.storage
        return ok_envelope(
            time=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            provider=self.generator.name,
            providerConfigured=self.generator.is_configured(),
            storage=storage.mode if storage else "NONE",
            writeTest=self._write_test() if check_storage else None,
        )

    def _write_test(self) -> Dict[str, Any]:
        storage = self.persistence.storage
        if storage is None:
            return {"ok": False, "error": "Storage is disabled"}
        key = f"{self.settings.health_folder.strip('/')}/ping-{int(time.time() * 1000)}.txt"
        try:
            url = storage.upload_file(key, b"ok", "text/plain")
        except Exception as e:
            logger.warning(f"Storage write check failed: {e}")
            return {"ok": False, "error": str(e)}
        return {"ok": True, "key": key, "url": url}

    def get_file(self, key: str) -> Tuple[bytes, str]:
        """Read back a stored object and guess its media type."""
        storage = self.persistence.storage
        content = storage.get_file(key) if storage is not None else None
        if content is None:
            raise NotFound("File not found")
        media_type, _ = mimetypes.guess_type(key)
        return content, media_type or "application/octet-stream"

    def list_styles(self) -> Dict[str, Any]:
        return ok_envelope(
            default=self.styles.default_key,
            styles=[{"key": s.key, "name": s.name} for s in self.styles.list_styles()],
        )


def build_service(settings) -> CartoonifyService:
    """Wire the generator, storage backend and style table from settings."""
    try:
        storage = StorageService(settings)
    except Exception as e:
        logger.warning(f"Storage unavailable, results will be returned inline: {e}")
        storage = None
    return CartoonifyService(
        settings,
        generator=get_generator(settings),
        persistence=PersistenceAdapter(storage if storage is not None and storage.enabled else None),
        styles=StyleCatalog.load(settings.styles_file, settings.default_style),
    )
