"""
Cartoonify Module
AI-powered photo stylization: preview, generate-hd and ping.
"""
from .service import CartoonifyService, build_service
from .clients import get_generator, GeneratorResult, TargetSize
from .styles import StyleCatalog

__all__ = ["CartoonifyService", "build_service", "get_generator", "GeneratorResult", "TargetSize", "StyleCatalog"]
