"""
CORS policy shared by the FastAPI app and the Azure Function.
"""
from typing import Dict, List, Optional

ALLOW_METHODS = "GET,POST,OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"
MAX_AGE = "86400"


class CorsPolicy:
    """
    Allow-list of origins.

    A listed origin is reflected back; any other origin gets the first
    configured one. With '*' configured every origin is reflected.
    """

    def __init__(self, allowed_origins: List[str]):
        self.allowed_origins = list(allowed_origins) or ["*"]
        self.permissive = "*" in self.allowed_origins

    def pick_origin(self, origin: Optional[str]) -> str:
        if self.permissive:
            return origin or "*"
        if origin in self.allowed_origins:
            return origin
        return self.allowed_origins[0]

    def headers(self, origin: Optional[str]) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.pick_origin(origin),
            "Vary": "Origin",
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
            "Access-Control-Max-Age": MAX_AGE,
        }
