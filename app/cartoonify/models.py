"""
Request bodies for the Cartoonify endpoints.
"""
from typing import Optional

from pydantic import BaseModel, Field


class ImageRequest(BaseModel):
    """Image input shared by preview and generate-hd."""
    imageBase64: Optional[str] = Field(default=None, description="Inline data URL (data:image/...;base64,...)")
    sourceUrl: Optional[str] = Field(default=None, description="http(s) URL of the source image")
    imageData: Optional[str] = Field(default=None, description="Raw base64 payload, requires mimeType")
    mimeType: Optional[str] = Field(default=None, description="MIME type of imageData")
    style: Optional[str] = Field(default=None, description="Style key; unknown keys use the default style")
    persist: bool = Field(default=True, description="Set false to skip storage for this call")


class PreviewRequest(ImageRequest):
    """Request body for POST /preview."""

    class Config:
        json_schema_extra = {
            "example": {
                "imageBase64": "data:image/png;base64,iVBORw0KGgo...",
                "style": "anime"
            }
        }


class GenerateHDRequest(ImageRequest):
    """Request body for POST /generate-hd."""
    draftKey: Optional[str] = Field(
        default=None,
        description="Names the stored result; earlier previews are not reused"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "sourceUrl": "https://example.com/photo.jpg",
                "style": "urban",
                "draftKey": "order-1234"
            }
        }
