"""
Style Resolver for Cartoonify.
Maps a caller-supplied style key to the prompt sent to the generator.
"""
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Bundled style table
STYLES_FILE_PATH = Path(__file__).parent.parent / "styles.json"


@dataclass(frozen=True)
class StyleConfig:
    """A named stylization and its prompt."""
    key: str
    name: str
    prompt_text: str


def _normalize_key(key: Optional[str]) -> str:
    return (key or "").strip().lower()


class StyleCatalog:
    """
    Static lookup table of styles.

    Unknown or missing keys resolve to the default style instead of
    failing, since front-end builds do not all send the same keys.
    """

    def __init__(self, styles: List[StyleConfig], default_key: str):
        self._styles: Dict[str, StyleConfig] = {_normalize_key(s.key): s for s in styles}
        self.default_key = _normalize_key(default_key)
        if self.default_key not in self._styles:
            raise ValueError(f"Default style '{default_key}' is not defined")

    @classmethod
    def load(cls, path: Optional[Path] = None, default_key: Optional[str] = None) -> "StyleCatalog":
        """
        Load style configurations from a styles.json file.
        """
        path = Path(path) if path else STYLES_FILE_PATH
        if not path.exists():
            raise FileNotFoundError(f"Styles file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        styles = [
            StyleConfig(
                key=s["key"],
                name=s.get("name", s["key"].title()),
                prompt_text=s["prompt_text"],
            )
            for s in data.get("styles", [])
        ]
        return cls(styles, default_key or data.get("default", "urban"))

    @property
    def default(self) -> StyleConfig:
        return self._styles[self.default_key]

    def resolve(self, key: Optional[str]) -> StyleConfig:
        style = self._styles.get(_normalize_key(key))
        if style is None:
            logger.debug(f"Unknown style '{key}', using '{self.default_key}'")
            return self.default
        return style

    def prompt_for(self, key: Optional[str]) -> str:
        return self.resolve(key).prompt_text

    def list_styles(self) -> List[StyleConfig]:
        return list(self._styles.values())
