from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from PIL import ImageFont


FALLBACK_FONT_PATTERNS = (
    "arial",
    "helvetica",
    "liberationsans",
    "liberation sans",
    "dejavusans",
    "dejavu sans",
)


def text_width(text: str, *, font_family: str, font_size: float) -> float:
    """Rendered advance width of ``text`` in pixels at ``font_size``."""
    if not text:
        return 0.0
    font = _load_font(font_family, int(round(max(1.0, font_size))))
    return float(font.getlength(text))


@lru_cache(maxsize=32)
def _load_font(font_family: str, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default(size=size)


@lru_cache(maxsize=32)
def _resolve_font_path(font_family: str) -> Path | None:
    # CSS font stacks list fallbacks; try each family in order.
    wanted = tuple(part.strip().strip("'\"").lower() for part in font_family.split(",") if part.strip())
    patterns = wanted + FALLBACK_FONT_PATTERNS

    font_dirs = [
        Path.home() / "Library" / "Fonts",
        Path("/Library/Fonts"),
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
    ]

    candidates: list[Path] = []
    for base in font_dirs:
        if not base.exists():
            continue
        for ext in ("*.ttf", "*.otf", "*.ttc"):
            candidates.extend(sorted(base.rglob(ext)))

    for pattern in patterns:
        p = pattern.replace(" ", "")
        if p in ("sans-serif", "serif", "monospace"):
            continue
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if stem == p or stem.startswith(p + "-") or stem == p + "regular":
                return path
    return None
