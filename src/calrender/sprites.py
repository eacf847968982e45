"""Vector emoji sprites and the read-only sprite lookup table."""

from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Protocol

logger = logging.getLogger(__name__)

VARIATION_SELECTOR = "\ufe0f"
DEFAULT_VIEW_BOX = "0 0 128 128"
SPRITE_FILE_PREFIX = "emoji_u"

_ROOT_RE = re.compile(r"<svg\b([^>]*)>(.*)</svg>", re.DOTALL)
_VIEW_BOX_RE = re.compile(r'viewBox="([^"]+)"')
_PROLOG_RE = re.compile(r"<\?xml.*?\?>|<!--.*?-->|<!DOCTYPE.*?>", re.DOTALL)
_ID_RE = re.compile(r'\bid="([^"]+)"')
_URL_REF_RE = re.compile(r"url\(#([^)]+)\)")
_HREF_REF_RE = re.compile(r'(\b(?:xlink:)?href=")#([^"]+)"')


@dataclass(frozen=True)
class Sprite:
    """Inner markup of one vector emoji plus its coordinate system."""

    glyph: str
    inner_markup: str
    view_box: str = DEFAULT_VIEW_BOX


@dataclass(frozen=True)
class TextFallback:
    """No sprite exists; draw the glyph as text."""

    glyph: str


SpriteResult = Sprite | TextFallback


class SpriteLookup(Protocol):
    """Read-only lookup used by the glyph renderer."""

    def has_sprite(self, glyph: str) -> bool: ...
    def lookup(self, glyph: str) -> SpriteResult: ...
    def sprite_markup(
        self, glyph: str, x: float, y: float, size: float, *, monochrome: bool = False
    ) -> str: ...


def normalize_glyph(glyph: str) -> str:
    """Drop emoji presentation selectors so ``❤️`` and ``❤`` share a sprite."""
    return glyph.replace(VARIATION_SELECTOR, "")


def sprite_filename(glyph: str) -> str:
    """Return the Noto-style file name for a glyph, e.g. ``emoji_u1f384.svg``."""
    codepoints = "_".join(f"{ord(char):04x}" for char in normalize_glyph(glyph))
    return f"{SPRITE_FILE_PREFIX}{codepoints}.svg"


def glyph_from_filename(name: str) -> str | None:
    stem = name.removesuffix(".svg")
    if not stem.startswith(SPRITE_FILE_PREFIX):
        return None
    try:
        return "".join(
            chr(int(part, 16)) for part in stem[len(SPRITE_FILE_PREFIX) :].split("_") if part
        )
    except ValueError:
        return None


def parse_sprite(glyph: str, source: str) -> Sprite:
    """Extract the inner content and viewBox of an SVG document."""
    source = _PROLOG_RE.sub("", source)
    match = _ROOT_RE.search(source)
    if match is None:
        msg = f"sprite for '{glyph}' is not an SVG document."
        raise ValueError(msg)
    attributes, inner = match.groups()
    view_box = _VIEW_BOX_RE.search(attributes)
    return Sprite(
        glyph=normalize_glyph(glyph),
        inner_markup=inner.strip(),
        view_box=view_box.group(1) if view_box else DEFAULT_VIEW_BOX,
    )


def prefix_ids(markup: str, prefix: str) -> str:
    """Prefix every id and every local reference to it.

    Sprites placed more than once in a document would otherwise share ids.
    """
    ids = set(_ID_RE.findall(markup))
    if not ids:
        return markup

    def _url(match: re.Match[str]) -> str:
        target = match.group(1)
        return f"url(#{prefix}{target})" if target in ids else match.group(0)

    def _href(match: re.Match[str]) -> str:
        target = match.group(2)
        return f'{match.group(1)}#{prefix}{target}"' if target in ids else match.group(0)

    markup = _ID_RE.sub(lambda match: f'id="{prefix}{match.group(1)}"', markup)
    markup = _URL_REF_RE.sub(_url, markup)
    return _HREF_REF_RE.sub(_href, markup)


def render_sprite(
    sprite: Sprite,
    x: float,
    y: float,
    size: float,
    *,
    monochrome: bool = False,
    placement: int | None = None,
) -> str:
    """Return a nested ``<svg>`` drawing the sprite in a ``size`` square at (x, y).

    Ids are prefixed with the position and glyph, plus ``placement`` when given.
    """
    codepoints = "_".join(f"{ord(char):x}" for char in sprite.glyph)
    prefix = f"e{round(x)}_{round(y)}_{codepoints}_"
    if placement is not None:
        prefix = f"p{placement}_{prefix}"
    inner = prefix_ids(sprite.inner_markup, prefix)
    if monochrome:
        filter_id = f"{prefix}mono"
        inner = (
            f'<defs><filter id="{filter_id}"><feColorMatrix type="saturate" values="0"/>'
            f'</filter></defs><g filter="url(#{filter_id})">{inner}</g>'
        )
    return (
        f'<svg x="{x:.2f}" y="{y:.2f}" width="{size:.2f}" height="{size:.2f}" '
        f'viewBox="{sprite.view_box}" overflow="visible">{inner}</svg>'
    )


class SpriteCache:
    """Immutable glyph to sprite table, safe to share between threads."""

    def __init__(self, sprites: Mapping[str, Sprite] | None = None) -> None:
        self._sprites = MappingProxyType(
            {normalize_glyph(glyph): sprite for glyph, sprite in (sprites or {}).items()}
        )

    @classmethod
    def from_sources(cls, sources: Mapping[str, str]) -> SpriteCache:
        """Build from ``{file name: svg text}`` using Noto-style file names."""
        sprites: dict[str, Sprite] = {}
        for name, text in sources.items():
            glyph = glyph_from_filename(name)
            if glyph is None:
                logger.debug("skipping non-sprite file '%s'", name)
                continue
            try:
                sprites[glyph] = parse_sprite(glyph, text)
            except ValueError as exc:
                logger.warning("skipping sprite '%s': %s", name, exc)
        return cls(sprites)

    @classmethod
    def from_directory(cls, path: str | Path) -> SpriteCache:
        directory = Path(path)
        if not directory.is_dir():
            msg = f"sprite directory '{directory}' does not exist."
            raise ValueError(msg)
        sources = {
            entry.name: entry.read_text(encoding="utf-8")
            for entry in sorted(directory.glob(f"{SPRITE_FILE_PREFIX}*.svg"))
        }
        cache = cls.from_sources(sources)
        logger.info("loaded %d sprites from %s", len(cache), directory)
        return cache

    def merged(self, other: SpriteCache) -> SpriteCache:
        """Return a new cache where ``other`` wins on shared glyphs."""
        return SpriteCache({**self._sprites, **other._sprites})

    def __len__(self) -> int:
        return len(self._sprites)

    def has_sprite(self, glyph: str) -> bool:
        return normalize_glyph(glyph) in self._sprites

    def lookup(self, glyph: str) -> SpriteResult:
        sprite = self._sprites.get(normalize_glyph(glyph))
        if sprite is None:
            return TextFallback(glyph)
        return sprite

    def sprite_markup(
        self, glyph: str, x: float, y: float, size: float, *, monochrome: bool = False
    ) -> str:
        """Return placed sprite markup; raises KeyError when no sprite exists."""
        sprite = self._sprites[normalize_glyph(glyph)]
        return render_sprite(sprite, x, y, size, monochrome=monochrome)


class DocumentSprites:
    """Sprite lookup for a single document.

    Every placement is numbered so two identical glyphs drawn at the same spot
    still get distinct ids.
    """

    def __init__(self, sprites: SpriteLookup) -> None:
        self._sprites = sprites
        self._placements = itertools.count(1)

    def has_sprite(self, glyph: str) -> bool:
        return self._sprites.has_sprite(glyph)

    def lookup(self, glyph: str) -> SpriteResult:
        return self._sprites.lookup(glyph)

    def sprite_markup(
        self, glyph: str, x: float, y: float, size: float, *, monochrome: bool = False
    ) -> str:
        """Return placed sprite markup; raises KeyError when no sprite exists."""
        sprite = self._sprites.lookup(glyph)
        if not isinstance(sprite, Sprite):
            raise KeyError(glyph)
        return render_sprite(
            sprite, x, y, size, monochrome=monochrome, placement=next(self._placements)
        )


@lru_cache(maxsize=None)
def bundled_sprite_cache() -> SpriteCache:
    """Load the sprites shipped with the package, once per process."""
    package_dir = resources.files("calrender") / "assets"
    sources = {
        entry.name: entry.read_text(encoding="utf-8")
        for entry in package_dir.iterdir()
        if entry.name.startswith(SPRITE_FILE_PREFIX) and entry.name.endswith(".svg")
    }
    return SpriteCache.from_sources(sources)


def load_sprite_cache(extra_directory: str | Path | None = None) -> SpriteCache:
    """Bundled sprites, optionally extended by a directory of Noto-style SVG files."""
    cache = bundled_sprite_cache()
    if extra_directory is None:
        return cache
    return cache.merged(SpriteCache.from_directory(extra_directory))
