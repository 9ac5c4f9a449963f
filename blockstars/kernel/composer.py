import json
import logging
import math
import time

from ..config import DEFAULT_SIZE, STAR_LAYOUT, ZOOM_FACTOR, StyleOptions
from .attributes import DerivedAttributes, shuffle
from .blockchain import BlockData
from .errors import SceneNotReadyError
from .shuffle_bag import RandomStream, derive_seed
from .star_curves import Star

log = logging.getLogger(__name__)


def camera_zoom(width: float, height: float) -> float:
    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        raise ValueError(f"viewport must be positive, got {width}x{height}")
    return min(width, height) / DEFAULT_SIZE * ZOOM_FACTOR


def metadata_attributes(attrs: DerivedAttributes):
    """OpenSea-style attribute list for one derivation pass."""
    return {
        "attributes": [
            {"trait_type": "Color", "value": attrs.hex_color},
            {"display_type": "number", "trait_type": "Scale", "value": attrs.scale},
            {"display_type": "number", "trait_type": "Trajectories",
             "value": len(attrs.trajectories)},
            {"trait_type": "Seed", "value": attrs.seed_hex},
        ],
    }


class SceneComposer:
    """
    Holds the state the host drives: current block, derived attributes,
    viewport zoom, style options and the star instances.

    Stars are cached by an explicit key. With ``deterministic_stars`` the key
    carries the block seed and each star draws from its own stream seeded by
    that seed and the star's slot name; otherwise each slot gets one
    entropy-seeded stream for the composer's lifetime.
    """
    def __init__(self, options: StyleOptions = None, deterministic_stars: bool = True,
                 layout=STAR_LAYOUT):
        self.options = options or StyleOptions()
        self.deterministic_stars = deterministic_stars
        self.layout = tuple(layout)
        self.block = None
        self.attributes = None
        self.zoom = camera_zoom(DEFAULT_SIZE, DEFAULT_SIZE)
        self._stars = {}

    # ---------- host lifecycle ----------
    def on_block_change(self, block: BlockData) -> DerivedAttributes:
        attrs = shuffle(block)
        self.block = block
        self.attributes = attrs
        if self.deterministic_stars:
            self._stars.clear()
        return attrs

    def on_viewport_resize(self, width: float, height: float) -> float:
        log.debug("updating camera for %sx%s", width, height)
        self.zoom = camera_zoom(width, height)
        return self.zoom

    def set_options(self, data) -> StyleOptions:
        self.options = self.options.merged(data)
        return self.options

    # ---------- metadata ----------
    def _require_attributes(self) -> DerivedAttributes:
        if self.attributes is None:
            raise SceneNotReadyError("no block has been derived yet")
        return self.attributes

    def metadata_callback(self):
        """Callable the host registers once; each call reads the latest pass."""
        return lambda: metadata_attributes(self._require_attributes())

    def get_metadata(self):
        return self.metadata_callback()()

    # ---------- stars ----------
    def _star_key(self, name: str):
        if self.deterministic_stars:
            return (name, self._require_attributes().seed)
        return (name, "session")

    def _star_stream(self, name: str) -> RandomStream:
        if self.deterministic_stars:
            return RandomStream(derive_seed(self.attributes.seed, name))
        return RandomStream.from_entropy()

    def star(self, name: str) -> Star:
        for slot, color, position, rotation, scale in self.layout:
            if slot == name:
                break
        else:
            raise KeyError(name)
        key = self._star_key(name)
        if key not in self._stars:
            self._stars[key] = Star(self._star_stream(name), name=name, color=color,
                                    position=position, rotation=rotation, scale=scale)
        return self._stars[key]

    def stars(self):
        return [self.star(slot[0]) for slot in self.layout]

    def discard_star(self, name: str) -> bool:
        dropped = [k for k in self._stars if k[0] == name]
        for k in dropped:
            del self._stars[k]
        return bool(dropped)

    def reset(self):
        self._stars.clear()
        self.block = None
        self.attributes = None

    # ---------- scene ----------
    def snapshot(self, include_meshes: bool = False):
        attrs = self._require_attributes()
        return {
            "meta": {"t": time.time(), "block": self.block.number,
                     "deterministic_stars": self.deterministic_stars},
            "background": self.options.background,
            "options": self.options.to_dict(),
            "camera": {"zoom": self.zoom},
            "attributes": attrs.to_dict(),
            "stars": [s.to_dict(include_meshes) for s in self.stars()],
        }

    def export_state(self, path: str) -> str:
        state = self.snapshot()
        with open(path, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=2)
        return path
