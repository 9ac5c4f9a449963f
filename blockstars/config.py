import math
import os
import re
from dataclasses import asdict, dataclass, replace
from typing import Mapping

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
STATE_PATH = os.environ.get("BLOCKSTARS_STATE_PATH", os.path.join(ROOT, "scene_state.json"))

# stars are seeded from the block unless the session mode is asked for
SESSION_STARS = os.environ.get("BLOCKSTARS_SESSION_STARS", "0").lower() in ("1", "true", "yes")

DEFAULT_PORT = 5000
DEFAULT_SIZE = 1000
ZOOM_FACTOR = 200

DEFAULT_OPTIONS = {
    "mod1": 0.4,
    "mod2": 0.1,
    "mod3": 0.4,
    "color1": "#fff000",
    "background": "#000000",
}

STYLE_METADATA = {
    "name": "Block Stars",
    "description": "Skip-polygon star networks seeded by the block hash.",
    "image": "",
    "creator_name": "",
    "options": dict(DEFAULT_OPTIONS),
}

# (name, color, position, rotation, scale)
STAR_LAYOUT = (
    ("right", "cyan", (2.0, 0.0, -2.0), (0.0, 0.0, math.pi / 3), 0.002),
    ("left", "orange", (-2.0, 0.0, -2.0), (0.0, 0.0, math.pi / 3), 0.002),
    ("back", "white", (0.0, 2.0, -10.0), (0.0, 0.0, math.pi / 3), 0.002),
)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def parse_color(value) -> str:
    if not isinstance(value, str) or not _HEX_COLOR.match(value.strip()):
        raise ValueError(f"not a hex color: {value!r}")
    return value.strip().lower()


@dataclass(frozen=True)
class StyleOptions:
    """Host-tunable style options. Modifier ranges are a convention only."""
    mod1: float = DEFAULT_OPTIONS["mod1"]
    mod2: float = DEFAULT_OPTIONS["mod2"]
    mod3: float = DEFAULT_OPTIONS["mod3"]
    color1: str = DEFAULT_OPTIONS["color1"]
    background: str = DEFAULT_OPTIONS["background"]

    def merged(self, data: Mapping) -> "StyleOptions":
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValueError("options must be a JSON object")
        changes = {}
        for k, v in data.items():
            if k in ("mod1", "mod2", "mod3"):
                try:
                    f = float(v)
                except (TypeError, ValueError):
                    raise ValueError(f"{k} must be a number, got {v!r}") from None
                if not math.isfinite(f):
                    raise ValueError(f"{k} must be finite")
                changes[k] = f
            elif k in ("color1", "background"):
                changes[k] = parse_color(v)
            else:
                raise ValueError(f"unknown option {k!r}")
        return replace(self, **changes)

    @staticmethod
    def from_mapping(data: Mapping) -> "StyleOptions":
        return StyleOptions().merged(data)

    def to_dict(self):
        return asdict(self)
