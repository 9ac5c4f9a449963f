"""
AttributeShuffler: color, scale and per-transaction trajectories from a block.

Draw order is fixed: 3 color draws (R, G, B), 1 scale draw, then 3 draws
(x, y, z) per transaction. Any reordering changes every value after it.
"""

import logging
import math
from dataclasses import dataclass
from typing import Tuple

from .blockchain import BlockData
from .shuffle_bag import RandomStream

log = logging.getLogger(__name__)

TRAJECTORY_MUL = 1.5
SCALE_DIVISOR = 100

Vector3 = Tuple[float, float, float]


@dataclass(frozen=True)
class DerivedAttributes:
    seed: int
    color: Tuple[int, int, int]
    scale: float
    trajectories: Tuple[Vector3, ...]

    @property
    def hex_color(self) -> str:
        return "#{:02x}{:02x}{:02x}".format(*self.color)

    @property
    def seed_hex(self) -> str:
        return f"{self.seed:016x}"

    def to_dict(self):
        return {
            "seed": self.seed_hex,
            "color": self.hex_color,
            "rgb": list(self.color),
            "scale": self.scale,
            "trajectories": [list(t) for t in self.trajectories],
        }


def trajectory_flips(i: int) -> Vector3:
    """Sign applied to (x, y, z) of transaction ``i``."""
    return (
        -1.0 if i % 2 else 1.0,
        -1.0 if i % 3 else 1.0,
        -1.0 if i % 4 else 1.0,
    )


def _ran255(stream: RandomStream) -> int:
    return math.floor(255 * stream.random())


def shuffle(block: BlockData) -> DerivedAttributes:
    log.debug("shuffling block %s (%d txs)", block.number, len(block.transactions))
    bag = RandomStream.from_hash(block.hash)
    seed = bag.seed

    color = (_ran255(bag), _ran255(bag), _ran255(bag))
    scale = bag.random() / SCALE_DIVISOR

    trajectories = []
    for i, _tx in enumerate(block.transactions):
        fx, fy, fz = trajectory_flips(i)
        trajectories.append((
            bag.random() * TRAJECTORY_MUL * fx,
            bag.random() * TRAJECTORY_MUL * fy,
            bag.random() * TRAJECTORY_MUL * fz,
        ))

    return DerivedAttributes(seed=seed, color=color, scale=scale,
                             trajectories=tuple(trajectories))
