import math
import pytest
from blockstars.kernel.attributes import shuffle, trajectory_flips
from blockstars.kernel.blockchain import BlockData
from blockstars.kernel.errors import MalformedHashError

GOLDEN_HASH = "0x0000000000001571" + "ab" * 24   # seed 5489

def block(n_tx, h=GOLDEN_HASH):
    return BlockData(hash=h, transactions=tuple({"i": i} for i in range(n_tx)))

def test_golden_vector():
    attrs = shuffle(block(2))
    assert attrs.seed == 5489
    assert attrs.color == (207, 34, 230)
    assert attrs.hex_color == "#cf22e6"
    assert attrs.scale == 3586334585 / 2**32 / 100
    assert attrs.trajectories == (
        (545404204 / 2**32 * 1.5, 4161255391 / 2**32 * 1.5, 3922919429 / 2**32 * 1.5),
        (-(949333985 / 2**32 * 1.5), -(2715962298 / 2**32 * 1.5), -(1323567403 / 2**32 * 1.5)),
    )

def test_deterministic():
    h = "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"
    assert shuffle(block(7, h)) == shuffle(block(7, h))

def test_only_hash_prefix_matters():
    a = shuffle(block(3, "0123456789abcdef" + "0" * 48))
    b = shuffle(block(3, "0123456789abcdef" + "f" * 48))
    assert a == b

def test_tx_count_changes_only_trajectories():
    few = shuffle(block(2))
    many = shuffle(block(9))
    assert few.color == many.color
    assert few.scale == many.scale
    assert len(few.trajectories) == 2
    assert len(many.trajectories) == 9
    assert many.trajectories[:2] == few.trajectories

def test_empty_block():
    attrs = shuffle(block(0))
    assert attrs.trajectories == ()
    assert all(0 <= c <= 255 for c in attrs.color)
    assert 0.0 <= attrs.scale < 0.01

# sign of (x, y, z) for i = 0..7
SIGNS = [
    (+1, +1, +1),
    (-1, -1, -1),
    (+1, -1, -1),
    (-1, +1, -1),
    (+1, -1, +1),
    (-1, -1, -1),
    (+1, +1, -1),
    (-1, -1, -1),
]

def test_flip_truth_table():
    for i, expected in enumerate(SIGNS):
        assert trajectory_flips(i) == expected

def test_trajectory_signs_follow_table():
    attrs = shuffle(block(8))
    for traj, expected in zip(attrs.trajectories, SIGNS):
        assert tuple(math.copysign(1, v) for v in traj) == expected
        assert all(abs(v) < 1.5 for v in traj)

def test_malformed_hash():
    with pytest.raises(MalformedHashError):
        shuffle(block(1, "abc123"))

def test_to_dict():
    d = shuffle(block(1)).to_dict()
    assert d["seed"] == "0000000000001571"
    assert d["color"] == "#cf22e6"
    assert d["rgb"] == [207, 34, 230]
    assert len(d["trajectories"]) == 1
