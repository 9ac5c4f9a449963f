import pytest
from blockstars.kernel.shuffle_bag import (
    RandomStream, derive_seed, normalize_hash, parse_seed, seed_key,
)
from blockstars.kernel.errors import MalformedHashError

# first outputs of the reference MT19937 seeded with 5489
MT_5489 = [3499211612, 581869302, 3890346734, 3586334585, 545404204,
           4161255391, 3922919429, 949333985, 2715962298, 1323567403]

def test_reference_sequence():
    bag = RandomStream(5489)
    assert [bag.random_int() for _ in range(10)] == MT_5489
    assert bag.draws == 10

def test_random_is_scaled_32bit_output():
    bag = RandomStream(5489)
    assert bag.random() == MT_5489[0] / 2**32
    assert 0.0 <= bag.random() < 1.0

def test_same_seed_same_stream():
    a = RandomStream(0xDEADBEEF)
    b = RandomStream(0xDEADBEEF)
    assert [a.random() for _ in range(50)] == [b.random() for _ in range(50)]

def test_different_seed_different_stream():
    a = RandomStream(1)
    b = RandomStream(2)
    assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

def test_parse_seed():
    assert parse_seed("00000000000000ff" + "ab" * 24) == 255
    assert parse_seed("0x00000000000000ff1234") == 255
    assert parse_seed("FFFFFFFFFFFFFFFF") == 2**64 - 1

def test_parse_seed_rejects_short_or_non_hex():
    with pytest.raises(MalformedHashError):
        parse_seed("0123456789abcde")
    with pytest.raises(MalformedHashError):
        parse_seed("0x0123456789abcde")
    with pytest.raises(MalformedHashError):
        parse_seed("abccostituire0123456789abcdef")
    with pytest.raises(MalformedHashError):
        parse_seed("")
    with pytest.raises(MalformedHashError):
        parse_seed(None)

def test_malformed_hash_is_value_error():
    with pytest.raises(ValueError):
        normalize_hash("xyz")

def test_seed_key_reduction():
    assert seed_key(5489) == 5489
    assert seed_key(2**32 + 7) == 7
    # above 2**53 the seed is rounded like a double first
    assert seed_key(2**64 - 1) == 0
    assert RandomStream(2**32 + 5489).random_int() == MT_5489[0]

def test_randint_bounds():
    bag = RandomStream(42)
    values = [bag.randint(5, 20) for _ in range(2000)]
    assert min(values) == 5
    assert max(values) == 20
    with pytest.raises(ValueError):
        bag.randint(3, 2)

def test_randint_uses_one_draw():
    bag = RandomStream(5489)
    assert bag.randint(5, 20) == 5 + int(16 * (MT_5489[0] / 2**32))
    assert bag.draws == 1

def test_negative_seed():
    with pytest.raises(ValueError):
        RandomStream(-1)

def test_derive_seed():
    assert derive_seed(255, "left") == derive_seed(255, "left")
    assert derive_seed(255, "left") != derive_seed(255, "right")
    assert derive_seed(255, "left") < 2**64

def test_from_entropy_streams_work():
    bag = RandomStream.from_entropy()
    assert 0 <= bag.key < 2**32
    assert 0.0 <= bag.random() < 1.0

def test_from_hash():
    bag = RandomStream.from_hash("0x0000000000001571" + "ab" * 24)
    assert bag.seed == 5489
    assert bag.random_int() == MT_5489[0]
    with pytest.raises(MalformedHashError):
        RandomStream.from_hash("0x12")
