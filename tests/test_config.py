import pytest
from blockstars.config import DEFAULT_OPTIONS, StyleOptions, parse_color

def test_defaults():
    assert StyleOptions().to_dict() == DEFAULT_OPTIONS

def test_merge():
    opts = StyleOptions.from_mapping({"mod2": 1, "color1": "#ABC"})
    assert opts.mod2 == 1.0
    assert opts.color1 == "#abc"
    assert opts.mod1 == DEFAULT_OPTIONS["mod1"]

def test_ranges_are_not_enforced():
    assert StyleOptions.from_mapping({"mod3": 4.5}).mod3 == 4.5

def test_bad_values():
    with pytest.raises(ValueError):
        StyleOptions.from_mapping({"mod1": "lots"})
    with pytest.raises(ValueError):
        StyleOptions.from_mapping({"mod1": "inf"})
    with pytest.raises(ValueError):
        StyleOptions.from_mapping({"background": "black"})
    with pytest.raises(ValueError):
        StyleOptions.from_mapping({"mod4": 0.1})

def test_parse_color():
    assert parse_color(" #FFF000 ") == "#fff000"
    with pytest.raises(ValueError):
        parse_color(123)
