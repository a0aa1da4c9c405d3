import pytest

from disco.solid import U32_MAX, AtomicUnit, SolidLayerDepth


@pytest.mark.parametrize("text", ["0", "1", "2"])
def test_parse_small_depths(text):
    depth = SolidLayerDepth.parse(text)
    assert depth.min_depth() == int(text)
    assert str(depth) == text


@pytest.mark.parametrize("text", ["inf", "INF", "infinite", "Infinite"])
def test_parse_infinite(text):
    depth = SolidLayerDepth.parse(text)
    assert depth.is_infinite
    assert depth.min_depth() == U32_MAX
    assert str(depth) == "inf"


def test_parse_larger_number():
    depth = SolidLayerDepth.parse("7")
    assert depth.levels == 7
    assert depth.min_depth() == 7


@pytest.mark.parametrize("text", ["0", "1", "2", "5", "inf"])
def test_display_round_trip(text):
    depth = SolidLayerDepth.parse(text)
    assert SolidLayerDepth.parse(str(depth)) == depth


@pytest.mark.parametrize("text", ["abc", "-3", "", "1.5", "99999999999"])
def test_parse_invalid(text):
    with pytest.raises(ValueError, match="Invalid SolidLayer value"):
        SolidLayerDepth.parse(text)


def test_parse_padded_small_number_rejected():
    with pytest.raises(ValueError, match="instead of 01"):
        SolidLayerDepth.parse("01")


def test_default_is_zero():
    assert SolidLayerDepth() == SolidLayerDepth.parse("0")


def test_can_split_at():
    zero = SolidLayerDepth.parse("0")
    two = SolidLayerDepth.parse("2")
    inf = SolidLayerDepth.parse("inf")
    assert zero.can_split_at(0)
    assert not two.can_split_at(1)
    assert two.can_split_at(2)
    assert not inf.can_split_at(1000)


def test_atomic_unit_defaults():
    unit = AtomicUnit("/src/photos", "photos")
    assert unit.relative_path == "photos"
    assert unit.size == 0
    assert unit.file_count == 0
    assert unit.is_solid_marked is False


def test_atomic_unit_explicit_relative_path():
    unit = AtomicUnit("/src/a/b/c.txt", "c.txt", relative_path="a/b/c.txt", size=3, file_count=1)
    assert unit.relative_path == "a/b/c.txt"
    assert unit.name == "c.txt"