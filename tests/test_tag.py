import dataclasses

import pytest

from pysnbt import (
    ByteArrayTag,
    ByteTag,
    CompoundTag,
    DoubleTag,
    FloatTag,
    IntArrayTag,
    IntTag,
    ListTag,
    LongArrayTag,
    LongTag,
    ShortTag,
    StringTag,
    TagType,
)
from pysnbt._tag import narrow_to_float32


@pytest.mark.parametrize(
    "tag_class, lower, upper",
    [
        (ByteTag, -128, 127),
        (ShortTag, -32768, 32767),
        (IntTag, -2 ** 31, 2 ** 31 - 1),
        (LongTag, -2 ** 63, 2 ** 63 - 1),
    ],
)
def test_integer_width_limits(tag_class, lower, upper):
    assert tag_class(lower).value == lower
    assert tag_class(upper).value == upper
    with pytest.raises(ValueError):
        tag_class(lower - 1)
    with pytest.raises(ValueError):
        tag_class(upper + 1)


def test_integer_tags_reject_other_types():
    with pytest.raises(TypeError):
        IntTag(True)
    with pytest.raises(TypeError):
        IntTag(1.0)
    with pytest.raises(TypeError):
        IntTag("1")


def test_integer_tags_of_different_width_are_not_equal():
    assert ByteTag(1) != ShortTag(1)
    assert IntTag(1) != LongTag(1)
    assert int(ShortTag(7)) == 7


def test_float_tag_is_narrowed_to_single_precision():
    assert FloatTag(0.1).value != 0.1
    assert FloatTag(0.1) == FloatTag(0.10000000149011612)
    assert FloatTag(1.5).value == 1.5
    assert DoubleTag(0.1).value == 0.1
    assert float(DoubleTag(2)) == 2.0


@pytest.mark.parametrize("x", [float("inf"), float("-inf"), float("nan")])
def test_floating_tags_reject_non_finite(x):
    with pytest.raises(ValueError):
        FloatTag(x)
    with pytest.raises(ValueError):
        DoubleTag(x)


def test_float_tag_rejects_values_beyond_single_precision():
    DoubleTag(1e39)
    with pytest.raises(ValueError):
        FloatTag(1e39)


def test_floating_tags_reject_other_types():
    with pytest.raises(TypeError):
        DoubleTag("1.0")
    with pytest.raises(TypeError):
        FloatTag(False)


def test_string_tag():
    assert str(StringTag("abc")) == "abc"
    with pytest.raises(TypeError):
        StringTag(1)


def test_arrays_store_tuples_and_check_elements():
    array = IntArrayTag([1, 2, 3])
    assert array == IntArrayTag((1, 2, 3))
    assert array.values == (1, 2, 3)
    assert len(array) == 3
    assert list(array) == [1, 2, 3]
    assert array[-1] == 3
    with pytest.raises(ValueError):
        ByteArrayTag((128,))
    with pytest.raises(TypeError):
        LongArrayTag((1.0,))


def test_arrays_of_different_types_are_not_equal():
    assert ByteArrayTag((1,)) != IntArrayTag((1,))
    assert IntArrayTag((1,)) != LongArrayTag((1,))


def test_list_tag():
    list_tag = ListTag([IntTag(1), StringTag("a")])
    assert list_tag.elements == (IntTag(1), StringTag("a"))
    assert list_tag.element_type is TagType.INT
    assert len(list_tag) == 2
    assert list_tag[1] == StringTag("a")
    assert ListTag().element_type is None
    with pytest.raises(TypeError):
        ListTag([1])


def test_compound_tag_is_a_read_only_mapping():
    source = {"b": IntTag(1), "a": StringTag("x")}
    compound = CompoundTag(source)
    source["c"] = IntTag(2)

    assert list(compound) == ["b", "a"]
    assert len(compound) == 2
    assert compound["a"] == StringTag("x")
    assert "c" not in compound
    assert compound.get("c") is None
    assert dict(compound.items()) == {"b": IntTag(1), "a": StringTag("x")}
    with pytest.raises(TypeError):
        compound.entries["c"] = IntTag(2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        compound.entries = {}


def test_compound_tag_checks_keys_and_values():
    with pytest.raises(TypeError):
        CompoundTag({1: IntTag(1)})
    with pytest.raises(TypeError):
        CompoundTag({"a": 1})


def test_compound_from_pairs_keeps_last_duplicate():
    compound = CompoundTag.from_pairs(
        [("a", IntTag(1)), ("b", IntTag(2)), ("a", IntTag(3))]
    )
    assert list(compound) == ["a", "b"]
    assert compound["a"] == IntTag(3)


def test_compound_equality_ignores_insertion_order():
    assert CompoundTag({"a": IntTag(1), "b": IntTag(2)}) == CompoundTag(
        {"b": IntTag(2), "a": IntTag(1)}
    )


def test_tag_type_ids():
    assert [t.value for t in TagType] == list(range(1, 13))
    assert CompoundTag.tag_type is TagType.COMPOUND
    assert LongArrayTag.tag_type is TagType.LONG_ARRAY
    assert str(TagType.BYTE_ARRAY) == "byte_array"


def test_narrowing_overflow_raises():
    assert narrow_to_float32(3.4028234663852886e38) == 3.4028234663852886e38
    with pytest.raises(OverflowError):
        narrow_to_float32(1e39)
    with pytest.raises(OverflowError):
        narrow_to_float32(-3.5e38)


@pytest.mark.parametrize("x", [1e39, -1e39, 3.5e38, 1.7976931348623157e308])
def test_float_tag_never_holds_infinity(x):
    with pytest.raises(ValueError):
        FloatTag(x)


def test_compound_tags_are_hashable():
    first = CompoundTag({"a": IntTag(1), "b": StringTag("x")})
    second = CompoundTag({"b": StringTag("x"), "a": IntTag(1)})
    assert hash(CompoundTag()) == hash(CompoundTag())
    assert hash(first) == hash(second)
    assert len({first, second, CompoundTag()}) == 2


def test_containers_holding_compounds_are_hashable():
    nested = ListTag((CompoundTag({"a": ListTag((CompoundTag(),))}),))
    assert hash(nested) == hash(
        ListTag((CompoundTag({"a": ListTag((CompoundTag(),))}),))
    )
