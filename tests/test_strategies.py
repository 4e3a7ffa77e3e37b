import random

import pytest

from shiftfuzz.errors import ConversionError
from shiftfuzz.strategies import (
    BoundaryValueStrategy,
    GenerativeStrategy,
    MutationStrategy,
    PowerOfTwoStrategy,
    RandomStrategy,
)
from shiftfuzz.values import (
    Address,
    MoveValue,
    ObjectOwnership,
    OwnershipKind,
    ValueKind,
)

BITS = {"u8": 8, "u16": 16, "u32": 32, "u64": 64, "u128": 128, "u256": 256}
INTEGER_TYPES = list(BITS)


def near_power_of_two(v, bits):
    return v == 0 or any(abs(v - (1 << k)) <= 1 for k in range(bits + 1))


def uid_value():
    return MoveValue(ValueKind.UID, object_id=Address.from_hex("0x5"))


# ---- abstract bases ----

def test_abstract_bases_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MutationStrategy()
    with pytest.raises(TypeError):
        GenerativeStrategy()


# ---- boundary ----

@pytest.mark.parametrize("type_name", INTEGER_TYPES)
def test_boundary_generate_covers_exactly_the_boundaries(type_name):
    strategy = BoundaryValueStrategy(random.Random(1))
    maximum = (1 << BITS[type_name]) - 1
    seen = {strategy.generate(type_name).value for _ in range(200)}
    assert seen == {0, 1, maximum - 1, maximum}


def test_boundary_generate_keeps_type_name():
    strategy = BoundaryValueStrategy(random.Random(2))
    for name in INTEGER_TYPES + ["bool", "address"]:
        assert strategy.generate(name).type_name() == name


def test_boundary_address_includes_zero():
    strategy = BoundaryValueStrategy(random.Random(3))
    addresses = [strategy.generate("address").value for _ in range(50)]
    assert Address.zero() in addresses
    assert any(a != Address.zero() for a in addresses)


def test_boundary_bool_produces_both():
    strategy = BoundaryValueStrategy(random.Random(4))
    assert {strategy.generate("bool").value for _ in range(50)} == {True, False}


@pytest.mark.parametrize("name", ["vector", "uid", "signer"])
def test_boundary_generate_rejects_unsupported(name):
    with pytest.raises(ConversionError):
        BoundaryValueStrategy(random.Random(0)).generate(name)


def test_boundary_descriptions_and_types():
    strategy = BoundaryValueStrategy(random.Random(0))
    assert strategy.description() == (
        "Boundary value strategy: mutates to edge case values at type boundaries"
    )
    assert strategy.generation_description() == (
        "Boundary value strategy: generates edge case values at type boundaries"
    )
    assert list(strategy.supported_types()) == INTEGER_TYPES + ["bool", "address"]


def test_boundary_mutate_vector_changes_at_most_one_element():
    strategy = BoundaryValueStrategy(random.Random(5))
    original = MoveValue(ValueKind.VECTOR, tuple(MoveValue(ValueKind.U64, 12345) for _ in range(5)))
    for _ in range(20):
        mutated = strategy.mutate(original)
        assert mutated.kind is ValueKind.VECTOR
        assert len(mutated.value) == 5
        diffs = sum(a != b for a, b in zip(original.value, mutated.value))
        assert diffs <= 1
        assert all(item.kind is ValueKind.U64 for item in mutated.value)


def test_boundary_mutate_leaves_unsupported_unchanged():
    strategy = BoundaryValueStrategy(random.Random(6))
    uid = uid_value()
    assert strategy.mutate(uid) == uid
    empty = MoveValue(ValueKind.VECTOR, ())
    assert strategy.mutate(empty) == empty


def test_boundary_can_apply():
    strategy = BoundaryValueStrategy(random.Random(0))
    assert strategy.can_apply(MoveValue(ValueKind.U8, 3))
    assert strategy.can_apply(MoveValue(ValueKind.BOOL, False))
    assert strategy.can_apply(MoveValue(ValueKind.ADDRESS, Address.zero()))
    assert strategy.can_apply(MoveValue(ValueKind.VECTOR, (MoveValue(ValueKind.BOOL, True),)))
    assert not strategy.can_apply(MoveValue(ValueKind.VECTOR, ()))
    assert not strategy.can_apply(uid_value())


# ---- power of two ----

@pytest.mark.parametrize("type_name", INTEGER_TYPES)
def test_power_of_two_values_are_near_powers(type_name):
    strategy = PowerOfTwoStrategy(random.Random(7))
    bits = BITS[type_name]
    for _ in range(300):
        generated = strategy.generate(type_name)
        assert generated.type_name() == type_name
        assert 0 <= generated.value < (1 << bits)
        assert near_power_of_two(generated.value, bits)


def test_power_of_two_common_values_u8_come_from_source_list():
    strategy = PowerOfTwoStrategy(random.Random(8))
    allowed = {0, 1, 2, 3, 4, 7, 8, 15, 16, 31, 32, 63, 64, 127, 128, 255}
    seen = {strategy.generate_common_algorithmic_values("u8").value for _ in range(500)}
    assert seen == allowed


def test_power_of_two_common_values_u32_stay_small():
    strategy = PowerOfTwoStrategy(random.Random(9))
    values = [strategy.generate_common_algorithmic_values("u32").value for _ in range(300)]
    assert max(values) <= (1 << 19) + 1
    assert all(near_power_of_two(v, 20) for v in values)


def test_power_of_two_common_values_u128_fall_back_to_powers():
    strategy = PowerOfTwoStrategy(random.Random(10))
    for _ in range(100):
        v = strategy.generate_common_algorithmic_values("u128")
        assert v.kind is ValueKind.U128
        assert near_power_of_two(v.value, 128)


@pytest.mark.parametrize("name", ["bool", "address", "vector"])
def test_power_of_two_rejects_non_integers(name):
    strategy = PowerOfTwoStrategy(random.Random(0))
    with pytest.raises(ConversionError):
        for _ in range(20):
            strategy.generate(name)


def test_power_of_two_mutate_vector_keeps_non_integers():
    strategy = PowerOfTwoStrategy(random.Random(11))
    only_bools = MoveValue(ValueKind.VECTOR, (MoveValue(ValueKind.BOOL, True),) * 3)
    assert strategy.mutate(only_bools) == only_bools
    mixed = MoveValue(
        ValueKind.VECTOR,
        (MoveValue(ValueKind.BOOL, True), MoveValue(ValueKind.U16, 1000)),
    )
    for _ in range(20):
        result = strategy.mutate(mixed)
        assert result.value[0] == MoveValue(ValueKind.BOOL, True)
        assert result.value[1].kind is ValueKind.U16
        assert near_power_of_two(result.value[1].value, 16) or result.value[1].value == 1000


def test_power_of_two_can_apply():
    strategy = PowerOfTwoStrategy(random.Random(0))
    assert strategy.can_apply(MoveValue(ValueKind.U256, 5))
    assert strategy.can_apply(
        MoveValue(ValueKind.VECTOR, (MoveValue(ValueKind.BOOL, True), MoveValue(ValueKind.U8, 1)))
    )
    assert not strategy.can_apply(MoveValue(ValueKind.BOOL, True))
    assert not strategy.can_apply(MoveValue(ValueKind.VECTOR, ()))
    struct = MoveValue(
        ValueKind.STRUCT_OBJECT,
        object_id=Address.from_hex("0x7"),
        ownership=ObjectOwnership(OwnershipKind.OWNED),
    )
    assert not strategy.can_apply(struct)
    assert strategy.mutate(struct) == struct


def test_power_of_two_descriptions_and_types():
    strategy = PowerOfTwoStrategy(random.Random(0))
    assert list(strategy.supported_types()) == INTEGER_TYPES
    assert strategy.description() == "Power-of-two strategy: mutates to 2^n, 2^n-1, 2^n+1 values"
    assert strategy.generation_description() == (
        "Power-of-two strategy: generates 2^n, 2^n-1, 2^n+1 values and algorithmic constants"
    )


# ---- random ----

@pytest.mark.parametrize("type_name", INTEGER_TYPES)
def test_random_generate_in_range(type_name):
    strategy = RandomStrategy(random.Random(12))
    values = [strategy.generate(type_name) for _ in range(100)]
    assert all(v.type_name() == type_name for v in values)
    assert all(0 <= v.value < (1 << BITS[type_name]) for v in values)
    assert len({v.value for v in values}) > 1


def test_random_generate_address_and_bool():
    strategy = RandomStrategy(random.Random(13))
    assert strategy.generate("address").kind is ValueKind.ADDRESS
    assert {strategy.generate("bool").value for _ in range(50)} == {True, False}


def test_random_generate_rejects_unsupported():
    with pytest.raises(ConversionError):
        RandomStrategy(random.Random(0)).generate("struct_object")


def test_random_is_deterministic_for_a_seed():
    first = RandomStrategy(random.Random(42))
    second = RandomStrategy(random.Random(42))
    assert [first.generate("u64") for _ in range(10)] == [second.generate("u64") for _ in range(10)]


def test_random_mutate_nested_vector_preserves_shape():
    strategy = RandomStrategy(random.Random(14))
    inner = MoveValue(ValueKind.VECTOR, (MoveValue(ValueKind.U32, 1), MoveValue(ValueKind.U32, 2)))
    outer = MoveValue(ValueKind.VECTOR, (inner,))
    mutated = strategy.mutate(outer)
    assert len(mutated.value) == 1
    assert len(mutated.value[0].value) == 2
    assert all(item.kind is ValueKind.U32 for item in mutated.value[0].value)


def test_random_mutate_unsupported_unchanged_and_can_apply():
    strategy = RandomStrategy(random.Random(15))
    uid = uid_value()
    assert strategy.mutate(uid) == uid
    assert not strategy.can_apply(uid)
    assert strategy.can_apply(MoveValue(ValueKind.ADDRESS, Address.zero()))
    assert strategy.description() == "Random strategy: applies uniformly random mutations"
    assert strategy.generation_description() == "Random strategy: generates uniformly random values"
    assert list(strategy.supported_types()) == INTEGER_TYPES + ["bool", "address"]