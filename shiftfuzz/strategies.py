"""Mutation strategies that produce new argument values for fuzzing."""

from __future__ import annotations

import abc
import random
from typing import Optional, Sequence

from .errors import ConversionError
from .values import Address, MoveValue, ValueKind

_INTEGER_KINDS = {
    "u8": (ValueKind.U8, 8),
    "u16": (ValueKind.U16, 16),
    "u32": (ValueKind.U32, 32),
    "u64": (ValueKind.U64, 64),
    "u128": (ValueKind.U128, 128),
    "u256": (ValueKind.U256, 256),
}

_INTEGER_TYPE_NAMES = ("u8", "u16", "u32", "u64", "u128", "u256")
_ALL_TYPE_NAMES = _INTEGER_TYPE_NAMES + ("bool", "address")

_COMMON_U8 = (0, 1, 2, 3, 4, 7, 8, 15, 16, 31, 32, 63, 64, 127, 128, 255)
_COMMON_U16 = (
    0, 1, 255, 256, 511, 512, 1023, 1024, 2047, 2048,
    4095, 4096, 8191, 8192, 16383, 16384, 32767, 32768, 65535,
)


def _integer_kind(type_name: str) -> tuple:
    try:
        return _INTEGER_KINDS[type_name]
    except KeyError:
        raise ConversionError(f"Unsupported integer type: {type_name}") from None


def _coin(rng: random.Random) -> bool:
    return rng.random() < 0.5


def _vary_power(rng: random.Random, exponent: int, bits: int) -> int:
    """Return 2^exponent, 2^exponent - 1 or 2^exponent + 1, saturated to the type."""
    base = 1 << exponent
    choice = rng.randrange(3)
    if choice == 0:
        return base
    if choice == 1:
        return max(base - 1, 0)
    return min(base + 1, (1 << bits) - 1)


class MutationStrategy(abc.ABC):
    """A strategy that turns an existing value into a mutated one."""

    @abc.abstractmethod
    def mutate(self, value: MoveValue) -> MoveValue:
        """Return a mutated copy of ``value``; unsupported kinds come back unchanged."""

    @abc.abstractmethod
    def can_apply(self, value: MoveValue) -> bool:
        """Whether this strategy can mutate ``value``."""

    @abc.abstractmethod
    def description(self) -> str:
        """A short human-readable description of the mutation."""


class GenerativeStrategy(abc.ABC):
    """A strategy that produces fresh values of a named type."""

    @abc.abstractmethod
    def generate(self, type_name: str) -> MoveValue:
        """Produce a new value of the type called ``type_name``."""

    @abc.abstractmethod
    def supported_types(self) -> Sequence[str]:
        """Type names this strategy can generate."""

    @abc.abstractmethod
    def generation_description(self) -> str:
        """A short human-readable description of the generation."""


class _SeededStrategy:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()


class BoundaryValueStrategy(_SeededStrategy, GenerativeStrategy, MutationStrategy):
    """Values at the edges of their type: 0, 1, MAX - 1 and MAX."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        super().__init__(rng)

    def _integer_boundary(self, type_name: str) -> MoveValue:
        kind, bits = _integer_kind(type_name)
        maximum = (1 << bits) - 1
        boundaries = (0, 1, maximum - 1, maximum)
        return MoveValue(kind, boundaries[self.rng.randrange(4)])

    def _address(self) -> MoveValue:
        if _coin(self.rng):
            return MoveValue(ValueKind.ADDRESS, Address.zero())
        return MoveValue(ValueKind.ADDRESS, Address.random(self.rng))

    def generate(self, type_name: str) -> MoveValue:
        if type_name in _INTEGER_KINDS:
            return self._integer_boundary(type_name)
        if type_name == "bool":
            return MoveValue(ValueKind.BOOL, _coin(self.rng))
        if type_name == "address":
            return self._address()
        raise ConversionError(f"Unsupported type for boundary values: {type_name}")

    def supported_types(self) -> Sequence[str]:
        return _ALL_TYPE_NAMES

    def generation_description(self) -> str:
        return "Boundary value strategy: generates edge case values at type boundaries"

    def mutate(self, value: MoveValue) -> MoveValue:
        if value.is_integer():
            return self.generate(value.type_name())
        if value.kind is ValueKind.BOOL:
            return MoveValue(ValueKind.BOOL, _coin(self.rng))
        if value.kind is ValueKind.ADDRESS:
            return self._address()
        if value.kind is ValueKind.VECTOR and value.value:
            items = list(value.value)
            index = self.rng.randrange(len(items))
            items[index] = self.mutate(items[index])
            return MoveValue(ValueKind.VECTOR, tuple(items))
        return value

    def can_apply(self, value: MoveValue) -> bool:
        return (
            value.is_integer()
            or value.kind in (ValueKind.BOOL, ValueKind.ADDRESS)
            or (value.kind is ValueKind.VECTOR and bool(value.value))
        )

    def description(self) -> str:
        return "Boundary value strategy: mutates to edge case values at type boundaries"


class PowerOfTwoStrategy(_SeededStrategy, GenerativeStrategy, MutationStrategy):
    """Powers of two and their neighbours (2^n - 1, 2^n + 1), plus common constants."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        super().__init__(rng)

    def _power_of_two(self, type_name: str) -> MoveValue:
        kind, bits = _integer_kind(type_name)
        exponent = self.rng.randrange(bits)
        return MoveValue(kind, _vary_power(self.rng, exponent, bits))

    def generate_common_algorithmic_values(self, type_name: str) -> MoveValue:
        """Constants that often show up at algorithmic edge cases."""
        if type_name == "u8":
            return MoveValue(ValueKind.U8, self.rng.choice(_COMMON_U8))
        if type_name == "u16":
            return MoveValue(ValueKind.U16, self.rng.choice(_COMMON_U16))
        if type_name == "u32":
            return MoveValue(ValueKind.U32, _vary_power(self.rng, self.rng.randrange(20), 32))
        if type_name == "u64":
            return MoveValue(ValueKind.U64, _vary_power(self.rng, self.rng.randrange(32), 64))
        return self._power_of_two(type_name)

    def generate(self, type_name: str) -> MoveValue:
        if self.rng.random() < 0.7:
            return self._power_of_two(type_name)
        return self.generate_common_algorithmic_values(type_name)

    def supported_types(self) -> Sequence[str]:
        return _INTEGER_TYPE_NAMES

    def generation_description(self) -> str:
        return "Power-of-two strategy: generates 2^n, 2^n-1, 2^n+1 values and algorithmic constants"

    def mutate(self, value: MoveValue) -> MoveValue:
        if value.is_integer():
            return self.generate(value.type_name())
        if value.kind is ValueKind.VECTOR and value.value:
            items = list(value.value)
            index = self.rng.randrange(len(items))
            if items[index].is_integer():
                items[index] = self.generate(items[index].type_name())
                return MoveValue(ValueKind.VECTOR, tuple(items))
        return value

    def can_apply(self, value: MoveValue) -> bool:
        if value.is_integer():
            return True
        return value.kind is ValueKind.VECTOR and any(item.is_integer() for item in value.value)

    def description(self) -> str:
        return "Power-of-two strategy: mutates to 2^n, 2^n-1, 2^n+1 values"


class RandomStrategy(_SeededStrategy, GenerativeStrategy, MutationStrategy):
    """Uniformly random values for general coverage."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        super().__init__(rng)

    def generate(self, type_name: str) -> MoveValue:
        if type_name in _INTEGER_KINDS:
            kind, bits = _INTEGER_KINDS[type_name]
            return MoveValue(kind, self.rng.getrandbits(bits))
        if type_name == "bool":
            return MoveValue(ValueKind.BOOL, _coin(self.rng))
        if type_name == "address":
            return MoveValue(ValueKind.ADDRESS, Address.random(self.rng))
        raise ConversionError(f"Unsupported type for random generation: {type_name}")

    def supported_types(self) -> Sequence[str]:
        return _ALL_TYPE_NAMES

    def generation_description(self) -> str:
        return "Random strategy: generates uniformly random values"

    def mutate(self, value: MoveValue) -> MoveValue:
        if value.is_integer():
            return self.generate(value.type_name())
        if value.kind is ValueKind.BOOL:
            return MoveValue(ValueKind.BOOL, _coin(self.rng))
        if value.kind is ValueKind.ADDRESS:
            return MoveValue(ValueKind.ADDRESS, Address.random(self.rng))
        if value.kind is ValueKind.VECTOR and value.value:
            items = list(value.value)
            index = self.rng.randrange(len(items))
            items[index] = self.mutate(items[index])
            return MoveValue(ValueKind.VECTOR, tuple(items))
        return value

    def can_apply(self, value: MoveValue) -> bool:
        return (
            value.is_integer()
            or value.kind in (ValueKind.BOOL, ValueKind.ADDRESS)
            or (value.kind is ValueKind.VECTOR and bool(value.value))
        )

    def description(self) -> str:
        return "Random strategy: applies uniformly random mutations"