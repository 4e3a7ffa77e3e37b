"""Move values, types and object ownership used as fuzzing inputs."""

from __future__ import annotations

import enum
import logging
import random
import re
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Sequence, Union

from .errors import ConversionError, ValueTypeError

log = logging.getLogger(__name__)

ADDRESS_LENGTH = 32
U256_MAX = (1 << 256) - 1

_HEX_ADDRESS = re.compile(r"(?:0x)?([0-9a-fA-F]{1,64})")
_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DEC_DIGITS = re.compile(r"[0-9]+")
_UNSIGNED = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class Address:
    """A 32-byte account or object identifier."""

    raw: bytes = bytes(ADDRESS_LENGTH)

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)) or len(self.raw) != ADDRESS_LENGTH:
            raise ValueTypeError(f"address must be {ADDRESS_LENGTH} bytes")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_hex(cls, text: str) -> "Address":
        """Parse a hex address, with or without a 0x prefix; short forms are left-padded."""
        match = _HEX_ADDRESS.fullmatch(text)
        if match is None:
            raise ConversionError(f"Invalid address: {text!r}")
        return cls(bytes.fromhex(match.group(1).zfill(ADDRESS_LENGTH * 2)))

    @classmethod
    def zero(cls) -> "Address":
        return cls()

    @classmethod
    def random(cls, rng: random.Random) -> "Address":
        return cls(rng.randbytes(ADDRESS_LENGTH))

    def to_bytes(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return "0x" + self.raw.hex()


class TypeKind(enum.Enum):
    """Kinds of normalized Move parameter types."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    U256 = "u256"
    BOOL = "bool"
    ADDRESS = "address"
    SIGNER = "signer"
    VECTOR = "vector"
    STRUCT = "struct"
    REFERENCE = "reference"
    MUTABLE_REFERENCE = "mutable_reference"
    TYPE_PARAMETER = "type_parameter"


_PRIMITIVE_TYPES = {
    TypeKind.U8,
    TypeKind.U16,
    TypeKind.U32,
    TypeKind.U64,
    TypeKind.U128,
    TypeKind.U256,
    TypeKind.BOOL,
    TypeKind.ADDRESS,
}
_WRAPPING_TYPES = {TypeKind.VECTOR, TypeKind.REFERENCE, TypeKind.MUTABLE_REFERENCE}


@dataclass(frozen=True)
class MoveType:
    """A normalized Move type; ``inner`` is set for vectors and references."""

    kind: TypeKind
    inner: Optional["MoveType"] = None
    index: Optional[int] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind in _WRAPPING_TYPES and self.inner is None:
            raise ValueTypeError(f"{self.kind.value} type needs an inner type")
        if self.kind is TypeKind.TYPE_PARAMETER and (self.index is None or self.index < 0):
            raise ValueTypeError("type parameter needs a non-negative index")

    @classmethod
    def vector(cls, inner: "MoveType") -> "MoveType":
        return cls(TypeKind.VECTOR, inner=inner)

    @classmethod
    def reference(cls, inner: "MoveType") -> "MoveType":
        return cls(TypeKind.REFERENCE, inner=inner)

    @classmethod
    def mutable_reference(cls, inner: "MoveType") -> "MoveType":
        return cls(TypeKind.MUTABLE_REFERENCE, inner=inner)

    @classmethod
    def type_parameter(cls, index: int) -> "MoveType":
        return cls(TypeKind.TYPE_PARAMETER, index=index)


class OwnerKind(enum.Enum):
    """How an on-chain object is owned."""

    ADDRESS_OWNER = "address_owner"
    OBJECT_OWNER = "object_owner"
    SHARED = "shared"
    IMMUTABLE = "immutable"
    CONSENSUS_ADDRESS_OWNER = "consensus_address_owner"


@dataclass(frozen=True)
class Owner:
    kind: OwnerKind
    address: Optional[Address] = None
    initial_shared_version: Optional[int] = None


class OwnershipKind(enum.Enum):
    """How an object is passed into a transaction."""

    OWNED = "owned"
    IMMUTABLE_SHARED = "immutable_shared"
    MUTABLE_SHARED = "mutable_shared"


@dataclass(frozen=True)
class ObjectOwnership:
    kind: OwnershipKind
    initial_shared_version: Optional[int] = None


class ValueKind(enum.Enum):
    """Kinds of concrete argument values; the value is the type name."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    U256 = "u256"
    BOOL = "bool"
    ADDRESS = "address"
    VECTOR = "vector"
    UID = "uid"
    STRUCT_OBJECT = "struct_object"


_INTEGER_BITS = {
    ValueKind.U8: 8,
    ValueKind.U16: 16,
    ValueKind.U32: 32,
    ValueKind.U64: 64,
    ValueKind.U128: 128,
    ValueKind.U256: 256,
}

_TYPE_TO_VALUE = {
    TypeKind.U8: ValueKind.U8,
    TypeKind.U16: ValueKind.U16,
    TypeKind.U32: ValueKind.U32,
    TypeKind.U64: ValueKind.U64,
    TypeKind.U128: ValueKind.U128,
}


@dataclass(frozen=True)
class MoveValue:
    """A concrete argument value for a Move function call."""

    kind: ValueKind
    value: Any = None
    object_id: Optional[Address] = None
    ownership: Optional[ObjectOwnership] = None
    initial_object: Any = None
    cached_object: Any = None

    def __post_init__(self) -> None:
        kind = self.kind
        if kind in _INTEGER_BITS:
            bits = _INTEGER_BITS[kind]
            value = self.value
            if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < (1 << bits):
                raise ValueTypeError(f"{kind.value} value out of range: {value!r}")
        elif kind is ValueKind.BOOL:
            if not isinstance(self.value, bool):
                raise ValueTypeError(f"bool value expected, got {self.value!r}")
        elif kind is ValueKind.ADDRESS:
            if not isinstance(self.value, Address):
                raise ValueTypeError(f"address value expected, got {self.value!r}")
        elif kind is ValueKind.VECTOR:
            items = tuple(self.value or ())
            if not all(isinstance(item, MoveValue) for item in items):
                raise ValueTypeError("vector items must be values")
            object.__setattr__(self, "value", items)
        elif kind is ValueKind.UID:
            if not isinstance(self.object_id, Address):
                raise ValueTypeError("uid needs an object id")
        elif kind is ValueKind.STRUCT_OBJECT:
            if not isinstance(self.object_id, Address) or not isinstance(self.ownership, ObjectOwnership):
                raise ValueTypeError("struct object needs an object id and an ownership")

    def type_name(self) -> str:
        return self.kind.value

    def is_integer(self) -> bool:
        return self.kind in _INTEGER_BITS

    def is_integer_vector(self) -> bool:
        return self.kind is ValueKind.VECTOR and all(item.is_integer() for item in self.value)

    def contains_integers(self) -> bool:
        if self.kind is ValueKind.VECTOR:
            return any(item.is_integer() for item in self.value)
        return self.is_integer()

    def is_mutable_object(self) -> bool:
        return (
            self.kind is ValueKind.STRUCT_OBJECT
            and self.ownership is not None
            and self.ownership.kind is OwnershipKind.MUTABLE_SHARED
        )

    def object_id_bytes(self) -> Optional[bytes]:
        if self.kind in (ValueKind.UID, ValueKind.STRUCT_OBJECT):
            return self.object_id.to_bytes()
        return None

    def struct_object(self) -> Any:
        """The object behind a struct value, preferring the cached copy."""
        if self.kind is not ValueKind.STRUCT_OBJECT:
            raise ConversionError("Not a StructObject")
        if self.cached_object is not None:
            return self.cached_object
        if self.initial_object is not None:
            return self.initial_object
        raise ConversionError("No object available for StructObject")

    def has_cached_object(self) -> bool:
        return self.kind is ValueKind.STRUCT_OBJECT and self.cached_object is not None

    def with_cached_object(self, obj: Any) -> "MoveValue":
        """Return a copy caching ``obj``; other kinds are returned unchanged."""
        if self.kind is not ValueKind.STRUCT_OBJECT:
            log.debug("Cannot update non-struct object value with cached object")
            return self
        log.debug("Updated cached object for struct object: %s", self.object_id)
        return replace(self, cached_object=obj)


@dataclass
class FunctionParameter:
    index: int
    name: str
    param_type: MoveType
    value: MoveValue

    def is_integer(self) -> bool:
        return self.value.is_integer()

    def is_integer_vector(self) -> bool:
        return self.value.is_integer_vector()

    def contains_integers(self) -> bool:
        return self.value.contains_integers()

    def is_mutable_object(self) -> bool:
        return self.value.is_mutable_object()


@dataclass
class TargetFunction:
    package_id: Address
    module_name: str
    function_name: str
    type_arguments: list = field(default_factory=list)


def parse_u256(text: str) -> MoveValue:
    """Parse a decimal or 0x-prefixed hexadecimal 256-bit unsigned integer."""
    if text.startswith("0x"):
        digits = text[2:]
        if not _HEX_DIGITS.fullmatch(digits):
            raise ConversionError(f"Invalid U256 hex: {text!r}")
        number = int(digits, 16)
        if number > U256_MAX:
            raise ConversionError(f"Invalid U256 hex: {text!r} overflows")
    else:
        if not _DEC_DIGITS.fullmatch(text):
            raise ConversionError(f"Invalid U256 decimal: {text!r}")
        number = int(text)
        if number > U256_MAX:
            raise ConversionError(f"Invalid U256 decimal: {text!r} overflows")
    return MoveValue(ValueKind.U256, number)


def _parse_unsigned_or_zero(text: str, bits: int) -> int:
    if not _UNSIGNED.fullmatch(text):
        return 0
    number = int(text)
    return number if number < (1 << bits) else 0


def parse_vector(inner_type: MoveType, text: str) -> MoveValue:
    """Parse ``[a, b, c]`` into a vector value of ``inner_type`` elements.

    Unparsable integers and booleans fall back to their defaults (0, false),
    unparsable addresses to the zero address.
    """
    stripped = text.strip()
    if not (stripped.startswith("[") and stripped.endswith("]")) or len(stripped) < 2:
        raise ConversionError(f"Invalid vector format: {stripped}")
    body = stripped[1:-1]
    if not body:
        return MoveValue(ValueKind.VECTOR, ())

    items = []
    for raw_item in body.split(","):
        item = raw_item.strip()
        kind = inner_type.kind
        if kind in _TYPE_TO_VALUE:
            value_kind = _TYPE_TO_VALUE[kind]
            items.append(MoveValue(value_kind, _parse_unsigned_or_zero(item, _INTEGER_BITS[value_kind])))
        elif kind is TypeKind.U256:
            items.append(parse_u256(item))
        elif kind is TypeKind.BOOL:
            items.append(MoveValue(ValueKind.BOOL, item == "true"))
        elif kind is TypeKind.ADDRESS:
            try:
                address = Address.from_hex(item)
            except ConversionError:
                address = Address.zero()
            items.append(MoveValue(ValueKind.ADDRESS, address))
        else:
            raise ConversionError(f"Unsupported vector inner type: {inner_type!r}")
    return MoveValue(ValueKind.VECTOR, tuple(items))


def unwrap_reference_type(param_type: MoveType) -> MoveType:
    """Strip any number of (mutable) references from a type."""
    while param_type.kind in (TypeKind.REFERENCE, TypeKind.MUTABLE_REFERENCE):
        param_type = param_type.inner
    return param_type


def _parse_type_tag(text: str) -> MoveType:
    tag = text.strip()
    for kind in _PRIMITIVE_TYPES:
        if tag == kind.value:
            return MoveType(kind)
    if tag.startswith("vector<") and tag.endswith(">"):
        return MoveType.vector(_parse_type_tag(tag[len("vector<"):-1]))
    raise ConversionError(f"Cannot convert TypeInput {text!r} to a normalized type")


def type_input_to_normalized_type(type_input: Union[str, MoveType]) -> MoveType:
    """Convert a type argument (tag text or type) into a concrete normalized type.

    Only primitive types and vectors of them are supported.
    """
    if isinstance(type_input, str):
        return _parse_type_tag(type_input)
    if type_input.kind in _PRIMITIVE_TYPES:
        return MoveType(type_input.kind)
    if type_input.kind is TypeKind.VECTOR:
        return MoveType.vector(type_input_to_normalized_type(type_input.inner))
    raise ConversionError(f"Cannot convert TypeInput {type_input!r} to a normalized type")


def resolve_type_parameter(index: int, type_arguments: Sequence[Union[str, MoveType]]) -> MoveType:
    """Resolve the type parameter at ``index`` against concrete type arguments."""
    if not 0 <= index < len(type_arguments):
        raise ConversionError(
            f"TypeParameter index {index} out of range "
            f"(type_arguments has {len(type_arguments)} elements)"
        )
    return type_input_to_normalized_type(type_arguments[index])


def get_object_ownership_type(owner: Optional[Owner], param_type: MoveType) -> ObjectOwnership:
    """Decide how an object is passed, from its owner and the parameter type."""
    if owner is None:
        return ObjectOwnership(OwnershipKind.OWNED)
    if owner.kind is OwnerKind.SHARED:
        if param_type.kind is TypeKind.REFERENCE:
            return ObjectOwnership(OwnershipKind.IMMUTABLE_SHARED)
        return ObjectOwnership(OwnershipKind.MUTABLE_SHARED, owner.initial_shared_version)
    if owner.kind is OwnerKind.IMMUTABLE:
        return ObjectOwnership(OwnershipKind.IMMUTABLE_SHARED)
    return ObjectOwnership(OwnershipKind.OWNED)