# shiftfuzz

This package provides building blocks for fuzzing Move smart-contract
functions. It models Move argument values, parses them from text, and turns
them into new inputs with mutation strategies. The strategies are aimed at
edge cases such as bit shifts that drop high bits.

The package has no runtime dependencies.

## What is inside

- `shiftfuzz.values` models Move arguments.
  - It defines `MoveValue` (with `ValueKind`), `MoveType` (with `TypeKind`) and `Address`.
  - It defines object ownership: `Owner`, `OwnerKind`, `ObjectOwnership` and `OwnershipKind`.
  - It defines `FunctionParameter` and `TargetFunction`.
  - It parses arguments with `parse_u256` and `parse_vector`. It unwraps references with `unwrap_reference_type`.
  - It resolves generic type parameters with `resolve_type_parameter` and `type_input_to_normalized_type`.
  - It decides how an object is passed with `get_object_ownership_type`.
- `shiftfuzz.strategies` holds the strategies. They implement the `MutationStrategy` and `GenerativeStrategy` interfaces.
  - `BoundaryValueStrategy` produces 0, 1, MAX-1 and MAX. For `bool` it produces a random boolean. For `address` it produces the zero address or a random one.
  - `PowerOfTwoStrategy` produces 2^n, 2^n-1 and 2^n+1. It also produces common algorithmic constants through `generate_common_algorithmic_values`.
  - `RandomStrategy` produces uniformly random values.
- `shiftfuzz.whitelist` has `WhitelistChecker`. `should_ignore(module, function)` is true when either the module or the function is listed.
- `shiftfuzz.errors` has the exception hierarchy. Every exception derives from `FuzzerError`. For example, `ConversionError` is raised for malformed text and for unsupported type names.

## Parsing arguments

```python
from shiftfuzz.values import MoveType, TypeKind, parse_u256, parse_vector

parse_u256("0xff").value                                   # 255
vec = parse_vector(MoveType(TypeKind.U64), "[1, 2, 3]")
vec.is_integer_vector()                                    # True
```

In a vector, integers and booleans that cannot be parsed become 0 and
`False`. Addresses that cannot be parsed become the zero address. A text
without surrounding brackets raises `ConversionError`.

## Mutating values

`MoveValue` is immutable. `mutate` returns a new value, and a value of a kind
the strategy does not handle comes back unchanged. Every strategy takes an
optional `random.Random`, so runs can be reproduced.

```python
import random

from shiftfuzz.strategies import BoundaryValueStrategy, PowerOfTwoStrategy
from shiftfuzz.values import MoveType, TypeKind, parse_vector

rng = random.Random(1234)
boundary = BoundaryValueStrategy(rng)
boundary.generate("u8").value          # one of 0, 1, 254, 255

powers = PowerOfTwoStrategy(rng)
value = parse_vector(MoveType(TypeKind.U64), "[1, 2, 3]")
if powers.can_apply(value):
    value = powers.mutate(value)       # one element replaced
```

## What it does not do

The package does not run transactions, talk to a node or read execution
traces. It does not combine the strategies into a weighted mutation loop,
either. The caller picks a strategy, applies it, and feeds the resulting
values to whatever executes the target function.

## Running the tests

```
pip install -e ".[test]"
pytest
```