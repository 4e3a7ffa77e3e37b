"""Exception hierarchy for fuzzing operations."""

from __future__ import annotations


class FuzzerError(Exception):
    """Base class for every error raised while fuzzing."""

    label = ""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        if self.label:
            return f"{self.label}: {self.detail}"
        return self.detail


class InitializationError(FuzzerError):
    """Setting up the fuzzer or its backends failed."""

    label = "Initialization failed"


class NetworkError(FuzzerError):
    """A remote node could not be reached or answered badly."""

    label = "Network error"


class ConversionError(FuzzerError):
    """Text or chain data could not be converted into a value."""

    label = "Conversion error"


class MutationError(FuzzerError):
    """A mutation strategy could not produce a new value."""

    label = "Mutation failed"


class ExecutionError(FuzzerError):
    """Running a transaction failed."""

    label = "Execution failed"


class ConfigurationError(FuzzerError):
    """The fuzzer configuration is invalid."""

    label = "Configuration error"


class ValueTypeError(FuzzerError):
    """A value does not match the type it claims to have."""

    label = "Type error"


class OtherError(FuzzerError):
    """Any other failure."""

    label = "Other error"