"""Result type and the tagged error variants returned by the pipeline."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying an error value."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"unwrap() called on Err: {self.error}")


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class ValidationError:
    message: str
    field: str | None = None

    @property
    def kind(self) -> str:
        return "ValidationError"


@dataclass(frozen=True)
class ParseError:
    message: str
    text: str

    @property
    def kind(self) -> str:
        return "ParseError"


@dataclass(frozen=True)
class ConversionError:
    message: str
    reason: str

    @property
    def kind(self) -> str:
        return "ConversionError"


@dataclass(frozen=True)
class NotFoundError:
    message: str
    id: str

    @property
    def kind(self) -> str:
        return "NotFoundError"


@dataclass(frozen=True)
class ProcessingError:
    message: str
    details: Any = None

    @property
    def kind(self) -> str:
        return "ProcessingError"


OcrError = Union[ValidationError, ParseError, ConversionError, NotFoundError, ProcessingError]
