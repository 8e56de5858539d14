# Defines the standardized, internal data structures for the application.

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Generic, TypeVar

from api_errors import IssSpotterError

T = TypeVar("T")


@dataclass(frozen=True)
class Coordinates:
    """
    Geographic coordinates as the geolocation service returned them.
    Values are kept verbatim (string or number) so no precision is lost.
    """
    latitude: str | float
    longitude: str | float


@dataclass(frozen=True)
class PassRecord:
    """A single predicted ISS pass over a location."""
    risetime: int | None
    duration: int | None

    @classmethod
    def from_json(cls, item: dict) -> "PassRecord":
        # Missing fields are allowed through as None.
        return cls(risetime=item.get('risetime'), duration=item.get('duration'))

    def rise_datetime(self) -> datetime | None:
        """Converts the Unix risetime into an aware UTC datetime."""
        if not isinstance(self.risetime, int):
            return None
        return datetime.fromtimestamp(self.risetime, tz=timezone.utc)


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """
    The outcome of one lookup step: either a value or an error, never both.
    """
    value: T | None = None
    error: IssSpotterError | None = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError(
                "OperationResult needs exactly one of 'value' or 'error'.")

    @classmethod
    def success(cls, value: T) -> "OperationResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: IssSpotterError) -> "OperationResult[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Returns the value, or raises the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
