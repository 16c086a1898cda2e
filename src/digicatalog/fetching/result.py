"""
Typed result values returned across the fetching boundary.

A FetchResult holds either a value or a FetchError, never both.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import FetchError

T = TypeVar('T')


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """ Outcome of a fetch: a decoded value or a classified error """
    value: Optional[T] = None
    error: Optional[FetchError] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError('FetchResult needs exactly one of value or error')

    @classmethod
    def success(cls, value: T) -> 'FetchResult[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, error: FetchError) -> 'FetchResult[T]':
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.value
