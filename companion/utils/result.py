"""
Tagged success/error results returned by every data provider call.

Providers never raise for expected failures; they hand back a Failure carrying
a human-readable description so each call site has to handle both outcomes.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar('T')


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful provider call carrying its payload."""
    data: T


@dataclass(frozen=True)
class Failure:
    """Failed provider call carrying a description for display."""
    message: str
    error: Optional[BaseException] = None
    
    @classmethod
    def from_exception(cls, error: BaseException) -> 'Failure':
        """Build a failure from an exception, falling back to its type name."""
        message = str(error) or error.__class__.__name__
        return cls(message=message, error=error)


Result = Union[Success[T], Failure]
