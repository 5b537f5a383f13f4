"""
Discriminated result types used by the dashboard views
A proxy call is either Ok(data) or Err(kind, message, status_code)
"""

from dataclasses import dataclass
from typing import Any, Callable, Union

from utils.exceptions import AeroSenseError


@dataclass(frozen=True)
class Ok:
    data: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: str
    message: str
    status_code: int = 500

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: AeroSenseError) -> "Err":
        return cls(kind=type(exc).__name__, message=exc.message, status_code=exc.status_code)


Result = Union[Ok, Err]


def capture(func: Callable, *args, **kwargs) -> Result:
    """Run func and wrap its outcome; only AeroSense errors become Err"""
    try:
        return Ok(func(*args, **kwargs))
    except AeroSenseError as e:
        return Err.from_exception(e)
