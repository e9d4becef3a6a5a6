from collections.abc import Callable
from typing import TypeVar

_F = TypeVar("_F", bound=Callable[..., object])


def pure(func: _F) -> _F:
    """Mark a function as pure (no side effects).

    Advisory only, nothing is enforced at runtime. Payload selection and
    JSON rendering in this package are expected to be pure so that
    logically identical events always serialize identically.
    """
    return func
