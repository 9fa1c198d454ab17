"""Decoding of transport outcomes into typed results."""

import functools
from typing import Any, TypeVar

from pydantic import PydanticUserError, TypeAdapter, ValidationError

from insta_sdk._internal.dispatch.models import STATUS_OK, Failure, Outcome, Result, Success
from insta_sdk.exceptions import DecodeError, InvalidResponseError

T = TypeVar("T")

ADAPTER_CACHE_SIZE = 256


def decode_outcome(
    outcome: Outcome,
    type_: type[T] | Any,
    *,
    validate_status: bool = True,
) -> Result[T]:
    """Decode a transport outcome into `type_`.

    Failures propagate unchanged. A success with no data, or with a status
    other than 200 while `validate_status` is set, becomes an
    `InvalidResponseError`. JSON that does not fit `type_`, or a `type_`
    Pydantic cannot build a schema for, becomes a `DecodeError` chained to
    the underlying error.

    Args:
        outcome: Result of a single dispatch.
        type_: Anything Pydantic can validate into: a model, a dataclass,
            a builtin container type.
        validate_status: Require a 200 status code.

    Returns:
        `Success` with the decoded value, or `Failure`.
    """
    if isinstance(outcome, Failure):
        return outcome

    data, response = outcome.value
    status_code = response.status_code if response is not None else None
    if data is None or (validate_status and status_code != STATUS_OK):
        return Failure(InvalidResponseError(status_code=status_code))

    try:
        value = adapter_for(type_).validate_json(data)
    except (ValidationError, PydanticUserError) as e:
        error = DecodeError(f"Failed to decode {_type_name(type_)}: {e}")
        error.__cause__ = e
        return Failure(error)
    return Success(value)


def adapter_for(type_: Any) -> TypeAdapter[Any]:
    """Return a `TypeAdapter` for `type_`, reusing one built earlier.

    Raises:
        PydanticUserError: If Pydantic cannot build a schema for `type_`.
    """
    try:
        return _cached_adapter(type_)
    except TypeError:
        # unhashable type expression
        return TypeAdapter(type_)


@functools.lru_cache(maxsize=ADAPTER_CACHE_SIZE)
def _cached_adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", None) or repr(type_)
