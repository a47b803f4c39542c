"""Unified error model for tplinker.

Every failure the library reports is exactly one of four variants of
:class:`TPLinkError`:

* :class:`CommunicationError` - the device could not be reached, read or written.
* :class:`ProtocolError` - the reply did not decode as the expected JSON.
* :class:`DeviceError` - the reply decoded, but a section carried a non-zero
  ``err_code``.
* :class:`GenericError` - anything else (validation, caller misuse).

The set is closed, so callers can ``match`` on it exhaustively. Lower layers
never build these by hand: they raise their native exception and let
:func:`converted` (or :func:`to_error`) classify it.
"""

import json
from collections.abc import Awaitable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from functools import singledispatch
from typing import Any, TypeVar, Union

_T = TypeVar("_T")

_INT16_MIN = -(2**15)
_INT16_MAX = 2**15 - 1


@dataclass(frozen=True)
class SectionError:
    """Status reported by the device for one section of a response."""

    err_code: int
    err_msg: str

    def __post_init__(self) -> None:
        if not isinstance(self.err_code, int) or isinstance(self.err_code, bool):
            raise TypeError(
                f"err_code must be an int, not {type(self.err_code).__name__}"
            )
        if not _INT16_MIN <= self.err_code <= _INT16_MAX:
            raise ValueError(f"err_code {self.err_code} is outside the int16 range")

    def __str__(self) -> str:
        return f"{self.err_code}: {self.err_msg}"

    @property
    def is_error(self) -> bool:
        """Return True unless the device reported success (code 0)."""
        return self.err_code != 0

    @classmethod
    def from_section(cls, section: Mapping[str, Any]) -> "SectionError":
        """Build a SectionError from a decoded response section.

        Raises TypeError or ValueError if ``err_code`` is not an int16.
        """
        err_msg = section.get("err_msg")
        return cls(
            err_code=section.get("err_code", 0),
            err_msg="" if err_msg is None else str(err_msg),
        )


class TPLinkError(Exception):
    """Base exception for all tplinker errors.

    Only the four variants listed in :data:`ERROR_VARIANTS` can be
    instantiated, and no further subclasses may be declared.
    """

    _description = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(
                f"cannot subclass {cls.__mro__[1].__name__}: "
                "the TPLinkError variants are a closed set"
            )

    def __new__(cls, *args: Any, **kwargs: Any) -> "TPLinkError":
        if cls not in ERROR_VARIANTS:
            raise TypeError(f"{cls.__name__} cannot be instantiated directly")
        return super().__new__(cls, *args, **kwargs)

    @property
    def description(self) -> str:
        """Short, fixed description of the error kind."""
        return self._description


class _CausedError(TPLinkError):
    """Variant that keeps the lower-level exception for inspection."""

    __match_args__ = ("cause",)

    def __init__(self, cause: BaseException) -> None:
        super().__init__(cause)
        self._cause = cause

    @property
    def cause(self) -> BaseException:
        """The original exception, kept out of the user-facing message."""
        return self._cause

    def __str__(self) -> str:
        return self._description


class CommunicationError(_CausedError):
    """Failed to connect to or communicate with the device."""

    _description = "Error connecting to the device"


class ProtocolError(_CausedError):
    """The device reply could not be decoded."""

    _description = "Could not parse the response received from the device"


class DeviceError(TPLinkError):
    """The device reported a non-zero status for a response section."""

    __match_args__ = ("section",)
    _description = "Response data error"

    def __init__(self, section: SectionError) -> None:
        super().__init__(section)
        self._section = section

    @property
    def section(self) -> SectionError:
        return self._section

    @property
    def err_code(self) -> int:
        return self._section.err_code

    @property
    def err_msg(self) -> str:
        return self._section.err_msg

    def __str__(self) -> str:
        return f"{self._description}: ({self.err_code}) {self.err_msg}"


class GenericError(TPLinkError):
    """Any other failure, carried as a plain message."""

    __match_args__ = ("message",)

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self._message = message

    @property
    def message(self) -> str:
        return self._message

    @property
    def description(self) -> str:
        return self._message

    def __str__(self) -> str:
        return self._message


ERROR_VARIANTS: tuple[type[TPLinkError], ...] = (
    CommunicationError,
    ProtocolError,
    DeviceError,
    GenericError,
)

Result = Union[_T, TPLinkError]
"""Outcome of a fallible operation: the value, or the error that replaced it."""


@singledispatch
def to_error(value: object) -> TPLinkError:
    """Classify ``value`` as one of the :class:`TPLinkError` variants.

    I/O failures become :class:`CommunicationError`, JSON and text decoding
    failures become :class:`ProtocolError`, a :class:`SectionError` becomes a
    :class:`DeviceError` and strings become a :class:`GenericError`. Anything
    unrecognised is rendered with ``str()`` into a :class:`GenericError`,
    falling back to a placeholder naming its type if ``str()`` fails.
    """
    try:
        message = str(value)
    except Exception:
        message = f"<unprintable {type(value).__name__} object>"
    return GenericError(message)


@to_error.register
def _(value: TPLinkError) -> TPLinkError:
    return value


@to_error.register(OSError)
@to_error.register(EOFError)
def _(value: Exception) -> TPLinkError:
    return CommunicationError(value)


@to_error.register(json.JSONDecodeError)
@to_error.register(UnicodeDecodeError)
def _(value: ValueError) -> TPLinkError:
    return ProtocolError(value)


@to_error.register
def _(value: SectionError) -> TPLinkError:
    return DeviceError(value)


@to_error.register
def _(value: str) -> TPLinkError:
    return GenericError(value)


@contextmanager
def converted() -> Iterator[None]:
    """Re-raise any exception escaping the block as its TPLinkError variant.

    The original exception is chained as ``__cause__``.
    """
    try:
        yield
    except TPLinkError:
        raise
    except Exception as exc:
        raise to_error(exc) from exc


async def capture(awaitable: Awaitable[_T]) -> Result[_T]:
    """Await ``awaitable`` and return its value or the TPLinkError it raised."""
    try:
        return await awaitable
    except TPLinkError as exc:
        return exc
