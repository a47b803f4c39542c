import json
import struct
from typing import Any

from .exceptions import ProtocolError, SectionError, converted, to_error

_INITIAL_KEY = 171
_LENGTH_PREFIX = struct.Struct(">I")

HEADER_SIZE = _LENGTH_PREFIX.size


def encrypt(text: str) -> bytes:
    """Encrypt text with the device's XOR autokey cipher."""
    key = _INITIAL_KEY
    out = bytearray()
    for byte in text.encode("utf-8"):
        key ^= byte
        out.append(key)
    return bytes(out)


def decrypt(data: bytes) -> str:
    """Decrypt a payload produced by :func:`encrypt`.

    Raises ProtocolError if the plaintext is not valid UTF-8.
    """
    key = _INITIAL_KEY
    out = bytearray()
    for byte in data:
        out.append(key ^ byte)
        key = byte
    with converted():
        return out.decode("utf-8")


def frame(payload: bytes) -> bytes:
    """Prefix the payload with its 4-byte big-endian length."""
    return _LENGTH_PREFIX.pack(len(payload)) + payload


def read_length(header: bytes) -> int:
    """Return the payload length announced by a frame header."""
    (length,) = _LENGTH_PREFIX.unpack(header)
    return length


def encode_command(command: dict[str, Any]) -> bytes:
    """Serialise, encrypt and frame a command for sending."""
    return frame(encrypt(json.dumps(command, separators=(",", ":"))))


def decode_response(data: bytes) -> dict[str, Any]:
    """Decrypt and parse a response body (without its length prefix).

    Raises ProtocolError on malformed JSON or a non-object document.
    """
    text = decrypt(data)
    with converted():
        try:
            response = json.loads(text)
        except RecursionError as exc:
            # Nesting deeper than the interpreter stack allows.
            raise ProtocolError(exc) from exc
    if not isinstance(response, dict):
        raise ProtocolError(
            TypeError(f"expected a JSON object, got {type(response).__name__}")
        )
    return response


def check_sections(response: dict[str, Any]) -> dict[str, Any]:
    """Raise DeviceError for the first section reporting a non-zero err_code.

    Responses nest as ``{module: {method: {...result, "err_code": n}}}``. A
    module the device does not support reports its error at module level
    instead.
    """
    for body in response.values():
        if not isinstance(body, dict):
            continue
        _check_section(body)
        for result in body.values():
            if isinstance(result, dict):
                _check_section(result)
    return response


def _check_section(section: dict[str, Any]) -> None:
    if "err_code" not in section:
        return
    try:
        error = SectionError.from_section(section)
    except (TypeError, ValueError) as exc:
        raise ProtocolError(exc) from exc
    if error.is_error:
        raise to_error(error)
