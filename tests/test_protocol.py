import json

import pytest

from tplinker._protocol import (
    HEADER_SIZE,
    check_sections,
    decode_response,
    decrypt,
    encode_command,
    encrypt,
    frame,
    read_length,
)
from tplinker.exceptions import DeviceError, ProtocolError


# --- cipher ---


def test_encrypt_known_prefix():
    # '{' ^ 171 = 0xd0, then each ciphertext byte keys the next.
    assert encrypt('{"sy')[:4] == b"\xd0\xf2\x81\xf8"


def test_encrypt_empty():
    assert encrypt("") == b""


def test_decrypt_reverses_encrypt():
    text = '{"system":{"set_dev_alias":{"alias":"Küche"}}}'
    assert decrypt(encrypt(text)) == text


def test_decrypt_invalid_utf8():
    # Plaintext 0xff is not valid UTF-8; 0xff ^ 171 = 0x54.
    with pytest.raises(ProtocolError):
        decrypt(b"\x54")


# --- framing ---


def test_frame_prefixes_length():
    assert frame(b"abc") == b"\x00\x00\x00\x03abc"


def test_read_length():
    assert HEADER_SIZE == 4
    assert read_length(b"\x00\x00\x01\x00") == 256


def test_encode_command():
    command = {"system": {"get_sysinfo": {}}}
    data = encode_command(command)
    assert read_length(data[:HEADER_SIZE]) == len(data) - HEADER_SIZE
    assert json.loads(decrypt(data[HEADER_SIZE:])) == command


# --- decode_response ---


def test_decode_response():
    body = encrypt('{"system":{"get_sysinfo":{"alias":"Lamp","err_code":0}}}')
    assert decode_response(body) == {
        "system": {"get_sysinfo": {"alias": "Lamp", "err_code": 0}}
    }


def test_decode_response_malformed_json():
    with pytest.raises(ProtocolError) as exc_info:
        decode_response(encrypt('{"system":'))
    assert isinstance(exc_info.value.cause, json.JSONDecodeError)
    assert str(exc_info.value) == "Could not parse the response received from the device"


def test_decode_response_not_an_object():
    with pytest.raises(ProtocolError):
        decode_response(encrypt("[1, 2, 3]"))


# --- check_sections ---


def test_check_sections_success():
    response = {"system": {"set_relay_state": {"err_code": 0}}}
    assert check_sections(response) is response


def test_check_sections_method_error():
    response = {"system": {"set_relay_state": {"err_code": -3, "err_msg": "Auth failed"}}}
    with pytest.raises(DeviceError) as exc_info:
        check_sections(response)
    assert exc_info.value.err_code == -3
    assert str(exc_info.value) == "Response data error: (-3) Auth failed"


def test_check_sections_module_error():
    response = {"emeter": {"err_code": -1, "err_msg": "module not support"}}
    with pytest.raises(DeviceError, match=r"\(-1\) module not support"):
        check_sections(response)


def test_check_sections_ignores_sections_without_code():
    response = {"system": {"get_sysinfo": {"alias": "Lamp"}}, "context": "ignored"}
    assert check_sections(response) is response


def test_check_sections_bad_code():
    with pytest.raises(ProtocolError):
        check_sections({"system": {"reboot": {"err_code": "oops"}}})


def test_decode_response_too_deeply_nested():
    with pytest.raises(ProtocolError) as exc_info:
        decode_response(encrypt("[" * 100000 + "]" * 100000))
    assert isinstance(exc_info.value.cause, RecursionError)


@pytest.mark.parametrize("code", [0.5, 1.9, True, "-3", 40000, -40000])
def test_check_sections_rejects_non_int16_code(code):
    with pytest.raises(ProtocolError):
        check_sections({"system": {"reboot": {"err_code": code, "err_msg": "x"}}})


def test_check_sections_null_message():
    with pytest.raises(DeviceError) as exc_info:
        check_sections({"system": {"reboot": {"err_code": -1, "err_msg": None}}})
    assert exc_info.value.err_msg == ""
