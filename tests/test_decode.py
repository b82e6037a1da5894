from licensescan.core.decode import decode_bytes


def test_decode_utf8_happy_path() -> None:
    original = "Permission is granted – café"

    dec = decode_bytes(original.encode("utf-8"))

    assert dec.text == original
    assert dec.encoding == "utf-8"
    assert dec.had_replacement is False


def test_decode_empty_input() -> None:
    dec = decode_bytes(b"")

    assert dec.text == ""
    assert dec.had_replacement is False


def test_decode_handles_utf8_bom() -> None:
    dec = decode_bytes(b"\xef\xbb\xbfMIT License")

    assert dec.text == "MIT License"
    assert dec.encoding == "utf-8-sig"


def test_decode_utf16_bom_is_stripped() -> None:
    dec = decode_bytes("LICENSE".encode("utf-16"))

    assert dec.text == "LICENSE"
    assert dec.encoding.startswith("utf-16")


def test_decode_utf16_heuristic_without_bom() -> None:
    raw = "Redistribution and use in source and binary forms".encode("utf-16-le")

    dec = decode_bytes(raw)

    assert dec.text == "Redistribution and use in source and binary forms"
    assert dec.encoding == "utf-16-le"
    assert "\x00" not in dec.text


def test_decode_cp1252_fallback() -> None:
    data = "Licence: “as is”".encode("cp1252")

    dec = decode_bytes(data)

    assert dec.text == "Licence: “as is”"
    assert dec.encoding == "cp1252"


def test_decode_normalizes_newlines_and_strips_controls() -> None:
    dec = decode_bytes(b"line one\r\nline\x07 two\rline\xe2\x80\x8b three")

    assert dec.text == "line one\nline two\nline three"


def test_decode_nfc_normalizes() -> None:
    dec = decode_bytes("cafe\u0301".encode("utf-8"))

    assert dec.text == "caf\u00e9"
