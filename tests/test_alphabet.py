"""Unit tests for the byte <-> symbol alphabet."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from tokbudget import _alphabet
from tokbudget._alphabet import ByteAlphabet, byte_alphabet
from tokbudget._sanitise import render_symbol
from tokbudget.errors import AlphabetError


def test_alphabet_is_bijection():
    """Every byte has its own symbol and maps back to itself."""
    alphabet = ByteAlphabet()
    symbols = [alphabet.encode(b) for b in range(256)]
    assert len(set(symbols)) == 256
    assert all(len(s) == 1 for s in symbols)
    assert [alphabet.decode(s) for s in symbols] == list(range(256))
    assert len(alphabet) == 256


@pytest.mark.parametrize("b", [ord("!"), ord("A"), ord("~"), 0xA1, 0xAC, 0xAE, 0xFF])
def test_printable_bytes_map_to_themselves(b):
    assert byte_alphabet().encode(b) == chr(b)


@pytest.mark.parametrize(
    "b, code_point",
    [
        (0, 256),
        (ord(" "), 288),  # "Ġ"
        (ord("\n"), 266),  # "Ċ"
        (0x7F, 289),
        (0xA0, 322),
        (0xAD, 323),
    ],
)
def test_other_bytes_are_shifted_in_byte_order(b, code_point):
    assert byte_alphabet().encode(b) == chr(code_point)


def test_encode_bytes_and_decode_symbols():
    alphabet = byte_alphabet()
    data = "héllo wörld\n".encode("utf-8")
    symbols = alphabet.encode_bytes(data)
    assert len(symbols) == len(data)
    assert alphabet.decode_symbols("".join(symbols)) == data


def test_decode_unknown_symbol_raises():
    alphabet = byte_alphabet()
    with pytest.raises(AlphabetError):
        alphabet.decode("€")
    with pytest.raises(AlphabetError):
        alphabet.decode_symbols("ab€")


def test_shared_alphabet_built_once_under_contention(monkeypatch):
    """Concurrent first use builds exactly one alphabet."""
    monkeypatch.setattr(_alphabet, "_alphabet", None)
    builds = 0
    real_init = ByteAlphabet.__init__
    lock = threading.Lock()

    def counting_init(self):
        nonlocal builds
        with lock:
            builds += 1
        real_init(self)

    monkeypatch.setattr(ByteAlphabet, "__init__", counting_init)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: byte_alphabet(), range(32)))

    assert builds == 1
    assert all(r is results[0] for r in results)


# Rendering
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "symbol, expected",
    [
        ("Ġworld", " world"),
        ("Ċ", "\\u000a"),
        ("hello", "hello"),
        ("Ã©", "é"),
        ("Ã", "�"),
        ("€", "€"),
    ],
)
def test_render_symbol(symbol, expected):
    assert render_symbol(symbol) == expected
