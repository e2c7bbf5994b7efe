"""Tests for the command-line interface."""

import json

from tokbudget import Vocabulary
from tokbudget.cli import format_tokens, main

from conftest import HELLO, SPACE_WORLD


def test_format_tokens():
    assert format_tokens([]) == "[]"
    assert format_tokens([15496, 11, 995, 13]) == "[15496, 11, 995, 13]"


def test_count_single_file(shared_tiny, tmp_path, capsys):
    path = tmp_path / "a.txt"
    path.write_text("hello world", encoding="utf-8")
    assert main(["count", str(path)]) == 0
    assert capsys.readouterr().out == "2\n"


def test_count_single_file_with_name(shared_tiny, tmp_path, capsys):
    path = tmp_path / "a.txt"
    path.write_text("hello world", encoding="utf-8")
    assert main(["count", "-f", str(path)]) == 0
    assert capsys.readouterr().out == "a.txt: 2\n"


def test_count_several_files(shared_tiny, tmp_path, capsys):
    a, b = tmp_path / "a.txt", tmp_path / "b.txt"
    a.write_text("hello world", encoding="utf-8")
    b.write_text("Hello", encoding="utf-8")
    assert main(["count", str(a), str(b)]) == 0
    assert capsys.readouterr().out == "a.txt: 2\nb.txt: 4\nTOTAL: 6\n"


def test_encode_and_decode(shared_tiny, capsys):
    assert main(["encode", "hello world"]) == 0
    assert capsys.readouterr().out == f"[{HELLO}, {SPACE_WORLD}]\n"

    assert main(["decode", str(HELLO), str(SPACE_WORLD)]) == 0
    assert capsys.readouterr().out == "hello world\n"


def test_decode_unknown_token_fails(shared_tiny, capsys):
    assert main(["decode", "99999"]) == 1


def test_convert(tmp_path):
    encoder = tmp_path / "encoder.json"
    encoder.write_text(json.dumps({"!": 0, "Ġthe": 2}), encoding="utf-8")
    out = tmp_path / "tokens.bin"
    assert main(["convert", str(encoder), str(out)]) == 0
    assert out.read_bytes() == "!\x00\x00Ġthe\x00".encode("utf-8")
    assert Vocabulary.from_bytes(out.read_bytes()).token_id("Ġthe") == 2


def test_missing_file_fails(shared_tiny, tmp_path):
    assert main(["count", str(tmp_path / "missing.txt")]) == 1
