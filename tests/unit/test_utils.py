from __future__ import annotations

from pathlib import Path

import pytest

from printa.utils import SAMPLE_SIZE, detect_text, is_text_bytes, relative_posix

pytestmark = pytest.mark.small


def test_plain_utf8_is_text() -> None:
    result = detect_text(Path("a.txt"), "héllo\n".encode())
    assert result.is_text
    assert result.content == "héllo\n"


def test_empty_file_is_text() -> None:
    assert is_text_bytes(Path("empty"), b"")


def test_nul_byte_marks_binary() -> None:
    assert not detect_text(Path("a.txt"), b"ab\x00cd").is_text


def test_invalid_utf8_marks_binary() -> None:
    assert not is_text_bytes(Path("latin1.txt"), "café".encode("latin-1"))


@pytest.mark.parametrize("name", ["image.PNG", "archive.zip", "lib.so"])
def test_binary_extensions_short_circuit(name: str) -> None:
    assert not is_text_bytes(Path(name), b"plain ascii")


def test_multibyte_sequence_cut_by_sample_is_text() -> None:
    data = b"a" * (SAMPLE_SIZE - 1) + "é".encode() + b"tail"
    assert is_text_bytes(Path("big.txt"), data)


def test_relative_posix(tmp_path: Path) -> None:
    assert relative_posix(tmp_path / "a" / "b.txt", tmp_path) == "a/b.txt"
    assert relative_posix(Path("/elsewhere/x"), tmp_path) == "/elsewhere/x"
