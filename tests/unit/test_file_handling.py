from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from hypothesis import given
from hypothesis import strategies as st
from rich.console import Console

from printa.constants import EntryKind
from printa.directory import Entry
from printa.file_handling import ContentEmitter, EmitDependencies, ExtensionFilter, collect_files
from printa.highlight import HighlightError
from printa.styles import Palette
from printa.utils import detect_text, read_bytes

from ..support import console_text

pytestmark = pytest.mark.small

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    TreeFactory = Callable[[Mapping[str, object]], Path]


def _emitter(
    console: Console,
    base: Path,
    *,
    highlight: bool = False,
    dependencies: EmitDependencies | None = None,
) -> ContentEmitter:
    return ContentEmitter(
        console=console,
        palette=Palette(enabled=False),
        base_path=base,
        highlight=highlight,
        dependencies=dependencies,
    )


def test_collect_files_follows_tree_order_and_skips_tombstones(tmp_path: Path) -> None:
    entries = (
        Entry(name="node_modules", kind=EntryKind.DIRECTORY, ignored=True),
        Entry(
            name="src",
            kind=EntryKind.DIRECTORY,
            children=(
                Entry(name="a.ts", kind=EntryKind.FILE),
                Entry(name="b.log", kind=EntryKind.FILE, ignored=True),
            ),
        ),
        Entry(name="z.md", kind=EntryKind.FILE),
    )
    assert collect_files(entries, tmp_path) == [tmp_path / "src" / "a.ts", tmp_path / "z.md"]


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
def test_collect_files_keeps_file_symlinks_only(tmp_path: Path) -> None:
    (tmp_path / "real").mkdir()
    (tmp_path / "target.txt").write_text("x", encoding="utf-8")
    (tmp_path / "dirlink").symlink_to(tmp_path / "real", target_is_directory=True)
    (tmp_path / "filelink").symlink_to(tmp_path / "target.txt")
    (tmp_path / "dangling").symlink_to(tmp_path / "missing.txt")
    entries = (
        Entry(name="dangling", kind=EntryKind.SYMLINK),
        Entry(name="dirlink", kind=EntryKind.SYMLINK),
        Entry(name="filelink", kind=EntryKind.SYMLINK),
    )
    assert collect_files(entries, tmp_path) == [tmp_path / "filelink"]


def test_extension_filter_matches_final_suffix_only() -> None:
    only_ts = ExtensionFilter.from_values(["ts"])
    assert only_ts(Path("src/app.ts"))
    assert only_ts(Path("src/app.spec.ts"))
    assert not only_ts(Path("README"))
    assert not only_ts(Path("types.d.tsx"))


def test_extension_filter_normalizes_values() -> None:
    f = ExtensionFilter.from_values([".TS", " md "])
    assert f(Path("a.ts"))
    assert f(Path("B.TS"))
    assert f(Path("notes.md"))


def test_extension_filter_matches_base_names() -> None:
    f = ExtensionFilter.from_values(["Makefile", "py"])
    assert f(Path("Makefile"))
    assert f(Path("sub/Makefile"))
    assert not f(Path("makefile"))
    assert f(Path("main.py"))


def test_empty_extension_filter_accepts_everything() -> None:
    f = ExtensionFilter.from_values(["", "  "])
    assert f.accepts_all
    assert f.select([Path("a"), Path("b.bin")]) == [Path("a"), Path("b.bin")]


def test_emit_writes_label_and_content(tree_factory: TreeFactory, plain_console: Console) -> None:
    root = tree_factory({"src": {"app.ts": "const x = 1;\n"}})
    emitter = _emitter(plain_console, root)
    assert emitter.emit(root / "src" / "app.ts")
    assert console_text(plain_console) == "\n./src/app.ts:\nconst x = 1;\n"


def test_header_text(tmp_path: Path, plain_console: Console) -> None:
    assert _emitter(plain_console, tmp_path).header().plain == "\nContent of files:"


def test_binary_files_are_skipped_silently(
    tree_factory: TreeFactory, plain_console: Console, caplog: pytest.LogCaptureFixture
) -> None:
    root = tree_factory({"blob.dat": b"\x00\x01\x02", "logo.png": b"not really a png"})
    emitter = _emitter(plain_console, root)
    with caplog.at_level(logging.DEBUG, logger="printa.file_handling"):
        written = emitter.emit_all([root / "blob.dat", root / "logo.png"])
    assert written == 0
    assert console_text(plain_console) == ""
    assert not caplog.records


def test_read_failure_warns_and_continues(
    tree_factory: TreeFactory, plain_console: Console, caplog: pytest.LogCaptureFixture
) -> None:
    root = tree_factory({"ok.txt": "fine\n"})
    missing = root / "gone.txt"
    emitter = _emitter(plain_console, root)
    with caplog.at_level(logging.WARNING, logger="printa.file_handling"):
        written = emitter.emit_all([missing, root / "ok.txt"])

    assert written == 1
    assert "./ok.txt:" in console_text(plain_console)
    assert "gone.txt" not in console_text(plain_console)
    record = next(r for r in caplog.records if getattr(r, "event", None) == "content.read_failed")
    assert record.levelno == logging.WARNING
    assert "Could not read" in record.getMessage()


def _color_console() -> Console:
    return Console(
        file=io.StringIO(),
        force_terminal=True,
        color_system="standard",
        highlight=False,
        soft_wrap=True,
        width=200,
    )


def test_plain_content_is_written_unchanged(tree_factory: TreeFactory, plain_console: Console) -> None:
    raw = "all:\n\techo hi\r\nx\fy\x07\n"
    root = tree_factory({"Makefile": raw})
    assert _emitter(plain_console, root).emit(root / "Makefile")
    assert console_text(plain_console) == f"\n./Makefile:\n{raw}"


def test_content_without_trailing_newline_is_terminated(
    tree_factory: TreeFactory, plain_console: Console
) -> None:
    root = tree_factory({"a.txt": "no newline", "b.txt": ""})
    _emitter(plain_console, root).emit_all([root / "a.txt", root / "b.txt"])
    assert console_text(plain_console) == "\n./a.txt:\nno newline\n\n./b.txt:\n\n"


def test_uncoloured_console_never_highlights(tree_factory: TreeFactory, plain_console: Console) -> None:
    root = tree_factory({"a.py": "x = 1\n"})

    def _explode(_source: str, _path: Path) -> str:
        raise AssertionError

    deps = EmitDependencies(byte_reader=read_bytes, text_detector=detect_text, highlighter=_explode)
    assert _emitter(plain_console, root, highlight=True, dependencies=deps).emit(root / "a.py")
    assert console_text(plain_console).endswith("x = 1\n")


def test_highlight_failure_falls_back_to_content_colour(tree_factory: TreeFactory) -> None:
    console = _color_console()
    root = tree_factory({"notes.weird": "keep\tme\n"})

    def _fail(_source: str, path: Path) -> str:
        msg = f"no lexer for {path.name}"
        raise HighlightError(msg)

    deps = EmitDependencies(byte_reader=read_bytes, text_detector=detect_text, highlighter=_fail)
    emitter = ContentEmitter(
        console=console,
        palette=Palette.from_colors({"content": "red"}, enabled=True),
        base_path=root,
        highlight=True,
        dependencies=deps,
    )
    assert emitter.emit(root / "notes.weird")
    out = console_text(console)
    assert "keep\tme" in out
    assert "\x1b[31mkeep\tme\x1b[0m\n" in out


def test_highlighter_output_is_written_verbatim(tree_factory: TreeFactory) -> None:
    console = _color_console()
    root = tree_factory({"a.py": "x = 1\n"})
    seen: list[str] = []

    def _record(source: str, path: Path) -> str:
        seen.append(path.name)
        return f"\x1b[1m{source}\x1b[0m"

    deps = EmitDependencies(byte_reader=read_bytes, text_detector=detect_text, highlighter=_record)
    _emitter(console, root, highlight=True, dependencies=deps).emit(root / "a.py")
    assert seen == ["a.py"]
    assert console_text(console).endswith("\x1b[1mx = 1\n\x1b[0m\n")


def test_highlighter_is_skipped_when_disabled(tree_factory: TreeFactory) -> None:
    console = _color_console()
    root = tree_factory({"a.py": "x = 1\n"})

    def _explode(_source: str, _path: Path) -> str:
        raise AssertionError

    deps = EmitDependencies(byte_reader=read_bytes, text_detector=detect_text, highlighter=_explode)
    assert _emitter(console, root, highlight=False, dependencies=deps).emit(root / "a.py")
    assert console_text(console).endswith("x = 1\n")


@given(
    st.sampled_from(["ts", ".ts", "TS", ".Ts"]),
    st.text(alphabet="abcdef", min_size=1, max_size=6),
    st.sampled_from([".ts", ".TS", ".tsx", ".js", ""]),
)
def test_extension_filter_is_case_and_dot_insensitive(value: str, stem: str, suffix: str) -> None:
    accepted = ExtensionFilter.from_values([value])(Path(f"{stem}{suffix}"))
    assert accepted == (suffix.lower() == ".ts")
