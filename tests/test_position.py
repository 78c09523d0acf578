import os

import pytest

from pyoracle.oracle.models import PositionDescriptor, Selection
from pyoracle.oracle.position import PositionEncoder, canonical_file_path, utf16_to_char_index


@pytest.fixture
def encoder():
    return PositionEncoder()


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_bytes(text.encode("utf-8"))
    return path


def test_point_offset_is_one_less_than_editor_position(tmp_path, encoder):
    text = "package main\n\nfunc main() {}\n"
    path = _write(tmp_path, "a.go", text)

    assert encoder.encode(str(path), Selection(1), text).start == 0
    desc = encoder.encode(str(path), Selection(9), text)
    assert desc == PositionDescriptor(str(path.resolve()), 8)
    assert desc.format() == f"{path.resolve()}:8"


def test_range_applies_adjustment_to_both_endpoints(tmp_path, encoder):
    text = "package main\n\nfunc main() {}\n"
    path = _write(tmp_path, "a.go", text)
    start = text.index("func") + 1

    desc = encoder.encode(str(path), Selection(start, start + 4), text)

    assert (desc.start, desc.end) == (14, 18)
    assert desc.format().endswith(":14-18")
    assert text.encode()[desc.start:desc.end] == b"func"


def test_multibyte_characters_are_measured_in_bytes(tmp_path, encoder):
    text = 'var s = "héllo"\nfunc f() {}\n'
    path = _write(tmp_path, "m.go", text)
    start = text.index("func") + 1

    desc = encoder.encode(str(path), Selection(start, start + 4), text)

    assert start - 1 == 16
    assert desc.start == 17  # "é" takes two bytes
    assert path.read_bytes()[desc.start:desc.end] == b"func"


@pytest.mark.parametrize(
    "text",
    [
        "package main\n\nfunc main() { println(1) }\n",
        "// héllo wörld ✓\npackage main\nvar x = \"日本語\"\nfunc f() {}\n",
        "var e = \"😀\"\nfunc g() {}\n",
    ],
)
def test_encode_then_decode_recovers_character_range(tmp_path, encoder, text):
    path = _write(tmp_path, "r.go", text)
    start = text.index("func") + 1
    selection = Selection(start, start + len("func"))

    desc = encoder.encode(str(path), selection, text)

    assert encoder.decode_selection(text, desc) == selection
    assert encoder.decode(text, desc.start) == start


def test_reads_file_when_text_is_not_given(tmp_path, encoder):
    path = _write(tmp_path, "d.go", "ü\nx\n")
    assert encoder.encode(str(path), Selection(3)).start == 3


def test_crlf_on_disk_counts_two_bytes_per_line_break(tmp_path, encoder):
    path = tmp_path / "w.go"
    path.write_bytes(b"a\r\nb\r\nc\r\n")
    editor_text = "a\nb\nc\n"

    desc = encoder.encode(str(path), Selection(5), editor_text)

    assert desc.start == 6
    assert path.read_bytes()[desc.start:desc.start + 1] == b"c"


def test_position_is_clamped_to_document(tmp_path, encoder):
    path = _write(tmp_path, "c.go", "abc")
    assert encoder.encode(str(path), Selection(99), "abc").start == 3
    assert encoder.encode(str(path), Selection(0), "abc").start == 0


def test_reversed_range_is_normalized(tmp_path, encoder):
    path = _write(tmp_path, "n.go", "abcdef")
    desc = encoder.encode(str(path), Selection(5, 2), "abcdef")
    assert (desc.start, desc.end) == (1, 4)


def test_path_is_absolute_and_symlink_resolved(tmp_path):
    real = _write(tmp_path, "real.go", "package x\n")
    link = tmp_path / "link.go"
    os.symlink(real, link)
    assert canonical_file_path(str(link)) == str(real.resolve())


def test_utf16_positions_map_to_string_indexes():
    text = 'x := "😀"\ny'
    assert utf16_to_char_index(text, 0) == 0
    assert utf16_to_char_index(text, 10) == text.index("y")
    assert utf16_to_char_index(text, 1000) == len(text)


def test_mixed_line_endings_are_measured_per_break(tmp_path, encoder):
    path = tmp_path / "mixed.go"
    path.write_bytes(b"a\r\nb\nc\r\nd\n")
    editor_text = "a\nb\nc\nd\n"

    desc = encoder.encode(str(path), Selection(7), editor_text)

    assert desc.start == 8
    assert path.read_bytes()[desc.start:desc.start + 1] == b"d"


def test_offsets_follow_disk_when_editor_substitutes_characters(tmp_path, encoder):
    path = tmp_path / "sub.go"
    path.write_bytes("// a\u00a0b\nfunc f() {}\n".encode("utf-8"))
    editor_text = "// a b\nfunc f() {}\n"
    start = editor_text.index("func") + 1

    desc = encoder.encode(str(path), Selection(start, start + 4), editor_text)

    assert path.read_bytes()[desc.start:desc.end] == b"func"


def test_text_is_measured_directly_when_disk_disagrees(tmp_path, encoder):
    path = _write(tmp_path, "other.go", "x")
    assert encoder.encode(str(path), Selection(3), "héllo").start == 3
