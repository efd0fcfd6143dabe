import io

import pytest

from emodbuskit.logging_util import (
    LogLevel,
    file_name,
    format_hex_dump,
    get_log_level,
    hex_dump,
    log,
    set_log_level,
)


@pytest.fixture
def level():
    saved = get_log_level()
    yield
    set_log_level(saved)


def test_file_name_cuts_directories():
    assert file_name("src/sub/Logging.cpp") == "Logging.cpp"
    assert file_name("C:\\dir\\ModbusServer.cpp") == "ModbusServer.cpp"
    assert file_name("plain.cpp") == "plain.cpp"


def test_hex_dump_matches_documented_example():
    text = format_hex_dump("N", "Request before filter", bytes([4, 3, 0, 0, 0, 0x0C]), 0x3FFCFDD8)
    assert text == (
        "[N] Request before filter: @3FFCFDD8/6:\n"
        "  | 0000: 04 03 00 00 00 0C                                 |......          |\n"
    )


def test_hex_dump_response_example():
    text = format_hex_dump("N", "Response in filter", bytes([1, 0x84, 0xE0]), 0x3FFCFDC0)
    assert text.splitlines()[1] == (
        "  | 0000: 01 84 E0                                          |...             |"
    )


def test_hex_dump_line_layout():
    data = bytes(range(0x41, 0x41 + 17))
    lines = format_hex_dump("D", "x", data).splitlines(keepends=True)
    assert len(lines) == 3
    for line in lines[1:]:
        assert len(line) == 79
        assert line[60] == "|" and line[77] == "|" and line.endswith("\n")
    assert lines[1][61:77] == data[:16].decode()
    assert lines[2].startswith("  | 0010: ")
    assert lines[1][34] == " " and lines[1][35:37] == data[8:9].hex().upper()


def test_hex_dump_non_printable_become_dots():
    lines = format_hex_dump("V", "x", bytes([0x1F, 0x7F, 0x80, 0xFF])).splitlines()
    assert lines[1][61:65] == ".\x7f.."


def test_hex_dump_empty_has_header_only():
    assert format_hex_dump("E", "empty", b"", 0) == "[E] empty: @0/0:\n"


def test_hex_dump_respects_level(level):
    set_log_level(LogLevel.ERROR)
    out = io.StringIO()
    assert hex_dump("D", "lbl", b"\x01", LogLevel.DEBUG, out) is False
    assert out.getvalue() == ""
    assert hex_dump("N", "lbl", b"\x01", LogLevel.NONE, out) is True
    assert out.getvalue().startswith("[N] lbl: @")


def test_log_level_round_trip(level):
    set_log_level(LogLevel.VERBOSE)
    assert get_log_level() == LogLevel.VERBOSE


def test_log_filters_by_level(level):
    set_log_level(LogLevel.WARNING)
    out = io.StringIO()
    assert log(LogLevel.INFO, "hidden\n", out) is False
    assert out.getvalue() == ""


def test_log_critical_is_red(level):
    set_log_level(LogLevel.CRITICAL)
    out = io.StringIO()
    assert log(LogLevel.CRITICAL, "boom\n", out) is True
    text = out.getvalue()
    assert text.startswith("\x1b[1;31m[C] ")
    assert text.endswith("boom\n\x1b[0m")
    assert "test_logging_util.py" in text
    assert "test_log_critical_is_red: " in text


def test_log_error_is_yellow_and_warning_plain(level):
    set_log_level(LogLevel.WARNING)
    out = io.StringIO()
    log(LogLevel.ERROR, "e\n", out)
    assert out.getvalue().startswith("\x1b[1;33m[E] ")
    out = io.StringIO()
    log(LogLevel.WARNING, "w\n", out)
    assert out.getvalue().startswith("[W] ")
    assert "\x1b" not in out.getvalue()