"""Tests for the command line host."""

import pytest
from chip8vm.cli import EXIT_FAULT, EXIT_LOAD_ERROR, EXIT_OK, KEY_LAYOUT, build_parser, main
from chip8vm.constants import MAX_ROM_SIZE
from conftest import rom


@pytest.fixture
def rom_file(tmp_path):
    def write(data):
        path = tmp_path / "test.ch8"
        path.write_bytes(data)
        return str(path)
    return write


def test_parser_defaults():
    args = build_parser().parse_args(["game.ch8"])
    assert args.rom == "game.ch8"
    assert args.scale == 10
    assert args.ipf == 10
    assert args.color_scheme == "classic"
    assert not args.headless


def test_key_layout_covers_keypad():
    assert sorted(KEY_LAYOUT.values()) == list(range(16))


def test_missing_rom(tmp_path, capsys):
    code = main([str(tmp_path / "missing.ch8"), "--headless"])
    assert code == EXIT_LOAD_ERROR
    assert "Unable to read ROM" in capsys.readouterr().out


def test_rom_too_large(rom_file, capsys):
    code = main([rom_file(bytes(MAX_ROM_SIZE + 1)), "--headless"])
    assert code == EXIT_LOAD_ERROR
    assert "Unable to load ROM" in capsys.readouterr().out


def test_unknown_color_scheme(rom_file):
    assert main([rom_file(rom(0x1200)), "--color-scheme", "sepia"]) == EXIT_LOAD_ERROR


def test_headless_run(rom_file, capsys):
    code = main([rom_file(rom(0x6007, 0x1202)), "--headless", "--steps", "5"])
    assert code == EXIT_OK
    out = capsys.readouterr().out
    assert "PC=0x202" in out
    assert "V0=07" in out


def test_headless_fault(rom_file, capsys):
    code = main([rom_file(rom(0x00EE)), "--headless", "--steps", "5"])
    assert code == EXIT_FAULT
    assert "Machine halted" in capsys.readouterr().out
