import pytest

from notch8 import __version__
from notch8 import cli

from unit_utils import words


@pytest.fixture
def rom(tmp_path):
    def _rom(data, name="game.ch8"):
        path = tmp_path / name
        path.write_bytes(data)
        return str(path)
    yield _rom


def test_missing_program_is_a_usage_error(capsys):
    assert cli.main([]) == cli.EXIT_USAGE
    err = capsys.readouterr().err
    assert err.startswith("usage: notch8")
    assert "required" in err


def test_version(capsys):
    with pytest.raises(SystemExit) as e:
        cli.main(["--version"])
    assert e.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_short_help(capsys):
    with pytest.raises(SystemExit) as e:
        cli.main(["-h"])
    assert e.value.code == 0
    assert "--breakpoint" in capsys.readouterr().out


def test_missing_rom_file(tmp_path):
    assert cli.main([str(tmp_path / "nothing.ch8")]) == cli.EXIT_ROM


def test_empty_rom_file(rom):
    assert cli.main([rom(b"")]) == cli.EXIT_ROM


def test_rom_too_large(rom):
    assert cli.main([rom(bytes(4000)), "--headless", "--cycles", "1"]) == cli.EXIT_ROM


def test_disassemble(rom, capsys):
    assert cli.main([rom(words(0x600A, 0x8014)), "--disassemble"]) == cli.EXIT_OK
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "0200 | 600a - LD V0, 0a",
        "0202 | 8014 - ADD V0, V1",
    ]


def test_headless_run_prints_state(rom, capsys):
    path = rom(bytes([0x60, 0x0A, 0x61, 0x05, 0x80, 0x14, 0x12, 0x06]))
    assert cli.main([path, "--headless", "--speed", "0", "--cycles", "3"]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "V0: 0x0f" in out
    assert "PC: 0x0206" in out
    assert "." * 64 in out


def test_fault_exit_code(rom, caplog):
    path = rom(words(0x0123))
    assert cli.main([path, "--headless", "--speed", "0", "--cycles", "5"]) == cli.EXIT_FAULT
    assert "Invalid instruction 0x0123 at 0x0200" in caplog.text
    assert "Machine state" in caplog.text


def test_breakpoint_addresses_parse_as_hex():
    args = cli.aparser.parse_args(["game.ch8", "--breakpoint", "0x2a4", "0x300"])
    assert args.breakpoint == [0x2A4, 0x300]
    assert args.speed == 500
    assert not args.shift_vy
