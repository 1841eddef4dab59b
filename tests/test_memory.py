import pytest

from notch8.constants import FONT_LOAD, LOAD_POS, TOTAL_RAM
from notch8.errors import MemoryOutOfBounds, RomLoadError
from notch8.memory import Memory


def test_font_is_loaded():
    memory = Memory()
    assert memory.read_block(FONT_LOAD, 5) == bytes([0xF0, 0x90, 0x90, 0x90, 0xF0])
    # F is the last glyph
    assert memory.read_block(memory.glyph_address(0xF), 5) == bytes([0xF0, 0x80, 0xF0, 0x80, 0x80])


def test_glyph_address():
    memory = Memory()
    assert memory.glyph_address(0) == FONT_LOAD
    assert memory.glyph_address(0xA) == FONT_LOAD + 50
    with pytest.raises(ValueError):
        memory.glyph_address(16)


def test_read_write():
    memory = Memory()
    memory.write(0x300, 0x1FF)
    assert memory.read(0x300) == 0xFF
    memory.write(0xFFF, 7)
    assert memory.read(0xFFF) == 7


@pytest.mark.parametrize("addr", [-1, TOTAL_RAM, 0x1234])
def test_out_of_bounds(addr):
    memory = Memory()
    with pytest.raises(MemoryOutOfBounds) as e:
        memory.read(addr)
    assert e.value.address == addr
    with pytest.raises(MemoryOutOfBounds):
        memory.write(addr, 0)


def test_instruction_word_is_big_endian():
    memory = Memory()
    memory.load(bytes([0x12, 0x34]))
    assert memory.read_instruction_word(LOAD_POS) == 0x1234


def test_instruction_word_past_the_end():
    memory = Memory()
    memory.read_instruction_word(0xFFE)
    with pytest.raises(MemoryOutOfBounds):
        memory.read_instruction_word(0xFFF)


def test_read_block_wraps():
    memory = Memory()
    memory.write(0xFFF, 0xAA)
    memory.write(0x000, 0xBB)
    assert memory.read_block(0xFFF, 2) == bytes([0xAA, 0xBB])


def test_load():
    memory = Memory()
    memory.load(b"\x60\x0a\x61\x05")
    assert memory.ram[LOAD_POS:LOAD_POS + 4] == b"\x60\x0a\x61\x05"
    # Everything after the program stays clear
    assert memory.read(LOAD_POS + 4) == 0


def test_load_fills_program_space():
    memory = Memory()
    memory.load(bytes([1]) * (TOTAL_RAM - LOAD_POS))
    assert memory.read(0xFFF) == 1


def test_load_too_large():
    memory = Memory()
    with pytest.raises(RomLoadError) as e:
        memory.load(bytes(TOTAL_RAM - LOAD_POS + 1), name="big.ch8")
    assert e.value.path == "big.ch8"


def test_dump():
    memory = Memory()
    memory.load(b"\x60\x0a")
    assert memory.dump(LOAD_POS, 4) == "0200: 60 0a 00 00"
