#!/usr/bin/env python3
"""
Test memory routing: RAM, open bus, firmware, page accessors and peripheral regions
"""

import pytest

from conftest import build_image
from firmware import Firmware
from memory import OPEN_BUS, VIA1_BASE, VIA_SIZE, Memory
from utils import make_word


def test_basic_memory(memory):
    memory.write(0x0000, 0x42)
    memory.write(0x07FF, 0x99)
    assert memory.read(0x0000) == 0x42
    assert memory.read(0x07FF) == 0x99

    # Values are truncated to a byte
    memory.write(0x0010, 0x1AB)
    assert memory.read(0x0010) == 0xAB


def test_unmapped_reads_open_bus(memory):
    for addr in (0x0800, 0x1000, VIA1_BASE, 0x1C00, 0x8000, 0xBFFF):
        assert memory.read(addr) == OPEN_BUS
        memory.write(addr, 0x12)
        assert memory.read(addr) == OPEN_BUS


def test_ram_size_is_a_parameter():
    small = Memory(1024)
    small.write(0x03FF, 0x55)
    small.write(0x0400, 0x66)
    assert small.read(0x03FF) == 0x55
    assert small.read(0x0400) == OPEN_BUS

    with pytest.raises(ValueError):
        Memory(0x100)
    with pytest.raises(ValueError):
        Memory(0x2000)


def test_firmware_is_read_only():
    image = bytearray(build_image())
    image[0x0000] = 0xA9
    image[0x3FFF] = 0x5A
    memory = Memory()
    memory.set_firmware(Firmware(bytes(image)))

    assert memory.read(0xC000) == 0xA9
    assert memory.read(0xFFFF) == 0x5A
    memory.write(0xC000, 0x00)
    assert memory.read(0xC000) == 0xA9


def test_firmware_range_without_firmware():
    memory = Memory()
    assert memory.read(0xC000) == OPEN_BUS
    assert memory.read16(0xFFFC) == 0xFFFF


def test_read16_matches_byte_reads_across_boundaries():
    image = bytearray(build_image())
    image[0x0000] = 0x34
    image[0x3FFF] = 0xC7
    memory = Memory(2048)
    memory.set_firmware(Firmware(bytes(image)))
    memory.write(0x0000, 0x12)
    memory.write(0x07FE, 0xAA)
    memory.write(0x07FF, 0xBB)

    for addr in (0x0000, 0x07FE, 0x07FF, 0x0800, 0xBFFF, 0xC000, 0xFFFC, 0xFFFE, 0xFFFF):
        assert memory.read16(addr) == make_word(memory.read((addr + 1) & 0xFFFF), memory.read(addr))

    assert memory.read16(0x07FE) == 0xBBAA
    # RAM byte then open bus
    assert memory.read16(0x07FF) == 0xFFBB
    # Open bus then firmware
    assert memory.read16(0xBFFF) == 0x34FF
    # Wraps from the top of the firmware into RAM
    assert memory.read16(0xFFFF) == 0x12C7


def test_zero_page_accessors_wrap(memory):
    memory.write_zero_page(0x1FF, 0x77)
    assert memory.read(0x00FF) == 0x77
    assert memory.read(0x01FF) == 0x00

    memory.write(0x00FF, 0x34)
    memory.write(0x0000, 0x12)
    memory.write(0x0100, 0x99)
    assert memory.read_zero_page_16(0xFF) == 0x1234

    for offset in (0x00, 0x7F, 0xFF, 0x100, 0x17F):
        memory.write_zero_page(offset, 0xA0)
        assert memory.read(offset % 256) == 0xA0
        assert memory.read_zero_page(offset) == 0xA0


def test_stack_accessors_stay_in_page_one(memory):
    memory.write_stack(0x00, 0x11)
    memory.write_stack(0xFF, 0x22)
    memory.write_stack(0x101, 0x33)
    assert memory.read(0x0100) == 0x11
    assert memory.read(0x01FF) == 0x22
    assert memory.read(0x0101) == 0x33
    assert memory.read_stack(0x1FF) == 0x22
    assert memory.read(0x0200) == 0x00

    # High byte wraps to the bottom of the page
    assert memory.read_stack_16(0xFF) == 0x1122


def test_reset_clears_ram(memory):
    memory.write(0x0000, 0x01)
    memory.write(0x07FF, 0x02)
    memory.reset()
    assert all(b == 0 for b in memory.ram)
    assert len(memory.ram) == 2048


def test_peripheral_region_routing(memory):
    writes = []
    memory.map_region(
        "via1",
        VIA1_BASE,
        VIA1_BASE + VIA_SIZE - 1,
        read=lambda offset: 0x40 + offset,
        write=lambda offset, value: writes.append((offset, value)),
    )

    assert memory.read(VIA1_BASE + 5) == 0x45
    memory.write(VIA1_BASE + 2, 0x7E)
    assert writes == [(2, 0x7E)]
    # Outside the window stays open bus
    assert memory.read(VIA1_BASE + VIA_SIZE) == OPEN_BUS

    memory.unmap_region("via1")
    assert memory.read(VIA1_BASE + 5) == OPEN_BUS


def test_write_only_region_reads_open_bus(memory):
    memory.map_region("latch", 0x1000, 0x1000, write=lambda offset, value: None)
    assert memory.read(0x1000) == OPEN_BUS


def test_region_validation(memory):
    memory.map_region("via1", 0x1800, 0x180F)
    with pytest.raises(ValueError):
        memory.map_region("via1b", 0x1808, 0x1810)
    with pytest.raises(ValueError):
        memory.map_region("via1", 0x1C00, 0x1C0F)
    with pytest.raises(ValueError):
        memory.map_region("ram", 0x0400, 0x040F)
    with pytest.raises(ValueError):
        memory.map_region("rom", 0xBFF0, 0xC00F)
    with pytest.raises(ValueError):
        memory.map_region("backwards", 0x1C0F, 0x1C00)
    with pytest.raises(KeyError):
        memory.unmap_region("via2")
