"""
Drive Memory Management
Routes CPU reads and writes to RAM, peripheral regions and the firmware image
"""

from firmware import FIRMWARE_BASE
from utils import debug_print, make_word

OPEN_BUS = 0xFF  # Disconnected addresses read back all ones

STACK_BASE = 0x0100
MIN_RAM_SIZE = 0x0200  # Zero page + stack page

# 6522 VIA windows on the drive board (not mapped unless a region is registered)
VIA1_BASE = 0x1800
VIA2_BASE = 0x1C00
VIA_SIZE = 16


class Region:
    """A named peripheral window in the address space (inclusive bounds)"""

    def __init__(self, name, start, end, read=None, write=None):
        self.name = name
        self.start = start
        self.end = end
        self.read = read  # read(offset) -> int
        self.write = write  # write(offset, value) -> None

    def contains(self, addr):
        return self.start <= addr <= self.end

    def overlaps(self, start, end):
        return start <= self.end and end >= self.start

    def __repr__(self):
        return f"Region({self.name!r}, ${self.start:04X}-${self.end:04X})"


class Memory:
    def __init__(self, ram_size=2048):
        if not MIN_RAM_SIZE <= ram_size <= VIA1_BASE:
            raise ValueError(
                f"RAM size {ram_size} out of range (${MIN_RAM_SIZE:04X}-${VIA1_BASE:04X})"
            )
        self.ram_size = ram_size
        self.ram = bytearray(ram_size)
        self.firmware = None  # Firmware reference
        self.regions = []

    def set_firmware(self, firmware):
        """Set the firmware reference"""
        self.firmware = firmware

    def reset(self):
        """Clear all RAM"""
        self.ram[:] = bytes(self.ram_size)

    # ------------------------ Region Helpers ------------------------
    def map_region(self, name, start, end, read=None, write=None):
        """Register a peripheral window between RAM and the firmware"""
        if start > end:
            raise ValueError(f"Region {name!r}: start ${start:04X} after end ${end:04X}")
        if start < self.ram_size or end >= FIRMWARE_BASE:
            raise ValueError(
                f"Region {name!r} ${start:04X}-${end:04X} overlaps RAM or firmware"
            )
        for region in self.regions:
            if region.name == name:
                raise ValueError(f"Region {name!r} already mapped")
            if region.overlaps(start, end):
                raise ValueError(f"Region {name!r} overlaps {region!r}")
        region = Region(name, start, end, read, write)
        self.regions.append(region)
        debug_print(f"Memory: mapped {region!r}")
        return region

    def unmap_region(self, name):
        for i, region in enumerate(self.regions):
            if region.name == name:
                del self.regions[i]
                debug_print(f"Memory: unmapped {region!r}")
                return
        raise KeyError(name)

    def _find_region(self, addr):
        for region in self.regions:
            if region.contains(addr):
                return region
        return None

    # ------------------------ CPU Bus ------------------------
    def read(self, addr):
        """Read from CPU memory"""
        addr = addr & 0xFFFF

        if addr < self.ram_size:
            return self.ram[addr]
        elif addr >= FIRMWARE_BASE:
            if self.firmware is None:
                return OPEN_BUS
            return self.firmware.read_rom(addr)

        region = self._find_region(addr)
        if region is not None and region.read is not None:
            return region.read(addr - region.start) & 0xFF
        # Unmapped
        return OPEN_BUS

    def read16(self, addr):
        """Read a little-endian word; each byte comes from its own backing store"""
        addr = addr & 0xFFFF

        if addr < self.ram_size - 1:
            return make_word(self.ram[addr + 1], self.ram[addr])
        elif FIRMWARE_BASE <= addr < 0xFFFF and self.firmware is not None:
            rom = self.firmware
            return make_word(rom.read_rom(addr + 1), rom.read_rom(addr))
        # Straddles a boundary or wraps past $FFFF
        return make_word(self.read(addr + 1), self.read(addr))

    def write(self, addr, value):
        """Write to CPU memory"""
        addr = addr & 0xFFFF
        value = value & 0xFF

        if addr < self.ram_size:
            self.ram[addr] = value
            return
        if addr >= FIRMWARE_BASE:
            # Firmware is read-only
            return

        region = self._find_region(addr)
        if region is not None and region.write is not None:
            region.write(addr - region.start, value)
        # otherwise nothing happens

    # ------------------------ Page Accessors ------------------------
    def read_zero_page(self, offset):
        return self.ram[offset & 0xFF]

    def read_zero_page_16(self, offset):
        offset = offset & 0xFF
        return make_word(self.ram[(offset + 1) & 0xFF], self.ram[offset])

    def write_zero_page(self, offset, value):
        self.ram[offset & 0xFF] = value & 0xFF

    def read_stack(self, offset):
        return self.ram[STACK_BASE + (offset & 0xFF)]

    def read_stack_16(self, offset):
        offset = offset & 0xFF
        return make_word(
            self.ram[STACK_BASE + ((offset + 1) & 0xFF)], self.ram[STACK_BASE + offset]
        )

    def write_stack(self, offset, value):
        self.ram[STACK_BASE + (offset & 0xFF)] = value & 0xFF
