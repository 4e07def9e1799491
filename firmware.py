"""
Drive Firmware Store
Holds the 16KB DOS ROM image mapped at $C000-$FFFF
"""

from utils import debug_print, make_word

FIRMWARE_SIZE = 0x4000  # 16KB
FIRMWARE_BASE = 0xC000
FIRMWARE_MASK = FIRMWARE_SIZE - 1

# Vector locations at the top of the address space
NMI_VECTOR = 0xFFFA
RESET_VECTOR = 0xFFFC
IRQ_VECTOR = 0xFFFE


class FirmwareError(ValueError):
    """Raised when a firmware image cannot be loaded"""


class Firmware:
    """Read-only firmware image, addressed by the low 14 bits of the address"""

    def __init__(self, data, source="<bytes>"):
        if len(data) != FIRMWARE_SIZE:
            raise FirmwareError(
                f"Firmware image {source} is {len(data)} bytes, expected {FIRMWARE_SIZE}"
            )
        self.data = bytes(data)
        self.source = source

    @classmethod
    def from_file(cls, path):
        """Load a raw 16384-byte ROM dump from disk"""
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            raise FirmwareError(f"Cannot read firmware image {path}: {e}") from e
        firmware = cls(data, source=str(path))
        debug_print(f"Firmware: loaded {path} ({len(data)} bytes)")
        return firmware

    def read_rom(self, address):
        return self.data[address & FIRMWARE_MASK]

    def vector(self, address):
        """Read a 16-bit little-endian vector stored in the image"""
        return make_word(self.read_rom(address + 1), self.read_rom(address))

    def __len__(self):
        return FIRMWARE_SIZE

    def __repr__(self):
        return f"Firmware(source={self.source!r})"
