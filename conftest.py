import pytest

from cpu import CPU
from firmware import FIRMWARE_SIZE, Firmware
from memory import Memory

RESET_TARGET = 0xC000
IRQ_TARGET = 0xE000
NMI_TARGET = 0xF000


def build_image(code=b"", origin=RESET_TARGET, reset=RESET_TARGET, irq=IRQ_TARGET, nmi=NMI_TARGET):
    """16KB firmware image with code at origin and the three vectors filled in"""
    image = bytearray(FIRMWARE_SIZE)
    start = origin & 0x3FFF
    image[start:start + len(code)] = code
    for offset, target in ((0x3FFA, nmi), (0x3FFC, reset), (0x3FFE, irq)):
        image[offset] = target & 0xFF
        image[offset + 1] = target >> 8
    return bytes(image)


@pytest.fixture
def make_image():
    return build_image


@pytest.fixture
def memory():
    memory = Memory(2048)
    memory.set_firmware(Firmware(build_image()))
    return memory


@pytest.fixture
def cpu(memory):
    cpu = CPU(memory)
    cpu.reset()
    return cpu
