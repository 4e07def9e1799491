"""
Main Drive Emulator Class
Coordinates the firmware image, memory and CPU of the disk drive
"""

import time

from cpu import CPU
from drive_config import CPU_CONFIG, MEMORY_CONFIG
from firmware import Firmware, FirmwareError
from memory import Memory
from utils import debug_print


class Drive:
    def __init__(self, ram_size=None):
        if ram_size is None:
            ram_size = MEMORY_CONFIG["ram_size"]

        # Initialize components
        self.memory = Memory(ram_size)
        self.cpu = CPU(self.memory)
        self.firmware = None

        # Timing
        self.cpu_cycles = 0

    def load_firmware(self, source):
        """Load a firmware image from a path or raw bytes and reset the CPU.
        Returns True on success, False on failure.
        """
        try:
            if isinstance(source, (bytes, bytearray, memoryview)):
                firmware = Firmware(source)
            else:
                firmware = Firmware.from_file(source)
        except FirmwareError as e:
            debug_print(f"Drive: Failed to load firmware: {e}")
            return False

        self.firmware = firmware
        self.memory.set_firmware(firmware)
        self.reset()
        debug_print(f"Drive: Firmware {firmware.source} loaded, PC=0x{self.cpu.PC:04X}")
        return True

    def reset(self):
        """Power-on reset of RAM and CPU"""
        self.cpu.reset()
        self.cpu_cycles = 0

    def run(self, cycles):
        """Run one CPU slice; returns cycles actually consumed"""
        start = self.cpu.total_cycles
        try:
            return self.cpu.run(cycles)
        finally:
            # Count a partial slice too when the CPU faults mid-slice
            self.cpu_cycles += self.cpu.total_cycles - start

    def irq(self):
        consumed = self.cpu.irq()
        self.cpu_cycles += consumed
        return consumed

    def nmi(self):
        consumed = self.cpu.nmi()
        self.cpu_cycles += consumed
        return consumed

    def run_for_seconds(
        self,
        seconds,
        clock_hz=None,
        slice_cycles=None,
        realtime=True,
        clock=time.perf_counter,
        sleep=time.sleep,
    ):
        """Run the emulated clock for a span of emulated time in slices.

        With realtime set, sleeps whenever emulation gets ahead of wall time.
        """
        if clock_hz is None:
            clock_hz = CPU_CONFIG["clock_hz"]
        if slice_cycles is None:
            slice_cycles = CPU_CONFIG["slice_cycles"]
        if slice_cycles <= 0:
            raise ValueError(f"slice_cycles must be positive, got {slice_cycles}")

        target = int(seconds * clock_hz)
        consumed = 0
        start = clock()
        while consumed < target:
            consumed += self.run(min(slice_cycles, target - consumed))
            if realtime:
                ahead = consumed / clock_hz - (clock() - start)
                if ahead > 0:
                    sleep(ahead)
        return consumed

    def trace_line(self):
        return self.cpu.format_state()

    def get_cpu_state(self):
        """Get CPU state for debugging"""
        return {
            "A": self.cpu.A,
            "X": self.cpu.X,
            "Y": self.cpu.Y,
            "PC": self.cpu.PC,
            "S": self.cpu.S,
            "P": self.cpu.get_status_byte(),
            "C": self.cpu.C,
            "Z": self.cpu.Z,
            "I": self.cpu.I,
            "D": self.cpu.D,
            "V": self.cpu.V,
            "N": self.cpu.N,
            "cycles": self.cpu_cycles,
        }
