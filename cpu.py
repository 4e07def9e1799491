"""
Drive 6502 CPU Emulator
Implements the documented MOS 6502/6510 instruction set as run by the drive firmware
Cycle costs follow the standard instruction reference table
"""

from dataclasses import dataclass

from firmware import IRQ_VECTOR, NMI_VECTOR, RESET_VECTOR
from utils import debug_print, hi_byte, lo_byte

# Status register bits
FLAG_C = 0x01
FLAG_Z = 0x02
FLAG_I = 0x04
FLAG_D = 0x08
FLAG_B = 0x10
FLAG_U = 0x20  # Unused, always reads as 1
FLAG_V = 0x40
FLAG_N = 0x80

INTERRUPT_CYCLES = 7

# Width of CPU.format_state() output, e.g. "PC:C000 A:00 X:00 Y:00 S:FD P:24 nv-bdIzc"
TRACE_LINE_WIDTH = 41

# opcode: (mnemonic, addressing mode, length, base cycles)
INSTRUCTIONS = {
    # Load/Store
    0xA9: ("LDA", "immediate", 2, 2),
    0xA5: ("LDA", "zero_page", 2, 3),
    0xB5: ("LDA", "zero_page_x", 2, 4),
    0xAD: ("LDA", "absolute", 3, 4),
    0xBD: ("LDA", "absolute_x", 3, 4),
    0xB9: ("LDA", "absolute_y", 3, 4),
    0xA1: ("LDA", "indexed_indirect", 2, 6),
    0xB1: ("LDA", "indirect_indexed", 2, 5),
    0xA2: ("LDX", "immediate", 2, 2),
    0xA6: ("LDX", "zero_page", 2, 3),
    0xB6: ("LDX", "zero_page_y", 2, 4),
    0xAE: ("LDX", "absolute", 3, 4),
    0xBE: ("LDX", "absolute_y", 3, 4),
    0xA0: ("LDY", "immediate", 2, 2),
    0xA4: ("LDY", "zero_page", 2, 3),
    0xB4: ("LDY", "zero_page_x", 2, 4),
    0xAC: ("LDY", "absolute", 3, 4),
    0xBC: ("LDY", "absolute_x", 3, 4),
    0x85: ("STA", "zero_page", 2, 3),
    0x95: ("STA", "zero_page_x", 2, 4),
    0x8D: ("STA", "absolute", 3, 4),
    0x9D: ("STA", "absolute_x", 3, 5),
    0x99: ("STA", "absolute_y", 3, 5),
    0x81: ("STA", "indexed_indirect", 2, 6),
    0x91: ("STA", "indirect_indexed", 2, 6),
    0x86: ("STX", "zero_page", 2, 3),
    0x96: ("STX", "zero_page_y", 2, 4),
    0x8E: ("STX", "absolute", 3, 4),
    0x84: ("STY", "zero_page", 2, 3),
    0x94: ("STY", "zero_page_x", 2, 4),
    0x8C: ("STY", "absolute", 3, 4),
    # Transfer
    0xAA: ("TAX", "implied", 1, 2),
    0xA8: ("TAY", "implied", 1, 2),
    0xBA: ("TSX", "implied", 1, 2),
    0x8A: ("TXA", "implied", 1, 2),
    0x9A: ("TXS", "implied", 1, 2),
    0x98: ("TYA", "implied", 1, 2),
    # Stack
    0x48: ("PHA", "implied", 1, 3),
    0x68: ("PLA", "implied", 1, 4),
    0x08: ("PHP", "implied", 1, 3),
    0x28: ("PLP", "implied", 1, 4),
    # Arithmetic
    0x69: ("ADC", "immediate", 2, 2),
    0x65: ("ADC", "zero_page", 2, 3),
    0x75: ("ADC", "zero_page_x", 2, 4),
    0x6D: ("ADC", "absolute", 3, 4),
    0x7D: ("ADC", "absolute_x", 3, 4),
    0x79: ("ADC", "absolute_y", 3, 4),
    0x61: ("ADC", "indexed_indirect", 2, 6),
    0x71: ("ADC", "indirect_indexed", 2, 5),
    0xE9: ("SBC", "immediate", 2, 2),
    0xE5: ("SBC", "zero_page", 2, 3),
    0xF5: ("SBC", "zero_page_x", 2, 4),
    0xED: ("SBC", "absolute", 3, 4),
    0xFD: ("SBC", "absolute_x", 3, 4),
    0xF9: ("SBC", "absolute_y", 3, 4),
    0xE1: ("SBC", "indexed_indirect", 2, 6),
    0xF1: ("SBC", "indirect_indexed", 2, 5),
    # Logic
    0x29: ("AND", "immediate", 2, 2),
    0x25: ("AND", "zero_page", 2, 3),
    0x35: ("AND", "zero_page_x", 2, 4),
    0x2D: ("AND", "absolute", 3, 4),
    0x3D: ("AND", "absolute_x", 3, 4),
    0x39: ("AND", "absolute_y", 3, 4),
    0x21: ("AND", "indexed_indirect", 2, 6),
    0x31: ("AND", "indirect_indexed", 2, 5),
    0x49: ("EOR", "immediate", 2, 2),
    0x45: ("EOR", "zero_page", 2, 3),
    0x55: ("EOR", "zero_page_x", 2, 4),
    0x4D: ("EOR", "absolute", 3, 4),
    0x5D: ("EOR", "absolute_x", 3, 4),
    0x59: ("EOR", "absolute_y", 3, 4),
    0x41: ("EOR", "indexed_indirect", 2, 6),
    0x51: ("EOR", "indirect_indexed", 2, 5),
    0x09: ("ORA", "immediate", 2, 2),
    0x05: ("ORA", "zero_page", 2, 3),
    0x15: ("ORA", "zero_page_x", 2, 4),
    0x0D: ("ORA", "absolute", 3, 4),
    0x1D: ("ORA", "absolute_x", 3, 4),
    0x19: ("ORA", "absolute_y", 3, 4),
    0x01: ("ORA", "indexed_indirect", 2, 6),
    0x11: ("ORA", "indirect_indexed", 2, 5),
    # Shift/Rotate
    0x0A: ("ASL", "accumulator", 1, 2),
    0x06: ("ASL", "zero_page", 2, 5),
    0x16: ("ASL", "zero_page_x", 2, 6),
    0x0E: ("ASL", "absolute", 3, 6),
    0x1E: ("ASL", "absolute_x", 3, 7),
    0x4A: ("LSR", "accumulator", 1, 2),
    0x46: ("LSR", "zero_page", 2, 5),
    0x56: ("LSR", "zero_page_x", 2, 6),
    0x4E: ("LSR", "absolute", 3, 6),
    0x5E: ("LSR", "absolute_x", 3, 7),
    0x2A: ("ROL", "accumulator", 1, 2),
    0x26: ("ROL", "zero_page", 2, 5),
    0x36: ("ROL", "zero_page_x", 2, 6),
    0x2E: ("ROL", "absolute", 3, 6),
    0x3E: ("ROL", "absolute_x", 3, 7),
    0x6A: ("ROR", "accumulator", 1, 2),
    0x66: ("ROR", "zero_page", 2, 5),
    0x76: ("ROR", "zero_page_x", 2, 6),
    0x6E: ("ROR", "absolute", 3, 6),
    0x7E: ("ROR", "absolute_x", 3, 7),
    # Compare
    0xC9: ("CMP", "immediate", 2, 2),
    0xC5: ("CMP", "zero_page", 2, 3),
    0xD5: ("CMP", "zero_page_x", 2, 4),
    0xCD: ("CMP", "absolute", 3, 4),
    0xDD: ("CMP", "absolute_x", 3, 4),
    0xD9: ("CMP", "absolute_y", 3, 4),
    0xC1: ("CMP", "indexed_indirect", 2, 6),
    0xD1: ("CMP", "indirect_indexed", 2, 5),
    0xE0: ("CPX", "immediate", 2, 2),
    0xE4: ("CPX", "zero_page", 2, 3),
    0xEC: ("CPX", "absolute", 3, 4),
    0xC0: ("CPY", "immediate", 2, 2),
    0xC4: ("CPY", "zero_page", 2, 3),
    0xCC: ("CPY", "absolute", 3, 4),
    # Bit Test
    0x24: ("BIT", "zero_page", 2, 3),
    0x2C: ("BIT", "absolute", 3, 4),
    # Increment/Decrement
    0xE6: ("INC", "zero_page", 2, 5),
    0xF6: ("INC", "zero_page_x", 2, 6),
    0xEE: ("INC", "absolute", 3, 6),
    0xFE: ("INC", "absolute_x", 3, 7),
    0xE8: ("INX", "implied", 1, 2),
    0xC8: ("INY", "implied", 1, 2),
    0xC6: ("DEC", "zero_page", 2, 5),
    0xD6: ("DEC", "zero_page_x", 2, 6),
    0xCE: ("DEC", "absolute", 3, 6),
    0xDE: ("DEC", "absolute_x", 3, 7),
    0xCA: ("DEX", "implied", 1, 2),
    0x88: ("DEY", "implied", 1, 2),
    # Branches
    0x10: ("BPL", "relative", 2, 2),
    0x30: ("BMI", "relative", 2, 2),
    0x50: ("BVC", "relative", 2, 2),
    0x70: ("BVS", "relative", 2, 2),
    0x90: ("BCC", "relative", 2, 2),
    0xB0: ("BCS", "relative", 2, 2),
    0xD0: ("BNE", "relative", 2, 2),
    0xF0: ("BEQ", "relative", 2, 2),
    # Jumps/Calls
    0x4C: ("JMP", "absolute", 3, 3),
    0x6C: ("JMP", "indirect", 3, 5),
    0x20: ("JSR", "absolute", 3, 6),
    0x60: ("RTS", "implied", 1, 6),
    # Interrupts
    0x00: ("BRK", "implied", 1, 7),
    0x40: ("RTI", "implied", 1, 6),
    # Flags
    0x18: ("CLC", "implied", 1, 2),
    0x38: ("SEC", "implied", 1, 2),
    0x58: ("CLI", "implied", 1, 2),
    0x78: ("SEI", "implied", 1, 2),
    0xB8: ("CLV", "implied", 1, 2),
    0xD8: ("CLD", "implied", 1, 2),
    0xF8: ("SED", "implied", 1, 2),
    # No Operation
    0xEA: ("NOP", "implied", 1, 2),
}

# Read instructions pay one extra cycle when an indexed address crosses a page
PAGE_PENALTY_INSTRUCTIONS = frozenset(
    ["LDA", "LDX", "LDY", "EOR", "AND", "ORA", "ADC", "SBC", "CMP"]
)


class IllegalOpcodeError(RuntimeError):
    """Raised when the CPU fetches an opcode outside the documented set"""

    def __init__(self, opcode, pc):
        super().__init__(f"Illegal opcode ${opcode:02X} at ${pc:04X}")
        self.opcode = opcode
        self.pc = pc


class FirmwareNotLoadedError(RuntimeError):
    """Raised when the CPU is reset or run before firmware is attached"""


@dataclass(frozen=True)
class CPUState:
    pc: int
    a: int
    x: int
    y: int
    s: int
    p: int


def format_state(state):
    """Fixed-width trace line for a CPUState"""
    flags = "".join(
        "-" if bit == FLAG_U else (name.upper() if state.p & bit else name)
        for name, bit in (
            ("n", FLAG_N),
            ("v", FLAG_V),
            ("-", FLAG_U),
            ("b", FLAG_B),
            ("d", FLAG_D),
            ("i", FLAG_I),
            ("z", FLAG_Z),
            ("c", FLAG_C),
        )
    )
    return (
        f"PC:{state.pc & 0xFFFF:04X} A:{state.a & 0xFF:02X} X:{state.x & 0xFF:02X} "
        f"Y:{state.y & 0xFF:02X} S:{state.s & 0xFF:02X} P:{state.p & 0xFF:02X} {flags}"
    )


class CPU:
    def __init__(self, memory):
        self.memory = memory

        # Registers
        self.A = 0  # Accumulator
        self.X = 0  # X Register
        self.Y = 0  # Y Register
        self.PC = 0  # Program Counter
        self.S = 0xFD  # Stack Pointer

        # Status flags (P register); B only exists in pushed copies
        self.C = 0  # Carry flag
        self.Z = 0  # Zero flag
        self.I = 1  # Interrupt disable
        self.D = 0  # Decimal mode
        self.V = 0  # Overflow flag
        self.N = 0  # Negative flag

        # Cycle tracking
        self.total_cycles = 0

        self.instruction_dispatch = {
            opcode: getattr(self, f"execute_{entry[0].lower()}")
            for opcode, entry in INSTRUCTIONS.items()
        }

    def _require_firmware(self):
        if self.memory.firmware is None:
            raise FirmwareNotLoadedError("CPU cannot start before firmware is loaded")

    def reset(self):
        """Reset the CPU and RAM to the power-on state"""
        self._require_firmware()
        self.memory.reset()

        self.A = 0
        self.X = 0
        self.Y = 0
        self.S = 0xFD
        self.C = 0
        self.Z = 0
        self.I = 1
        self.D = 0
        self.V = 0
        self.N = 0

        self.PC = self.memory.firmware.vector(RESET_VECTOR)
        self.total_cycles = 0
        debug_print(f"CPU: Reset complete, PC=0x{self.PC:04X}")

    def run(self, cycles):
        """Execute whole instructions until the cycle budget is spent.

        The last instruction may overshoot the budget; the return value is the
        number of cycles actually consumed so the host can pace itself.
        """
        self._require_firmware()
        consumed = 0
        while consumed < cycles:
            consumed += self.run_instruction()
        return consumed

    def run_instruction(self):
        """Execute one complete instruction - returns total cycles consumed"""
        opcode_pc = self.PC
        opcode = self.memory.read(self.PC)
        self.PC = (self.PC + 1) & 0xFFFF

        entry = INSTRUCTIONS.get(opcode)
        if entry is None:
            self.PC = opcode_pc
            debug_print(f"CPU: Illegal opcode 0x{opcode:02X} at PC=0x{opcode_pc:04X}")
            raise IllegalOpcodeError(opcode, opcode_pc)

        instruction, addressing_mode, _, base_cycles = entry
        address, page_crossing_penalty = self._get_address(addressing_mode, instruction)

        extra_cycles = self.instruction_dispatch[opcode](address, addressing_mode)
        if extra_cycles is None:
            extra_cycles = 0

        total_cycles = base_cycles + extra_cycles + page_crossing_penalty
        self.total_cycles += total_cycles
        return total_cycles

    def _page_crossed(self, addr1, addr2):
        """Check if two addresses are on different pages"""
        return (addr1 & 0xFF00) != (addr2 & 0xFF00)

    def _fetch_byte(self):
        value = self.memory.read(self.PC)
        self.PC = (self.PC + 1) & 0xFFFF
        return value

    def _fetch_word(self):
        value = self.memory.read16(self.PC)
        self.PC = (self.PC + 2) & 0xFFFF
        return value

    def _indexed(self, base_addr, index, instruction):
        final_addr = (base_addr + index) & 0xFFFF
        if (
            instruction in PAGE_PENALTY_INSTRUCTIONS
            and self._page_crossed(base_addr, final_addr)
        ):
            return final_addr, 1
        return final_addr, 0

    def _get_address(self, addressing_mode, instruction):
        """Resolve the operand address and any page crossing penalty"""
        if addressing_mode == "implied" or addressing_mode == "accumulator":
            return None, 0
        elif addressing_mode == "immediate":
            addr = self.PC
            self.PC = (self.PC + 1) & 0xFFFF
            return addr, 0
        elif addressing_mode == "zero_page":
            return self._fetch_byte(), 0
        elif addressing_mode == "zero_page_x":
            return (self._fetch_byte() + self.X) & 0xFF, 0
        elif addressing_mode == "zero_page_y":
            return (self._fetch_byte() + self.Y) & 0xFF, 0
        elif addressing_mode == "absolute":
            return self._fetch_word(), 0
        elif addressing_mode == "absolute_x":
            return self._indexed(self._fetch_word(), self.X, instruction)
        elif addressing_mode == "absolute_y":
            return self._indexed(self._fetch_word(), self.Y, instruction)
        elif addressing_mode == "relative":
            offset = self._fetch_byte()
            if offset & 0x80:  # Negative
                offset = offset - 256
            return (self.PC + offset) & 0xFFFF, 0
        elif addressing_mode == "indirect":
            addr = self._fetch_word()
            # 6502 bug: the high byte is fetched without carrying into the next page
            low = self.memory.read(addr)
            high = self.memory.read((addr & 0xFF00) | ((addr + 1) & 0xFF))
            return (high << 8) | low, 0
        elif addressing_mode == "indexed_indirect":
            pointer = (self._fetch_byte() + self.X) & 0xFF
            return self.memory.read_zero_page_16(pointer), 0
        elif addressing_mode == "indirect_indexed":
            base_addr = self.memory.read_zero_page_16(self._fetch_byte())
            return self._indexed(base_addr, self.Y, instruction)

        raise ValueError(f"Unknown addressing mode: {addressing_mode}")

    # ------------------------ Interrupts ------------------------
    def _interrupt(self, vector_addr, status):
        self.push_stack(hi_byte(self.PC))  # High byte first
        self.push_stack(lo_byte(self.PC))
        self.push_stack(status)
        self.I = 1
        self.PC = self.memory.read16(vector_addr)

    def irq(self):
        """Maskable interrupt - ignored while I is set. Returns cycles consumed."""
        if self.I:
            return 0
        old_pc = self.PC
        self._interrupt(IRQ_VECTOR, (self.get_status_byte() & ~FLAG_B) | FLAG_U)
        self.total_cycles += INTERRUPT_CYCLES
        debug_print(f"CPU: IRQ, PC 0x{old_pc:04X} -> 0x{self.PC:04X}")
        return INTERRUPT_CYCLES

    def nmi(self):
        """Non-maskable interrupt. Returns cycles consumed."""
        old_pc = self.PC
        self._interrupt(NMI_VECTOR, (self.get_status_byte() & ~FLAG_B) | FLAG_U)
        self.total_cycles += INTERRUPT_CYCLES
        debug_print(f"CPU: NMI, PC 0x{old_pc:04X} -> 0x{self.PC:04X}")
        return INTERRUPT_CYCLES

    # ------------------------ State ------------------------
    def get_status_byte(self):
        """Get the status register as a byte"""
        return (
            (self.N << 7)
            | (self.V << 6)
            | FLAG_U
            | (self.D << 3)
            | (self.I << 2)
            | (self.Z << 1)
            | self.C
        )

    def set_status_byte(self, value):
        """Set the status register from a byte (bits 4 and 5 are ignored)"""
        self.N = (value >> 7) & 1
        self.V = (value >> 6) & 1
        self.D = (value >> 3) & 1
        self.I = (value >> 2) & 1
        self.Z = (value >> 1) & 1
        self.C = value & 1

    def get_pc(self):
        return self.PC

    def get_registers(self):
        """Packed snapshot: A in bits 0-7, X 8-15, Y 16-23, S 24-31, P 32-39"""
        return (
            self.A
            | (self.X << 8)
            | (self.Y << 16)
            | (self.S << 24)
            | (self.get_status_byte() << 32)
        )

    def get_state(self):
        return CPUState(
            pc=self.PC, a=self.A, x=self.X, y=self.Y, s=self.S, p=self.get_status_byte()
        )

    def format_state(self, state=None):
        return format_state(state if state is not None else self.get_state())

    def set_zero_negative(self, value):
        """Set zero and negative flags based on value"""
        self.Z = 1 if value == 0 else 0
        self.N = 1 if value & 0x80 else 0

    def push_stack(self, value):
        """Push a byte onto the stack"""
        self.memory.write_stack(self.S, value)
        self.S = (self.S - 1) & 0xFF

    def pop_stack(self):
        """Pop a byte from the stack"""
        self.S = (self.S + 1) & 0xFF
        return self.memory.read_stack(self.S)

    # ------------------------ Instructions ------------------------
    def execute_lda(self, operand, addressing_mode):
        self.A = self.memory.read(operand)
        self.set_zero_negative(self.A)

    def execute_ldx(self, operand, addressing_mode):
        self.X = self.memory.read(operand)
        self.set_zero_negative(self.X)

    def execute_ldy(self, operand, addressing_mode):
        self.Y = self.memory.read(operand)
        self.set_zero_negative(self.Y)

    def execute_sta(self, operand, addressing_mode):
        self.memory.write(operand, self.A)

    def execute_stx(self, operand, addressing_mode):
        self.memory.write(operand, self.X)

    def execute_sty(self, operand, addressing_mode):
        self.memory.write(operand, self.Y)

    def execute_tax(self, operand, addressing_mode):
        self.X = self.A
        self.set_zero_negative(self.X)

    def execute_tay(self, operand, addressing_mode):
        self.Y = self.A
        self.set_zero_negative(self.Y)

    def execute_tsx(self, operand, addressing_mode):
        self.X = self.S
        self.set_zero_negative(self.X)

    def execute_txa(self, operand, addressing_mode):
        self.A = self.X
        self.set_zero_negative(self.A)

    def execute_txs(self, operand, addressing_mode):
        self.S = self.X

    def execute_tya(self, operand, addressing_mode):
        self.A = self.Y
        self.set_zero_negative(self.A)

    def execute_pha(self, operand, addressing_mode):
        self.push_stack(self.A)

    def execute_pla(self, operand, addressing_mode):
        self.A = self.pop_stack()
        self.set_zero_negative(self.A)

    def execute_php(self, operand, addressing_mode):
        # B and bit 5 are always set in the pushed copy
        self.push_stack(self.get_status_byte() | FLAG_B | FLAG_U)

    def execute_plp(self, operand, addressing_mode):
        self.set_status_byte(self.pop_stack())

    def execute_adc(self, operand, addressing_mode):
        value = self.memory.read(operand)
        if self.D:
            self._add_decimal(value)
            return
        result = self.A + value + self.C

        # Set overflow flag
        self.V = 1 if ((self.A ^ result) & (value ^ result) & 0x80) else 0

        # Set carry flag
        self.C = 1 if result > 255 else 0

        self.A = result & 0xFF
        self.set_zero_negative(self.A)

    def _add_decimal(self, value):
        """NMOS BCD addition: Z from the binary sum, N and V from the half-adjusted sum"""
        binary = self.A + value + self.C
        low = (self.A & 0x0F) + (value & 0x0F) + self.C
        if low > 0x09:
            low += 0x06
        result = (low & 0x0F) + (self.A & 0xF0) + (value & 0xF0)
        if low > 0x0F:
            result += 0x10

        self.Z = 1 if (binary & 0xFF) == 0 else 0
        self.N = 1 if result & 0x80 else 0
        self.V = 1 if ((self.A ^ result) & 0x80) and not ((self.A ^ value) & 0x80) else 0

        if (result & 0x1F0) > 0x90:
            result += 0x60
        self.C = 1 if (result & 0xFF0) > 0xF0 else 0
        self.A = result & 0xFF

    def execute_sbc(self, operand, addressing_mode):
        value = self.memory.read(operand)
        borrow = 1 - self.C
        result = self.A - value - borrow

        # Flags come from the binary difference in both modes
        self.V = 1 if ((self.A ^ result) & (self.A ^ value) & 0x80) else 0
        self.C = 0 if result < 0 else 1
        self.set_zero_negative(result & 0xFF)

        if self.D:
            low = (self.A & 0x0F) - (value & 0x0F) - borrow
            if low & 0x10:
                result = ((low - 6) & 0x0F) | ((self.A & 0xF0) - (value & 0xF0) - 0x10)
            else:
                result = (low & 0x0F) | ((self.A & 0xF0) - (value & 0xF0))
            if result & 0x100:
                result -= 0x60

        self.A = result & 0xFF

    def execute_and(self, operand, addressing_mode):
        self.A = self.A & self.memory.read(operand)
        self.set_zero_negative(self.A)

    def execute_eor(self, operand, addressing_mode):
        self.A = self.A ^ self.memory.read(operand)
        self.set_zero_negative(self.A)

    def execute_ora(self, operand, addressing_mode):
        self.A = self.A | self.memory.read(operand)
        self.set_zero_negative(self.A)

    def _read_modify_write(self, operand, addressing_mode, op):
        if addressing_mode == "accumulator":
            self.A = op(self.A)
            self.set_zero_negative(self.A)
        else:
            value = op(self.memory.read(operand))
            self.memory.write(operand, value)
            self.set_zero_negative(value)

    def _asl(self, value):
        self.C = 1 if value & 0x80 else 0
        return (value << 1) & 0xFF

    def _lsr(self, value):
        self.C = value & 1
        return value >> 1

    def _rol(self, value):
        old_carry = self.C
        self.C = 1 if value & 0x80 else 0
        return ((value << 1) | old_carry) & 0xFF

    def _ror(self, value):
        old_carry = self.C
        self.C = value & 1
        return (value >> 1) | (old_carry << 7)

    def execute_asl(self, operand, addressing_mode):
        self._read_modify_write(operand, addressing_mode, self._asl)

    def execute_lsr(self, operand, addressing_mode):
        self._read_modify_write(operand, addressing_mode, self._lsr)

    def execute_rol(self, operand, addressing_mode):
        self._read_modify_write(operand, addressing_mode, self._rol)

    def execute_ror(self, operand, addressing_mode):
        self._read_modify_write(operand, addressing_mode, self._ror)

    def _compare(self, register, operand):
        value = self.memory.read(operand)
        self.C = 1 if register >= value else 0
        self.set_zero_negative((register - value) & 0xFF)

    def execute_cmp(self, operand, addressing_mode):
        self._compare(self.A, operand)

    def execute_cpx(self, operand, addressing_mode):
        self._compare(self.X, operand)

    def execute_cpy(self, operand, addressing_mode):
        self._compare(self.Y, operand)

    def execute_bit(self, operand, addressing_mode):
        """Bit Test - Test bits in memory with accumulator"""
        value = self.memory.read(operand)
        self.Z = 1 if (self.A & value) == 0 else 0
        self.V = 1 if value & 0x40 else 0
        self.N = 1 if value & 0x80 else 0

    def execute_inc(self, operand, addressing_mode):
        value = (self.memory.read(operand) + 1) & 0xFF
        self.memory.write(operand, value)
        self.set_zero_negative(value)

    def execute_inx(self, operand, addressing_mode):
        self.X = (self.X + 1) & 0xFF
        self.set_zero_negative(self.X)

    def execute_iny(self, operand, addressing_mode):
        self.Y = (self.Y + 1) & 0xFF
        self.set_zero_negative(self.Y)

    def execute_dec(self, operand, addressing_mode):
        value = (self.memory.read(operand) - 1) & 0xFF
        self.memory.write(operand, value)
        self.set_zero_negative(value)

    def execute_dex(self, operand, addressing_mode):
        self.X = (self.X - 1) & 0xFF
        self.set_zero_negative(self.X)

    def execute_dey(self, operand, addressing_mode):
        self.Y = (self.Y - 1) & 0xFF
        self.set_zero_negative(self.Y)

    def _branch(self, condition, target):
        """Take the branch if condition holds - returns extra cycles"""
        if not condition:
            return 0
        old_pc = self.PC
        self.PC = target
        # One for taking the branch, one more for landing on another page
        return 2 if self._page_crossed(old_pc, target) else 1

    def execute_bpl(self, operand, addressing_mode):
        return self._branch(self.N == 0, operand)

    def execute_bmi(self, operand, addressing_mode):
        return self._branch(self.N == 1, operand)

    def execute_bvc(self, operand, addressing_mode):
        return self._branch(self.V == 0, operand)

    def execute_bvs(self, operand, addressing_mode):
        return self._branch(self.V == 1, operand)

    def execute_bcc(self, operand, addressing_mode):
        return self._branch(self.C == 0, operand)

    def execute_bcs(self, operand, addressing_mode):
        return self._branch(self.C == 1, operand)

    def execute_bne(self, operand, addressing_mode):
        return self._branch(self.Z == 0, operand)

    def execute_beq(self, operand, addressing_mode):
        return self._branch(self.Z == 1, operand)

    def execute_jmp(self, operand, addressing_mode):
        self.PC = operand

    def execute_jsr(self, operand, addressing_mode):
        return_addr = (self.PC - 1) & 0xFFFF
        self.push_stack(hi_byte(return_addr))
        self.push_stack(lo_byte(return_addr))
        self.PC = operand

    def execute_rts(self, operand, addressing_mode):
        low = self.pop_stack()
        high = self.pop_stack()
        self.PC = (((high << 8) | low) + 1) & 0xFFFF

    def execute_brk(self, operand, addressing_mode):
        # BRK is a 2-byte instruction; skip the padding byte
        self.PC = (self.PC + 1) & 0xFFFF
        self._interrupt(IRQ_VECTOR, self.get_status_byte() | FLAG_B | FLAG_U)

    def execute_rti(self, operand, addressing_mode):
        """Return from Interrupt - flags first, then PC"""
        self.set_status_byte(self.pop_stack())
        low = self.pop_stack()
        high = self.pop_stack()
        self.PC = (high << 8) | low

    def execute_clc(self, operand, addressing_mode):
        self.C = 0

    def execute_sec(self, operand, addressing_mode):
        self.C = 1

    def execute_cli(self, operand, addressing_mode):
        self.I = 0

    def execute_sei(self, operand, addressing_mode):
        self.I = 1

    def execute_clv(self, operand, addressing_mode):
        self.V = 0

    def execute_cld(self, operand, addressing_mode):
        self.D = 0

    def execute_sed(self, operand, addressing_mode):
        self.D = 1

    def execute_nop(self, operand, addressing_mode):
        pass
