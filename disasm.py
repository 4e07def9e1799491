"""
6502 disassembler for drive trace output
Uses the CPU opcode table so decoding matches what the CPU executes
"""

from cpu import INSTRUCTIONS

OPERAND_FORMATS = {
    "implied": "",
    "accumulator": "A",
    "immediate": "#${:02X}",
    "zero_page": "${:02X}",
    "zero_page_x": "${:02X},X",
    "zero_page_y": "${:02X},Y",
    "absolute": "${:04X}",
    "absolute_x": "${:04X},X",
    "absolute_y": "${:04X},Y",
    "indirect": "(${:04X})",
    "indexed_indirect": "(${:02X},X)",
    "indirect_indexed": "(${:02X}),Y",
    "relative": "${:04X}",
}


def disassemble(memory, addr):
    """Disassemble one instruction. Returns (text, length)."""
    addr = addr & 0xFFFF
    opcode = memory.read(addr)

    if opcode not in INSTRUCTIONS:
        return f"${addr:04X}: {opcode:02X}       .byte ${opcode:02X}", 1

    name, mode, length, _ = INSTRUCTIONS[opcode]
    raw = [memory.read(addr + i) for i in range(length)]

    if length == 3:
        value = (raw[2] << 8) | raw[1]
    elif length == 2:
        value = raw[1]
        if mode == "relative":
            offset = value - 256 if value & 0x80 else value
            value = (addr + 2 + offset) & 0xFFFF
    else:
        value = None

    operand = OPERAND_FORMATS[mode].format(value)
    text = f"{name} {operand}" if operand else name
    hex_bytes = " ".join(f"{b:02X}" for b in raw)
    return f"${addr:04X}: {hex_bytes:<8} {text}", length


def disassemble_range(memory, addr, count=20):
    output = []
    for _ in range(count):
        line, length = disassemble(memory, addr)
        output.append(line)
        addr = (addr + length) & 0xFFFF
    return output
