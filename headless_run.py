#!/usr/bin/env python3
import sys
import time
import argparse

import drive_config
from cpu import IllegalOpcodeError
from disasm import disassemble
from drive import Drive
from utils import set_debug


def trace_instructions(drive, count, out=None):
    """Execute count instructions, printing disassembly and registers before each"""
    if out is None:
        out = sys.stdout
    cycles = 0
    for _ in range(count):
        line, _ = disassemble(drive.memory, drive.cpu.PC)
        out.write(f"{line:<32} {drive.trace_line()}\n")
        consumed = drive.cpu.run_instruction()
        drive.cpu_cycles += consumed
        cycles += consumed
    return cycles


def main(argv=None):
    parser = argparse.ArgumentParser(description="Headless drive CPU run against a DOS firmware image.")
    parser.add_argument("firmware", help="Path to the 16KB firmware image")
    parser.add_argument("--cycles", type=int, default=1_000_000, help="Number of CPU cycles to run")
    parser.add_argument(
        "--slice",
        type=int,
        default=drive_config.CPU_CONFIG["slice_cycles"],
        help="Cycle budget per CPU.run() call",
    )
    parser.add_argument(
        "--ram-size",
        type=int,
        default=drive_config.MEMORY_CONFIG["ram_size"],
        help="RAM size in bytes (1024 or 2048 on real boards)",
    )
    parser.add_argument(
        "--trace",
        type=int,
        default=drive_config.TRACE_CONFIG["trace_instructions"],
        help="Trace this many instructions after reset",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    args = parser.parse_args(argv)
    if args.slice <= 0:
        parser.error(f"--slice must be positive, got {args.slice}")

    set_debug(args.debug)
    if args.debug:
        for line in drive_config.describe_config():
            print(line)

    try:
        drive = Drive(args.ram_size)
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    if not drive.load_firmware(args.firmware):
        print(f"Failed to load firmware: {args.firmware}")
        return 1

    start = time.time()
    try:
        if args.trace > 0:
            trace_instructions(drive, args.trace)
        while drive.cpu_cycles < args.cycles:
            drive.run(min(args.slice, args.cycles - drive.cpu_cycles))
    except IllegalOpcodeError as e:
        print(f"CPU fault: {e}")
        print(drive.trace_line())
        return 2
    elapsed = time.time() - start

    print(drive.trace_line())
    sys.stdout.write(f"Headless run complete: cycles={drive.cpu_cycles}, elapsed={elapsed:.3f}s\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
