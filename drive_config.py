"""
Configuration defaults for the drive emulator
Values here are the build-time defaults; the headless runner overrides them from its flags
"""

# Memory layout
MEMORY_CONFIG = {
    "ram_size": 2048,  # 2KB on the stock drive board; early builds used 1024
}

# CPU clocking
CPU_CONFIG = {
    "clock_hz": 1_000_000,  # Drive CPU runs at 1 MHz
    "slice_cycles": 20_000,  # Budget handed to CPU.run() per host iteration
}

# Diagnostics
TRACE_CONFIG = {
    "trace_instructions": 0,  # Instructions to trace after reset (0 = off)
}


def describe_config():
    """Return the active configuration as printable lines"""
    lines = ["Drive configuration defaults:"]
    for category, opts in [
        ("Memory", MEMORY_CONFIG),
        ("CPU", CPU_CONFIG),
        ("Trace", TRACE_CONFIG),
    ]:
        values = ", ".join(f"{k}={v}" for k, v in opts.items())
        lines.append(f"  {category}: {values}")
    return lines
