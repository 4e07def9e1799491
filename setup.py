import os

from setuptools import setup

ext_modules = []
if os.environ.get("DRIVE6502_CYTHON") == "1":
    # Compile the hot path modules in place of the pure Python ones
    from setuptools import Extension
    from Cython.Build import cythonize

    extensions = [
        Extension("memory", ["memory.py"]),
        Extension("cpu", ["cpu.py"]),
    ]
    ext_modules = cythonize(extensions, compiler_directives={
        "boundscheck": False,
        "wraparound": False,
        "cdivision": True,
        "language_level": 3,
    })

setup(
    name="drive6502",
    version="0.1.0",
    description="6502 disk drive CPU emulator running the drive DOS firmware",
    python_requires=">=3.8",
    py_modules=[
        "cpu",
        "disasm",
        "drive",
        "drive_config",
        "firmware",
        "headless_run",
        "memory",
        "utils",
    ],
    ext_modules=ext_modules,
    extras_require={
        "cython": ["Cython>=3.0"],
        "test": ["pytest>=7"],
    },
    entry_points={
        "console_scripts": ["drive6502-headless=headless_run:main"],
    },
)
