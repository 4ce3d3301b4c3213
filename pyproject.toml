[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "x86kit"
version = "0.1.0"
description = "Pure-Python models of x86 32-bit addresses, paging entries, EFLAGS, task state segments and APIC registers"
requires-python = ">=3.10"
dependencies = []
keywords = ["x86", "paging", "apic", "ioapic", "eflags", "tss", "kernel", "osdev"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System Kernels",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["x86kit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
