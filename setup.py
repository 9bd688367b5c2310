#!/usr/bin/env python3
"""
icmp-echo v1.0.0 - Setup Configuration
======================================

ICMP Echo round-trip timer over raw sockets.

Installation:
    pip install .

    OR (development mode):
    pip install -e ".[dev]"

    Creates 'icmp-echo' console script.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README
readme_path = Path(__file__).parent / "README.md"
long_description = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

# Core dependencies
REQUIRED_PACKAGES = [
    "jsonschema>=4.0.0",    # Configuration validation
    "colorama>=0.4.6",      # Cross-platform colored output
]

# Optional development dependencies
EXTRAS_REQUIRE = {
    "dev": [
        "pytest>=7.0.0",    # Testing
        "pytest-cov>=4.0.0", # Coverage reporting
        "scapy>=2.4.5",     # Independent ICMP decoder for wire-format tests
        "black>=22.0.0",    # Code formatting
        "pylint>=2.14.0",   # Linting
        "mypy>=0.950",      # Type checking
    ],
}

setup(
    # Package Information
    name="icmp-echo",
    version="1.0.0",
    description="Send ICMP Echo Requests over raw sockets and time the replies",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Classification
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: System Administrators",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Topic :: Internet",
        "Topic :: System :: Networking",
        "Topic :: System :: Networking :: Monitoring",
    ],

    keywords=[
        "network",
        "icmp",
        "ping",
        "raw-socket",
        "latency",
    ],

    # Package Configuration
    packages=find_packages(exclude=["tests", "tests.*"]),

    # Python Version Requirement
    python_requires=">=3.8",

    # Dependencies
    install_requires=REQUIRED_PACKAGES,
    extras_require=EXTRAS_REQUIRE,

    # Entry Points (Console Scripts)
    entry_points={
        "console_scripts": [
            "icmp-echo=icmp_echo.cli:main",
        ],
    },

    zip_safe=False,
)
