"""setuptools setup for PomoTimer.

Install for development:
    pip install -e ".[test]"
    pomotimer --help
"""

from setuptools import setup, find_packages

setup(
    name="pomotimer",
    version="0.1.0",
    description="Work/break interval timer for the terminal",
    packages=find_packages(include=["pomotimer", "pomotimer.*"]),
    python_requires=">=3.10",
    install_requires=[
        "PyQt6>=6.5",
        "numpy>=1.24",
        "platformdirs>=3.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": ["pomotimer = pomotimer.__main__:main"],
    },
)
