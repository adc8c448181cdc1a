from setuptools import setup, find_packages

setup(
    name="debug_console",
    version="0.1.0",
    packages=find_packages(include=["debug_console", "debug_console.*"]),
    install_requires=[
        "PySide6",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "debug-console-demo=debug_console.gui.main:main",
        ],
    },
)
