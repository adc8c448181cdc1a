#!/usr/bin/env python3
"""
Entry point for the Debug Console demo.
"""
import sys
import os

# Add the project root to the Python path to allow imports from debug_console
project_root = os.path.abspath(os.path.dirname(__file__))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from debug_console.gui.main import main

if __name__ == "__main__":
    sys.exit(main())
