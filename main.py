#!/usr/bin/env python3
"""
Main entry point for the PNG to ICO converter
"""
import sys
import os

# Add project root to Python path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from pngtoico.cli import main

if __name__ == "__main__":
    sys.exit(main())
