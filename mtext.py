#!/usr/bin/env python3
"""
MText Bridge - editor HTML to MText converter

Simple usage:
    python mtext.py note.html              # Outputs note.mtext
    python mtext.py note.html --stdout     # Prints the MText string
    python mtext.py /folder/path           # Converts all HTML/JSON files in folder
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from mtext_bridge.cli import app

if __name__ == "__main__":
    app()
