#!/usr/bin/env python
"""
Run the drive demo from the project root without installing.
Usage: python run_demo.py [args]
"""
import sys
import os

project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(project_root, "src"))

from green_corridor.cli import main

if __name__ == "__main__":
    sys.exit(main())
