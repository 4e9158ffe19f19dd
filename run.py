"""
Entry Point Script (Bootstrap)
==============================
Runs the command-line interface straight from a source checkout.

Why is this file needed?
------------------------
1. It is located outside the 'src' package to act as a convenient runner.
2. It modifies 'sys.path' to ensure Python can resolve imports like
   'from shapeslicer.model...' without installing the package.

Usage:
    $ python run.py rect x=0 y=0 width=100 height=50 --line 50 -10 50 60
"""
import sys
import os

# Add the 'src' directory to the Python path
current_dir: str = os.path.dirname(os.path.abspath(__file__))
src_path: str = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

from shapeslicer.main import main

if __name__ == "__main__":
    sys.exit(main())
