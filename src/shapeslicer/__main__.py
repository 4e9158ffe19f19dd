"""Command-line interface."""
import sys

from shapeslicer.main import main

if __name__ == "__main__":
    sys.exit(main())
