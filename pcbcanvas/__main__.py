"""
pcbcanvas entry point.

Usage:
    python -m pcbcanvas INPUT.json [-o OUTPUT.png] [--width W] [--height H]
"""

import sys


def main() -> int:
    """Main entry point for pcbcanvas."""
    from pcbcanvas.app import run_app
    return run_app(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
