# ==============================================================================
# O2R INSPECTOR - MAIN ENTRY POINT
# ==============================================================================
# Script entry point for running the inspector from a source checkout.
# The installed package exposes the same commands as "o2r-inspector".
#
# Usage:
#   python main.py list archive.o2r
#   python main.py anim export archive.o2r objects/gameplay_keep/gLinkAnim
#   python main.py --help
# ==============================================================================

import sys

from o2r_inspector.cli import main


# ==============================================================================
# SCRIPT ENTRY POINT
# ==============================================================================
if __name__ == "__main__":
    exit_code = main()
    sys.exit(exit_code)
