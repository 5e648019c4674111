#!/usr/bin/env python3
"""Dotfiles management tool.

Manages packages and stow-based dotfiles declared in a JSON config.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "lib"))
from dotfiles.cli import main


if __name__ == "__main__":
    main()
