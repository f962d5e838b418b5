"""
cp750-shell package.

Interactive front end for a single CP750 session.  Use ``cp750-shell
SERVER[:PORT]`` or ``python -m cp750_shell`` to launch it.
"""

from __future__ import annotations

from .cli import main

__all__ = ["main"]
__version__ = "0.1.0"
