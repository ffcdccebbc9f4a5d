# SPDX-License-Identifier: MIT
"""mcli - terminal browser for upcoming meetups."""

from ._version import __version__

__all__ = ["__version__"]
