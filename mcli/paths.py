# SPDX-License-Identifier: MIT
"""Centralized path resolution for mcli.

All path resolution should go through this module to ensure consistency.
"""
import os
from pathlib import Path


class PathResolver:
    """Resolves paths for mcli components."""

    @staticmethod
    def config_dir() -> Path:
        """Get the directory holding settings.json and an optional .env.

        Resolution order:
        1. MCLI_CONFIG env var
        2. XDG_CONFIG_HOME/mcli
        3. ~/.config/mcli
        """
        config = os.environ.get("MCLI_CONFIG")
        if config:
            return Path(config)
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "mcli"
        return Path.home() / ".config" / "mcli"

    @staticmethod
    def state_dir() -> Path:
        """Get the state directory for mutable data (debug log).

        Resolution order:
        1. MCLI_STATE env var
        2. XDG_STATE_HOME/mcli
        3. ~/.local/state/mcli
        """
        state = os.environ.get("MCLI_STATE")
        if state:
            return Path(state)
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            return Path(xdg_state) / "mcli"
        return Path.home() / ".local" / "state" / "mcli"

    @staticmethod
    def debug_log() -> Path:
        """Path of the JSON-lines debug log."""
        return PathResolver.state_dir() / "debug.log"
