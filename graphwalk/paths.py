"""
Path utilities for GraphWalk.

Handles path resolution for both development mode and frozen (PyInstaller) executables.
- In development: paths are relative to the project root
- When frozen: paths are relative to the executable location

The optional config.json lives NEXT TO the executable, not bundled inside.
"""

import sys
from pathlib import Path


def get_app_dir() -> Path:
    """
    Get the application directory.
    
    - In development: the project root (parent of graphwalk/)
    - When frozen: the directory containing the executable
    """
    if getattr(sys, 'frozen', False):
        # Running as PyInstaller bundle - use executable's directory
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent.parent


def get_config_path() -> Path:
    """Get the path to the config file (canvas size, traversal delays, etc.)."""
    return get_app_dir() / "config.json"


def get_env_path() -> Path:
    """Get the path to the optional .env file read at startup."""
    return get_app_dir() / ".env"
