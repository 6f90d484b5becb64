"""
The package's own version, as installed; used in ``User-Agent`` and the CLI.
"""
import importlib.metadata
from typing import Optional


def get_version(distribution: str = 'scalables') -> Optional[str]:
    try:
        return importlib.metadata.version(distribution)
    except importlib.metadata.PackageNotFoundError:
        return None  # running from a source tree without installation.


version: Optional[str] = get_version()
