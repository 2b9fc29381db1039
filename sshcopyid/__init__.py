"""Install local SSH public keys into a remote ``authorized_keys`` file."""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
