"""Services module - game spec compilation and extension export."""

from . import game, export

__all__ = ['game', 'export']
