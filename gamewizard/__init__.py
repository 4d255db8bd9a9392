"""Add-game wizard - collects game details and exports a game support extension."""

__version__ = '0.1.0'
