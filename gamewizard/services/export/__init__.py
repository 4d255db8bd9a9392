"""Export service module - renders a compiled GameSpec into an extension folder."""

from .exporter import export_game, render_module, make_info, ExportResult

__all__ = [
    'export_game',
    'render_module',
    'make_info',
    'ExportResult',
]
