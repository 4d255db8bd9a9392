"""Game service module - validation, derivation and compilation of the game spec."""

from .validators import (
    validate_name,
    validate_catalog_domain,
    validate_game_path,
    validate_exe_path,
)
from .derivation import autofill_info, deduce_id
from .compiler import compile_spec, register_store_enricher

__all__ = [
    'validate_name',
    'validate_catalog_domain',
    'validate_game_path',
    'validate_exe_path',
    'autofill_info',
    'deduce_id',
    'compile_spec',
    'register_store_enricher',
]
