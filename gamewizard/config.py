"""Settings for the wizard - YAML file plus environment overrides."""

import logging
import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

CONFIG_FILE = 'gamewizard.yaml'
GAME_STORES = ['steam', 'epic', 'origin', 'uplay', 'gog', 'xbox']
DEFAULT_TEMPLATE = Path(__file__).resolve().parent / 'services' / 'export' / 'templates' / 'index.py.tmpl'


def _default_user() -> str:
    return os.environ.get('GAMEWIZARD_USER') or os.environ.get('USERNAME') or os.environ.get('USER') or ''


class WizardSettings(BaseModel):
    """Where and how generated extensions are written."""

    model_config = ConfigDict(extra="ignore")

    extensions_root: Path = Field(Path('extensions'), description="Directory receiving game-<id> folders")
    template_path: Path = Field(DEFAULT_TEMPLATE, description="Template of the generated module")
    user_name: str = Field(default_factory=_default_user, description="Author written to info.json")
    fetch_timeout: float = Field(30, description="Image download timeout in seconds")
    verbose: bool = Field(False, description="Debug logging and verbose runner output")
    game_stores: List[str] = Field(default_factory=lambda: list(GAME_STORES),
                                   description="Stores offered for game discovery")


def load_settings(path: Optional[Path] = None) -> WizardSettings:
    """
    Load settings from YAML, then apply environment overrides.

    Args:
        path: Settings file (default: ./gamewizard.yaml, skipped if missing)

    Returns:
        Validated WizardSettings

    Raises:
        FileNotFoundError: If an explicitly given path doesn't exist
        ValidationError: If the file doesn't match the settings schema
    """
    data = {}
    config_path = Path(path) if path is not None else Path.cwd() / CONFIG_FILE

    if config_path.exists():
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        logger.debug("loaded settings from %s", config_path)
    elif path is not None:
        raise FileNotFoundError(f"Settings file not found: {config_path}")

    if os.environ.get('GAMEWIZARD_EXTENSIONS_ROOT'):
        data['extensions_root'] = os.environ['GAMEWIZARD_EXTENSIONS_ROOT']
    if os.environ.get('GAMEWIZARD_VERBOSE'):
        data['verbose'] = True
    if os.environ.get('GAMEWIZARD_USER'):
        data['user_name'] = os.environ['GAMEWIZARD_USER']

    return WizardSettings(**data)
