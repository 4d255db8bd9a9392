"""Export pipeline - writes a compiled GameSpec as a standalone extension.

Stages run in order and the first failure aborts the export. Files written
before the failure are left in place; the user can fix the cause and save
again, which overwrites them.
"""

import json
import logging
import ntpath
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from gamewizard.config import WizardSettings
from gamewizard.engine.errors import ExportError
from gamewizard.engine.schema import GameInfo, GameSpec
from .helpers import helper_slots
from .template import python_literal, render

logger = logging.getLogger(__name__)

WIKI_URL = 'https://wiki.nexusmods.com/index.php/Packaging_extensions_for_Vortex'

MODULE_FILE = 'index.py'
INFO_FILE = 'info.json'


@dataclass
class ExportResult:
    """Outcome of one export attempt."""

    success: bool
    path: Optional[str] = None
    error: Optional[ExportError] = None


def make_info(game: GameInfo, user_name: str) -> Dict[str, Any]:
    """Metadata document shipped next to the generated module."""
    return {
        'name': f"Game: {game.name}",
        'author': user_name,
        'version': '1.0.0',
        'description': f"Support for {game.name}",
    }


def normalize_logo(spec: GameSpec) -> GameSpec:
    """Copy of *spec* whose logo is a bare file name."""
    logo = ntpath.basename(spec.game.logo)
    return spec.model_copy(update={'game': spec.game.model_copy(update={'logo': logo})})


def render_module(spec: GameSpec, template: str) -> str:
    """Source of the generated extension module."""
    values = {'spec': python_literal(spec.to_dict())}
    values.update(helper_slots())
    return render(template, values)


def extension_dir(extensions_root: str, game_id: str) -> str:
    """'<extensions_root>/game-<id>'; raises ValueError unless that is a direct child of the root."""
    export_path = os.path.join(extensions_root, f"game-{game_id}")
    root = os.path.realpath(extensions_root)
    resolved = os.path.realpath(export_path)
    if not game_id or os.path.split(resolved) != (root, f"game-{game_id}"):
        raise ValueError(f"Invalid game id {game_id!r}: {export_path} is not inside {root}")
    return export_path


def further_steps(export_path: str) -> str:
    return (
        f"The game extension was created in {export_path}\n"
        f"You may want to review the information in {INFO_FILE}; {MODULE_FILE} "
        "explains how to add functionality not available in this wizard.\n\n"
        "When you want to publish this extension, create a zip or 7z file "
        "containing the files in the directory above and upload it.\n"
        f"Please also see {WIKI_URL} on how to package extensions correctly."
    )


def export_game(spec: GameSpec, image_url: Optional[str], runner,
                settings: Optional[WizardSettings] = None) -> ExportResult:
    """
    Write the extension for *spec* and report the outcome through the runner.

    Args:
        spec: Compiled game spec
        image_url: Cover image to download, or None
        runner: ActionRunner for file, network and notification side effects
        settings: Output location, template and author (default settings if None)

    Returns:
        ExportResult with the extension directory or the first failure
    """
    settings = settings or WizardSettings()
    stage = 'normalize_logo'
    export_path = None

    try:
        spec = normalize_logo(spec)

        stage = 'load_template'
        template = runner.read_file(str(settings.template_path))

        stage = 'render_module'
        code = render_module(spec, template)

        stage = 'create_directory'
        export_path = extension_dir(str(settings.extensions_root), spec.game.id)
        runner.ensure_dir(export_path)

        stage = 'write_module'
        runner.write_file(os.path.join(export_path, MODULE_FILE), code)

        stage = 'write_info'
        info = make_info(spec.game, settings.user_name)
        runner.write_file(os.path.join(export_path, INFO_FILE), json.dumps(info, indent=2))

        if image_url:
            stage = 'fetch_image'
            image_data = runner.fetch(image_url, timeout=settings.fetch_timeout)

            stage = 'write_image'
            runner.write_bytes(os.path.join(export_path, spec.game.logo), image_data)
    except Exception as e:
        error = ExportError(stage, e)
        logger.error("export of %s failed: %s", spec.game.id, error)
        runner.notify('error', 'Failed to export game', str(error))
        return ExportResult(success=False, path=export_path, error=error)

    logger.info("exported %s to %s", spec.game.id, export_path)
    runner.notify(
        'success',
        'Export successful.',
        export_path,
        actions=[{'title': 'Further steps', 'text': further_steps(export_path)}],
    )
    return ExportResult(success=True, path=export_path)
