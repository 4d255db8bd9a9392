"""Command line entry point - `gamewizard run` and `gamewizard compile`."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from .config import load_settings
from .engine import RealActionRunner, WizardEngine
from .engine.errors import WizardError
from .services.export import export_game
from .services.game.references import ReferenceData

logger = logging.getLogger(__name__)

app = typer.Typer(help="Add support for a game that isn't supported yet.")


def _setup_logging(verbose: bool) -> None:
    verbose = verbose or bool(os.environ.get('GAMEWIZARD_VERBOSE'))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )


def _read_yaml(path: Path) -> dict:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping")
    return data


def load_references(path: Optional[Path], game_stores: Optional[List[str]] = None) -> ReferenceData:
    """Reference data from YAML: {catalog: [...], stores: {store_id: [...]}}."""
    if path is None:
        return ReferenceData(game_stores=game_stores)
    data = _read_yaml(path)
    return ReferenceData(catalog=data.get('catalog') or [], stores=data.get('stores') or {},
                         game_stores=game_stores)


def _fail(message: str) -> None:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


@app.command()
def run(
    answers: Optional[Path] = typer.Option(None, help="YAML answers; runs headless when given"),
    references: Optional[Path] = typer.Option(None, help="YAML catalog / store games"),
    output: Optional[Path] = typer.Option(None, help="Directory receiving game-<id> folders"),
    config: Optional[Path] = typer.Option(None, help="Settings file (default: ./gamewizard.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Run the wizard and export the game extension."""
    _setup_logging(verbose)
    results = []

    try:
        settings = load_settings(config)
        if output is not None:
            settings.extensions_root = output
        runner = RealActionRunner(verbose=verbose or settings.verbose)

        async def on_save(spec, image_url):
            results.append(await asyncio.to_thread(export_game, spec, image_url, runner, settings))

        engine = WizardEngine(runner, references=load_references(references, settings.game_stores),
                              on_save=on_save, settings=settings)
        if answers is not None:
            asyncio.run(engine.run_headless(_read_yaml(answers)))
        else:
            asyncio.run(engine.run_interactive())
    except (WizardError, ValueError, OSError, yaml.YAMLError) as e:
        _fail(str(e))

    if results and not results[-1].success:
        raise typer.Exit(code=1)


@app.command("compile")
def compile_spec(
    answers: Path = typer.Option(..., help="YAML answers"),
    references: Optional[Path] = typer.Option(None, help="YAML catalog / store games"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Print the compiled game spec as JSON without exporting."""
    _setup_logging(verbose)
    saved = []

    try:
        engine = WizardEngine(RealActionRunner(verbose=verbose),
                              references=load_references(references),
                              on_save=lambda spec, image_url: saved.append(spec))
        asyncio.run(engine.run_headless(_read_yaml(answers)))
    except (WizardError, ValueError, OSError, yaml.YAMLError) as e:
        _fail(str(e))

    typer.echo(json.dumps(saved[0].to_dict(), indent=2))

