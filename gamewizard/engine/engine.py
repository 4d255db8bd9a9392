"""Core wizard engine - drives the add-game flow with DI."""

import asyncio
import inspect
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from gamewizard.config import WizardSettings
from gamewizard.services.game.compiler import compile_spec
from gamewizard.services.game.derivation import deduce_id, is_empty
from gamewizard.services.game.references import (
    ReferenceData,
    find_catalog_entry,
    store_options,
    suggest_domains,
)
from .collection import CollectionEditor
from .errors import NavigationError, SpecValidationError
from .fields import FieldStore
from .loader import SpecLoader
from .runner import ActionRunner
from .schema import (
    FieldDef,
    FieldKey,
    GameSpec,
    ModTypeSpec,
    StepDef,
    StepId,
    StopPatternSpec,
    ValidationResult,
)
from .state import (
    Back,
    Cancel,
    HookFinished,
    HookStarted,
    Next,
    SaveFinished,
    SaveStarted,
    WizardState,
    can_save,
    transition,
)

logger = logging.getLogger(__name__)

NEW_MOD_TYPE = {'name': 'New Mod Type', 'priority': 'high'}
NEW_STOP_PATTERN = {'value': 'sample*.pak'}

# on_save(spec, image_url) - may return an awaitable
SaveHandler = Callable[[GameSpec, Optional[str]], Any]


class WizardEngine:
    """
    Owns one add-game session: answers, item lists, current step.

    Key responsibilities:
    - Step navigation through the pure transition() reducer
    - Entry hooks (auto-fill) with the working flag held while they run
    - Validation, compilation and save through injected collaborators
    - Headless mode for tests and scripted use, console mode through the runner
    """

    def __init__(self, runner: ActionRunner, references: Optional[ReferenceData] = None,
                 base_path: Optional[Path] = None, flow_name: str = 'add_game',
                 on_save: Optional[SaveHandler] = None,
                 on_hide: Optional[Callable[[], None]] = None,
                 settings: Optional[WizardSettings] = None):
        """
        Initialize the wizard engine.

        Args:
            runner: ActionRunner implementation for side effects
            references: Catalog / store data for this session (empty if None)
            base_path: Directory containing flows/ (default: the gamewizard package)
            flow_name: Flow definition to load
            on_save: Called with the compiled spec on save (default: export it)
            on_hide: Called when the wizard closes after cancel or save
            settings: Export settings for the default save handler
        """
        self.runner = runner
        self.settings = settings or WizardSettings()
        self.references = (references if references is not None
                           else ReferenceData(game_stores=self.settings.game_stores))
        self.loader = SpecLoader(base_path=base_path)
        self.flow = self.loader.load_flow(flow_name)
        self.field_defs: Dict[FieldKey, FieldDef] = self.flow.field_defs()

        self.fields = FieldStore()
        self.mod_types: CollectionEditor[ModTypeSpec] = CollectionEditor(ModTypeSpec)
        self.stop_patterns: CollectionEditor[StopPatternSpec] = CollectionEditor(StopPatternSpec)
        self.state = WizardState()

        self.on_save = on_save or self._export
        self.on_hide = on_hide
        self.validators: Dict[str, Callable] = {}
        self.hooks: Dict[str, Callable] = {}
        self._auto_register_services()

    def _auto_register_services(self) -> None:
        """Register validators and entry hooks from the service modules."""
        from gamewizard.services import game

        self.validators['game.validate_name'] = game.validate_name
        self.validators['game.validate_catalog_domain'] = game.validate_catalog_domain
        self.validators['game.validate_game_path'] = game.validate_game_path
        self.validators['game.validate_exe_path'] = game.validate_exe_path
        self.hooks['game.autofill_info'] = game.autofill_info

    async def _export(self, spec: GameSpec, image_url: Optional[str]):
        from gamewizard.services.export import export_game

        return await asyncio.to_thread(export_game, spec, image_url, self.runner, self.settings)

    @property
    def step(self) -> StepDef:
        return self.flow.get_step(self.state.step)

    def set_field(self, key: Union[FieldKey, str], value: Any) -> None:
        self.fields.set(key, value)

    def get_field(self, key: Union[FieldKey, str]) -> Any:
        return self.fields.get(key)

    def browse(self, key: Union[FieldKey, str]) -> Optional[str]:
        """
        Pick a path for a directory or file field through the runner.

        Args:
            key: game_path, mod_path or exe_path

        Returns:
            The selected path, or None if the selection was cancelled
            (the field keeps its value)
        """
        field = self.field_defs[FieldKey(key)]
        if field.type not in ('directory', 'file'):
            raise ValueError(f"Field {field.key.value} is not a path field")

        selected = self.runner.select_path(field.type, self._default_for(field), field.filters)
        if selected:
            self.fields.set(field.key, selected)
        return selected

    def add_mod_type(self) -> ModTypeSpec:
        """Append a mod type targeting the game directory."""
        game_id = deduce_id(self.fields.get(FieldKey.NAME), self.fields.get(FieldKey.CATALOG_DOMAIN))
        target_path = self.fields.get(FieldKey.GAME_PATH) or ''
        return self.mod_types.add(lambda: {**NEW_MOD_TYPE, 'target_path': target_path},
                                  id_prefix=game_id or None)

    def update_mod_type(self, item: ModTypeSpec) -> None:
        self.mod_types.update(item)

    def remove_mod_type(self, item_id: str) -> None:
        self.mod_types.remove(item_id)

    def add_stop_pattern(self) -> StopPatternSpec:
        return self.stop_patterns.add(lambda: dict(NEW_STOP_PATTERN))

    def update_stop_pattern(self, item: StopPatternSpec) -> None:
        self.stop_patterns.update(item)

    def remove_stop_pattern(self, item_id: str) -> None:
        self.stop_patterns.remove(item_id)

    def validate_field(self, field: FieldDef) -> Optional[ValidationResult]:
        """Run the validator of *field*; None if it declares none."""
        if not field.validator:
            return None
        if field.validator not in self.validators:
            logger.warning("validator %s not registered", field.validator)
            return None
        return self.validators[field.validator](self.fields.get(field.key), self.fields.snapshot())

    def validate(self) -> Dict[FieldKey, ValidationResult]:
        """Validation result for every field that declares a validator."""
        results = {}
        for key, field in self.field_defs.items():
            result = self.validate_field(field)
            if result is not None:
                results[key] = result
        return results

    def blocking_errors(self) -> Dict[FieldKey, ValidationResult]:
        """Mandatory fields whose validator currently reports an error."""
        return {
            key: result for key, result in self.validate().items()
            if result.severity == 'error' and self.field_defs[key].mandatory
        }

    def compile(self) -> GameSpec:
        return compile_spec(
            self.fields.snapshot(),
            mod_types=self.mod_types.items,
            stop_patterns=self.stop_patterns.items,
            references=self.references.snapshot(),
        )

    async def next(self) -> StepId:
        self.state = transition(self.state, Next())
        await self._enter()
        return self.state.step

    async def back(self) -> StepId:
        self.state = transition(self.state, Back())
        await self._enter()
        return self.state.step

    async def _enter(self) -> None:
        """Run the entry hook of the current step, holding the working flag."""
        step = self.step
        if not step.entry_hook:
            return

        hook = self.hooks.get(step.entry_hook)
        if hook is None:
            logger.warning("entry hook %s not registered", step.entry_hook)
            return

        self.state = transition(self.state, HookStarted())
        try:
            patch = hook(self.fields.snapshot(), self.references.snapshot())
            if inspect.isawaitable(patch):
                patch = await patch
            logger.debug("hook %s patch %r", step.entry_hook, patch)
            self.fields.apply(patch or {})
        finally:
            self.state = transition(self.state, HookFinished())

    def cancel(self) -> None:
        """Discard all answers and close the wizard."""
        self.state = transition(self.state, Cancel())
        self._reset()
        self._hide()

    async def save(self) -> GameSpec:
        """
        Compile the answers and hand the GameSpec to the save handler.

        Returns:
            The compiled GameSpec

        Raises:
            WizardBusyError: While a hook or another save is running
            NavigationError: If the current step is not the last one
            SpecValidationError: If a mandatory field reports an error
        """
        started = transition(self.state, SaveStarted())

        errors = self.blocking_errors()
        if errors:
            raise SpecValidationError({key.value: result.message for key, result in errors.items()})

        spec = self.compile()
        image_url = self.fields.get(FieldKey.IMAGE_URL)

        self.state = started
        try:
            result = self.on_save(spec, image_url)
            if inspect.isawaitable(result):
                await result
        except Exception:
            self.state = WizardState(step=self.state.step)
            raise

        self.state = transition(self.state, SaveFinished())
        self._reset()
        self._hide()
        return spec

    def _reset(self) -> None:
        self.fields.reset()
        self.mod_types.reset()
        self.stop_patterns.reset()

    def _hide(self) -> None:
        if self.on_hide is not None:
            self.on_hide()

    async def run_headless(self, answers: Dict[str, Any]) -> GameSpec:
        """
        Walk all steps with pre-provided answers and save at the end.

        Args:
            answers: Field key -> value, plus optional 'stop_patterns'
                     (list of patterns) and 'mod_types' (list of
                     {name, priority, target_path})

        Returns:
            The saved GameSpec

        Raises:
            ValueError: If answers contain an unknown key
            SpecValidationError: If mandatory answers are missing or invalid
        """
        answers = dict(answers)
        stop_patterns = answers.pop('stop_patterns', None) or []
        mod_types = answers.pop('mod_types', None) or []
        values = {FieldKey(key): value for key, value in answers.items()}

        while True:
            step = self.step
            logger.debug("headless step %s", step.id.value)

            for field in step.fields:
                if field.key in values:
                    self.fields.set(field.key, values[field.key])

            if 'stop_patterns' in step.collections:
                for pattern in stop_patterns:
                    item = self.add_stop_pattern()
                    self.update_stop_pattern(item.model_copy(update={'value': pattern}))

            if 'mod_types' in step.collections:
                for entry in mod_types:
                    item = self.add_mod_type()
                    self.update_mod_type(ModTypeSpec(**{**item.model_dump(), **entry, 'id': item.id}))

            if can_save(self.state):
                return await self.save()
            await self.next()

    async def run_interactive(self) -> Optional[GameSpec]:
        """
        Console rendition of the dialog.

        Returns:
            The saved GameSpec, or None if the user cancelled
        """
        while True:
            step = self.step
            self.runner.display("")
            self.runner.display(f"== {step.title} - {step.description} ==")
            if step.body:
                self.runner.display(self._interpolate_prompt(step.body.strip()))

            for field in step.fields:
                self._prompt_field(field)
            for collection in step.collections:
                if collection == 'stop_patterns':
                    self._edit_stop_patterns()
                else:
                    self._edit_mod_types()

            last = can_save(self.state)
            choices = 'save, back, cancel' if last else 'next, back, cancel'
            command = str(self.runner.get_input(f"Continue ({choices})", 'save' if last else 'next'))
            command = command.strip().lower()

            try:
                if command == 'cancel':
                    self.cancel()
                    return None
                if command == 'back':
                    await self.back()
                elif command == 'next':
                    await self.next()
                elif command == 'save':
                    return await self.save()
                else:
                    self.runner.display(f"Error: Unknown command: {command}")
            except SpecValidationError as e:
                self.runner.display(f"Error: {e}")
                for key, message in e.errors.items():
                    self.runner.display(f"  {key}: {message}")
            except NavigationError as e:
                self.runner.display(f"Error: {e}")

    def _interpolate_prompt(self, prompt: str) -> str:
        """Replace {key} placeholders with field values.

        Examples:
            >>> engine._interpolate_prompt("Installed in {game_path}")
            'Installed in /games/foo'
        """
        values = {key.value: value for key, value in self.fields.snapshot().items()}

        def replacer(match):
            key = match.group(1)
            return str(values.get(key, match.group(0)))  # Keep {key} if not set

        return re.sub(r'\{(\w+)\}', replacer, prompt)

    def _default_for(self, field: FieldDef) -> Any:
        value = self.fields.get(field.key)
        if value is None and field.default_from:
            value = self.fields.get(field.default_from)
        if value is None:
            value = field.default_value
        return value

    def _prompt_field(self, field: FieldDef) -> None:
        """Ask for one field, re-prompting mandatory fields while they are in error."""
        while True:
            if field.help:
                self.runner.display(field.help)

            if field.type in ('directory', 'file'):
                self.runner.display(field.prompt)
                self.browse(field.key)
            elif field.type == 'select':
                self._prompt_select(field)
            else:
                user_input = self.runner.get_input(field.prompt, self._default_for(field))
                if field.type == 'boolean' and isinstance(user_input, str):
                    user_input = _is_yes(user_input)
                self.fields.set(field.key, None if user_input == '' else user_input)

            if field.key == FieldKey.CATALOG_DOMAIN:
                self._suggest_domain()

            result = self.validate_field(field)
            if result is None or result.severity == 'success':
                return
            if result.severity == 'error' and field.mandatory:
                self.runner.display(f"Error: {result.message}")
                continue
            self.runner.display(f"Warning: {result.message}")
            return

    def _prompt_select(self, field: FieldDef) -> None:
        options = store_options(self.references.snapshot())
        if not options:
            self.runner.display("No installed store games found")
            return

        self.runner.display("")
        for i, option in enumerate(options, 1):
            self.runner.display(f"  {i}. {option['label']}")
        self.runner.display("")

        user_input = str(self.runner.get_input(f"{field.prompt} (number, blank for none)", '')).strip()
        if not user_input:
            self.fields.set(field.key, None)
            return
        if user_input.isdigit() and 1 <= int(user_input) <= len(options):
            self.fields.set(field.key, options[int(user_input) - 1]['value'])
            return
        values = [option['value'] for option in options]
        if user_input in values:
            self.fields.set(field.key, user_input)
        else:
            self.runner.display(f"Error: Invalid choice: {user_input}")

    def _suggest_domain(self) -> None:
        snapshot = self.references.snapshot()
        domain = self.fields.get(FieldKey.CATALOG_DOMAIN)
        if is_empty(domain) or find_catalog_entry(snapshot, domain) is not None:
            return
        suggestions = suggest_domains((entry.domain_name for entry in snapshot.catalog), domain)
        if suggestions:
            self.runner.display(f"Did you mean: {', '.join(suggestions)}")

    def _edit_stop_patterns(self) -> None:
        """Edit the patterns as one comma separated line; unchanged items keep their ids."""
        items = self.stop_patterns.items
        current = ', '.join(item.value for item in items)
        patterns = _split_list(str(self.runner.get_input("Stop patterns (comma separated)", current)))

        for item, pattern in zip(items, patterns):
            if item.value != pattern:
                self.update_stop_pattern(item.model_copy(update={'value': pattern}))
        for item in items[len(patterns):]:
            self.remove_stop_pattern(item.id)
        for pattern in patterns[len(items):]:
            item = self.add_stop_pattern()
            self.update_stop_pattern(item.model_copy(update={'value': pattern}))

    def _edit_mod_types(self) -> None:
        """List the mod types and apply add / edit N / remove N until done."""
        while True:
            items = self.mod_types.items
            for i, item in enumerate(items, 1):
                self.runner.display(f"  {i}. {item.name} ({item.priority}): {item.target_path}")

            command = str(self.runner.get_input("Mod types (add, edit N, remove N, done)", 'done'))
            action, _, index = command.strip().lower().partition(' ')
            index = index.strip()

            if action == 'done':
                return
            if action == 'add':
                self._prompt_mod_type(self.add_mod_type())
            elif action in ('edit', 'remove') and index.isdigit() and 1 <= int(index) <= len(items):
                item = items[int(index) - 1]
                if action == 'edit':
                    self._prompt_mod_type(item)
                else:
                    self.remove_mod_type(item.id)
            else:
                self.runner.display(f"Error: Invalid choice: {command}")

    def _prompt_mod_type(self, item: ModTypeSpec) -> None:
        name = self.runner.get_input("Name", item.name)
        priority = str(self.runner.get_input("Priority (high, low)", item.priority)).lower()
        target_path = self.runner.get_input("Target path, may use {gamePath} and {documents}",
                                            item.target_path)
        if priority not in ('high', 'low'):
            self.runner.display(f"Error: Invalid priority: {priority}, using high")
            priority = 'high'
        self.update_mod_type(item.model_copy(
            update={'name': name, 'priority': priority, 'target_path': target_path}))


def _is_yes(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower().strip() in ('y', 'yes', 'true', '1')


def _split_list(text: str) -> List[str]:
    return [part.strip() for part in text.split(',') if part.strip()]
