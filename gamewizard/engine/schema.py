"""Pydantic models for the wizard flow definition and the compiled game spec."""

from enum import Enum
from typing import List, Dict, Any, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class StepId(str, Enum):
    """Pages of the add-game dialog, in display order."""

    INTRO = 'intro'
    REFERENCES = 'references'
    INFO = 'info'
    TECHNICAL = 'technical'
    MODTYPES = 'modtypes'
    REVIEW = 'review'


STEPS: List[StepId] = list(StepId)


class FieldKey(str, Enum):
    """Keys of the answers collected by the wizard."""

    CATALOG_DOMAIN = 'catalog_domain'
    STORE_GAME = 'store_game'
    NAME = 'name'
    IMAGE_URL = 'image_url'
    GAME_PATH = 'game_path'
    MOD_PATH = 'mod_path'
    EXE_PATH = 'exe_path'
    MERGE_MODS = 'merge_mods'


Severity = Literal['success', 'warning', 'error']
Priority = Literal['high', 'low']


class ValidationResult(BaseModel):
    """Verdict of a single field validator."""

    model_config = ConfigDict(frozen=True)

    severity: Severity = Field(..., description="success, warning or error")
    message: Optional[str] = Field(None, description="Explanation shown next to the field")


class FieldDef(BaseModel):
    """
    A single input on a wizard step.

    Types:
    - string: free text
    - boolean: yes/no toggle
    - select: one of the store game options
    - directory / file: filesystem path, browsable through the runner
    """

    model_config = ConfigDict(extra="allow")

    key: FieldKey = Field(..., description="Field key in the FieldStore")
    type: Literal['string', 'boolean', 'select', 'directory', 'file'] = Field('string', description="Input type")
    prompt: str = Field(..., description="Label / prompt text")
    help: Optional[str] = Field(None, description="Help text shown below the input")
    validator: Optional[str] = Field(None, description="Validator function name (e.g., 'game.validate_name')")
    mandatory: bool = Field(False, description="An error from the validator blocks saving")
    default_value: Optional[Any] = Field(None, description="Value assumed when the field is unset")
    default_from: Optional[FieldKey] = Field(None, description="Field to read the default from")
    filters: Optional[List[Dict[str, Any]]] = Field(None, description="File dialog filters for file fields")


class StepDef(BaseModel):
    """One page of the wizard."""

    model_config = ConfigDict(extra="allow")

    id: StepId = Field(..., description="Step identifier")
    title: str = Field(..., description="Short title shown in the step bar")
    description: str = Field(..., description="Subtitle shown in the step bar")
    body: Optional[str] = Field(None, description="Explanatory text for the page")
    fields: List[FieldDef] = Field(default_factory=list, description="Inputs on this page")
    collections: List[Literal['stop_patterns', 'mod_types']] = Field(
        default_factory=list, description="Editable item lists on this page")
    entry_hook: Optional[str] = Field(None, description="Hook run when the step becomes current")


class Flow(BaseModel):
    """The complete step sequence of the wizard."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Flow identifier (e.g., 'add_game')")
    version: str = Field(..., description="Flow definition version")
    description: str = Field(..., description="Human-readable description")
    steps: List[StepDef] = Field(default_factory=list, description="Ordered wizard pages")

    @model_validator(mode='after')
    def _check_step_order(self) -> 'Flow':
        found = [step.id for step in self.steps]
        if found != STEPS:
            expected = ', '.join(step.value for step in STEPS)
            raise ValueError(f"Steps must be exactly [{expected}] in this order")
        return self

    def get_step(self, step_id: StepId) -> StepDef:
        """Return the definition of *step_id*."""
        for step in self.steps:
            if step.id == step_id:
                return step
        raise KeyError(step_id)

    def field_defs(self) -> Dict[FieldKey, FieldDef]:
        """All field definitions of the flow keyed by field key."""
        return {field.key: field for step in self.steps for field in step.fields}


class _SpecModel(BaseModel):
    """Base for records serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ModTypeSpec(_SpecModel):
    """Secondary install destination for a subset of mods."""

    id: str
    name: str
    priority: Priority = 'high'
    target_path: str = ''


class StopPatternSpec(_SpecModel):
    """Glob marking the directory inside an archive that maps to the mod path."""

    id: str
    value: str


class DiscoverySpec(_SpecModel):
    """How the generated extension locates an installed copy of the game."""

    ids: List[str] = Field(default_factory=list)
    names: List[str] = Field(default_factory=list)


class GameInfo(_SpecModel):
    """Game section of the compiled spec."""

    id: str
    name: str
    executable: str
    logo: str
    merge_mods: bool = True
    mod_path: str = '.'
    mod_path_is_relative: bool = True
    required_files: List[str] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)
    environment: Dict[str, str] = Field(default_factory=dict)


class GameSpec(_SpecModel):
    """Self-contained output of the wizard, handed to the export step."""

    game: GameInfo
    discovery: DiscoverySpec = Field(default_factory=DiscoverySpec)
    mod_types: Optional[List[ModTypeSpec]] = None
