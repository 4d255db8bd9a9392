"""SpecLoader - loads and validates YAML flow definitions."""

import yaml
from pathlib import Path
from typing import Optional
from .schema import Flow


class SpecLoader:
    """
    Loads wizard flows from YAML files.

    Validates structure using Pydantic models.
    """

    def __init__(self, base_path: Optional[Path] = None):
        """
        Initialize loader.

        Args:
            base_path: Base directory containing flows/ (default: the gamewizard package)
        """
        if base_path is None:
            base_path = Path(__file__).resolve().parent.parent
        self.base_path = Path(base_path)

    def load_flow(self, flow_name: str) -> Flow:
        """
        Load a flow definition from YAML.

        Args:
            flow_name: Name of flow (e.g., 'add_game')

        Returns:
            Validated Flow instance

        Raises:
            FileNotFoundError: If flow file doesn't exist
            ValidationError: If YAML doesn't match schema
        """
        flow_path = self.base_path / "flows" / f"{flow_name}.yaml"

        if not flow_path.exists():
            raise FileNotFoundError(f"Flow not found: {flow_path}")

        with open(flow_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        return Flow(**data)
