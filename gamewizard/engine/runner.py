"""ActionRunner interface - all side effects go here."""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Dict, Any, Optional

import requests

logger = logging.getLogger(__name__)


class ActionRunner(ABC):
    """Interface to the host: console, file dialogs, disk, network and notifications."""

    @abstractmethod
    def display(self, message: str) -> None:
        """Display a message to the user.

        Args:
            message: Text to display (may contain newlines)
        """
        pass

    @abstractmethod
    def get_input(self, prompt: str, default: Any = None) -> Any:
        """Get input from user.

        Args:
            prompt: Question to ask user
            default: Default value if user presses Enter (shown in [brackets])

        Returns:
            User's input string (or default if empty)
        """
        pass

    @abstractmethod
    def select_path(self, mode: str, default_path: Optional[str] = None,
                    filters: Optional[List[Dict[str, Any]]] = None) -> Optional[str]:
        """Let the user pick a file or directory.

        Args:
            mode: 'file' or 'directory'
            default_path: Location the dialog starts in
            filters: File filters, e.g. [{'name': 'Executables', 'extensions': ['exe']}]

        Returns:
            Selected path, or None if the user cancelled
        """
        pass

    @abstractmethod
    def read_file(self, path: str) -> str:
        """Read a UTF-8 text file."""
        pass

    @abstractmethod
    def ensure_dir(self, path: str) -> None:
        """Create directory (and parents); succeeds if it already exists."""
        pass

    @abstractmethod
    def write_file(self, path: str, content: str) -> None:
        """Write content to a file.

        Args:
            path: Path to file to write
            content: Content to write to file
        """
        pass

    @abstractmethod
    def write_bytes(self, path: str, data: bytes) -> None:
        """Write raw bytes to a file."""
        pass

    @abstractmethod
    def fetch(self, url: str, timeout: float = 30) -> bytes:
        """Download *url* and return the response body.

        Raises:
            Exception: Any network or HTTP error
        """
        pass

    @abstractmethod
    def notify(self, kind: str, title: str, message: str,
               actions: Optional[List[Dict[str, str]]] = None) -> None:
        """Report an outcome to the host.

        Args:
            kind: 'success' or 'error'
            title: Short headline
            message: Details (e.g. export path or error cause)
            actions: Follow-up actions as [{'title': ..., 'text': ...}]
        """
        pass


class RealActionRunner(ActionRunner):
    """Console implementation - actually does things."""

    def __init__(self, verbose: bool = False):
        """Initialize with optional verbose mode.

        Args:
            verbose: If True, echo file operations to the console
        """
        self.verbose = verbose
        if os.environ.get('GAMEWIZARD_VERBOSE'):
            self.verbose = True

    def _trace(self, message: str) -> None:
        logger.debug(message)
        if self.verbose:
            print(f"[VERBOSE] {message}")

    def display(self, message: str) -> None:
        """Print message to stdout."""
        print(message)

    def get_input(self, prompt: str, default: Any = None) -> Any:
        """Read from stdin with optional default."""
        if default is not None:
            if isinstance(default, bool):
                default_display = 'y/N' if not default else 'Y/n'
            else:
                default_display = str(default)

            response = input(f"{prompt} [{default_display}]: ").strip()
            print()

            if response:
                return response
            return str(default) if not isinstance(default, bool) else default

        response = input(f"{prompt}: ").strip()
        print()
        return response

    def select_path(self, mode: str, default_path: Optional[str] = None,
                    filters: Optional[List[Dict[str, Any]]] = None) -> Optional[str]:
        """Ask for a path on the console; blank input cancels."""
        kind = 'file' if mode == 'file' else 'directory'
        if filters:
            extensions = ', '.join(ext for flt in filters for ext in flt.get('extensions', []))
            prompt = f"Path to {kind} ({extensions})"
        else:
            prompt = f"Path to {kind}"

        response = self.get_input(prompt, default_path)
        if not response:
            return None

        selected = os.path.expanduser(str(response))
        exists = os.path.isfile(selected) if kind == 'file' else os.path.isdir(selected)
        if not exists:
            self.display(f"Warning: {selected} does not exist")
        return selected

    def read_file(self, path: str) -> str:
        self._trace(f"Reading {path}")
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def ensure_dir(self, path: str) -> None:
        self._trace(f"Creating directory {path}")
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: str, content: str) -> None:
        """Write content to a file."""
        self._trace(f"Writing {path}")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)

    def write_bytes(self, path: str, data: bytes) -> None:
        self._trace(f"Writing {len(data)} bytes to {path}")
        with open(path, 'wb') as f:
            f.write(data)

    def fetch(self, url: str, timeout: float = 30) -> bytes:
        self._trace(f"Downloading {url}")
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.content

    def notify(self, kind: str, title: str, message: str,
               actions: Optional[List[Dict[str, str]]] = None) -> None:
        marker = '✓' if kind == 'success' else '✗'
        print(f"{marker} {title}")
        if message:
            print(f"  {message}")
        for action in actions or []:
            print()
            print(f"[{action['title']}]")
            print(action.get('text', ''))


class MockActionRunner(ActionRunner):
    """Mock for testing - records calls."""

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.input_queue = []  # Pre-scripted user inputs for testing
        self.files: Dict[str, Any] = {}

    def display(self, message: str) -> None:
        """Capture display call for test verification."""
        self.calls.append(('display', message))

    def get_input(self, prompt: str, default: Any = None) -> Any:
        """Return next value from input_queue."""
        self.calls.append(('get_input', prompt, default))

        if self.input_queue:
            response = self.input_queue.pop(0)
            # Match RealActionRunner: apply default if response is empty
            return response if response else (default if default is not None else '')

        return default if default is not None else ''

    def select_path(self, mode: str, default_path: Optional[str] = None,
                    filters: Optional[List[Dict[str, Any]]] = None) -> Optional[str]:
        """Return responses['select_path']; a list is consumed one entry per call."""
        self.calls.append(('select_path', mode, default_path, filters))
        response = self.responses.get('select_path')
        if isinstance(response, list):
            return response.pop(0) if response else None
        return response

    def read_file(self, path: str) -> str:
        self.calls.append(('read_file', path))
        if 'read_file' in self.responses:
            return self._respond('read_file')
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def ensure_dir(self, path: str) -> None:
        self.calls.append(('ensure_dir', path))
        self._respond('ensure_dir')

    def write_file(self, path: str, content: str) -> None:
        """Record write_file call for test verification."""
        self.calls.append(('write_file', path, content))
        self._respond('write_file')
        self.files[path] = content

    def write_bytes(self, path: str, data: bytes) -> None:
        self.calls.append(('write_bytes', path, data))
        self._respond('write_bytes')
        self.files[path] = data

    def fetch(self, url: str, timeout: float = 30) -> bytes:
        self.calls.append(('fetch', url))
        return self._respond('fetch', b'')

    def notify(self, kind: str, title: str, message: str,
               actions: Optional[List[Dict[str, str]]] = None) -> None:
        self.calls.append(('notify', kind, title, message, actions))

    def _respond(self, name: str, default: Any = None) -> Any:
        """Return the scripted response for *name*; exceptions are raised."""
        response = self.responses.get(name, default)
        if isinstance(response, Exception):
            raise response
        return response
