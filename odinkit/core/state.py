"""
Run state for OdinKit.

The acquisition result crosses step boundaries: the `cache-hit` value is both
a step output and saved state read by the post-job cache saver. This module
provides the key-value store the core writes those values to, together with
execution search path registration.

Example:
    >>> from odinkit.core.state import create_run_state
    >>>
    >>> run_state = create_run_state()
    >>> run_state.add_path("/opt/odin")
    >>> run_state.set_output("cache-hit", "false")
    >>> run_state.save_state("cache-hit", "false")
    >>>
    >>> # In a later step of the same job
    >>> run_state.get_state("cache-hit")
    'false'
"""

import json
import logging
import os
import threading
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from odinkit.core.filesystem import atomic_write

logger = logging.getLogger(__name__)


class StateError(Exception):
    """Base exception for run state errors."""

    pass


def _prepend_to_process_path(path: str):
    """Prepend a directory to PATH of the current process."""
    current = os.environ.get("PATH", "")
    os.environ["PATH"] = f"{path}{os.pathsep}{current}" if current else path


def _format_value(value: Union[str, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class RunState(ABC):
    """
    Key-value store for outputs and state shared with later steps.

    Outputs are consumed by later workflow steps; state is read back by the
    post-job step of this tool. Both are written once per run.
    """

    @abstractmethod
    def set_output(self, name: str, value: Union[str, bool]):
        """Expose a value as a step output."""
        pass

    @abstractmethod
    def save_state(self, name: str, value: Union[str, bool]):
        """Persist a value for later steps of this tool in the same run."""
        pass

    @abstractmethod
    def get_state(self, name: str) -> Optional[str]:
        """Read back a value saved by save_state(), or None."""
        pass

    @abstractmethod
    def add_path(self, path: Union[str, Path]):
        """Prepend a directory to the execution search path."""
        pass

    def report_cache_hit(self, cache_hit: bool):
        """Write the `cache-hit` value both as output and as saved state."""
        self.set_output("cache-hit", cache_hit)
        self.save_state("cache-hit", cache_hit)


class MemoryRunState(RunState):
    """In-process run state, used for tests and dry runs."""

    def __init__(self, state: Optional[Dict[str, str]] = None):
        self.outputs: Dict[str, str] = {}
        self.state: Dict[str, str] = dict(state or {})
        self.paths: List[str] = []

    def set_output(self, name: str, value: Union[str, bool]):
        self.outputs[name] = _format_value(value)

    def save_state(self, name: str, value: Union[str, bool]):
        self.state[name] = _format_value(value)

    def get_state(self, name: str) -> Optional[str]:
        return self.state.get(name)

    def add_path(self, path: Union[str, Path]):
        self.paths.insert(0, str(path))


class FileRunState(RunState):
    """
    Run state persisted to a JSON document.

    Used for local runs outside of GitHub Actions. The document has three
    sections: 'outputs', 'state' and 'paths'. Registered paths are also
    prepended to PATH of the current process.
    """

    def __init__(self, state_file: Path):
        self.state_file = Path(state_file)
        # Installer and restorer threads may write concurrently
        self._lock = threading.Lock()

    def _load(self) -> dict:
        if not self.state_file.exists():
            return {"outputs": {}, "state": {}, "paths": []}

        try:
            with open(self.state_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StateError(f"Failed to read run state {self.state_file}: {e}")

        data.setdefault("outputs", {})
        data.setdefault("state", {})
        data.setdefault("paths", [])
        return data

    def _save(self, data: dict):
        atomic_write(self.state_file, json.dumps(data, indent=2, sort_keys=True))

    def _update(self, section: str, name: str, value: str):
        with self._lock:
            data = self._load()
            data[section][name] = value
            self._save(data)

    def set_output(self, name: str, value: Union[str, bool]):
        self._update("outputs", name, _format_value(value))
        logger.debug(f"Set output {name}={_format_value(value)}")

    def save_state(self, name: str, value: Union[str, bool]):
        self._update("state", name, _format_value(value))
        logger.debug(f"Saved state {name}={_format_value(value)}")

    def get_state(self, name: str) -> Optional[str]:
        return self._load()["state"].get(name)

    def get_output(self, name: str) -> Optional[str]:
        return self._load()["outputs"].get(name)

    def add_path(self, path: Union[str, Path]):
        path = str(path)
        with self._lock:
            data = self._load()
            if path in data["paths"]:
                data["paths"].remove(path)
            data["paths"].insert(0, path)
            self._save(data)
            _prepend_to_process_path(path)


class ActionsRunState(RunState):
    """
    Run state backed by the GitHub Actions environment files.

    Outputs go to $GITHUB_OUTPUT, state to $GITHUB_STATE and paths to
    $GITHUB_PATH. Saved state is read back from the STATE_<name> variables
    the runner exports to the post step.
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = environ if environ is not None else os.environ
        self._lock = threading.Lock()

    def _append_file_command(self, variable: str, name: str, value: str):
        file_path = self.environ.get(variable)
        if not file_path:
            raise StateError(f"{variable} is not set")

        if "\n" in value:
            delimiter = f"ghadelimiter_{uuid.uuid4()}"
            line = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            line = f"{name}={value}\n"

        with self._lock, open(file_path, "a", encoding="utf-8") as f:
            f.write(line)

    def set_output(self, name: str, value: Union[str, bool]):
        self._append_file_command("GITHUB_OUTPUT", name, _format_value(value))

    def save_state(self, name: str, value: Union[str, bool]):
        self._append_file_command("GITHUB_STATE", name, _format_value(value))

    def get_state(self, name: str) -> Optional[str]:
        return self.environ.get(f"STATE_{name}")

    def add_path(self, path: Union[str, Path]):
        path = str(path)
        path_file = self.environ.get("GITHUB_PATH")
        with self._lock:
            if path_file:
                with open(path_file, "a", encoding="utf-8") as f:
                    f.write(f"{path}\n")
            _prepend_to_process_path(path)


def running_in_actions(environ: Optional[Dict[str, str]] = None) -> bool:
    """Whether the process runs as a GitHub Actions step."""
    environ = environ if environ is not None else os.environ
    return environ.get("GITHUB_ACTIONS", "").lower() == "true"


def create_run_state(state_file: Optional[Path] = None) -> RunState:
    """
    Create the run state for the current environment.

    Args:
        state_file: JSON state file for local runs
            (default: ~/.odinkit/state.json)

    Returns:
        ActionsRunState under GitHub Actions, FileRunState otherwise
    """
    if running_in_actions():
        logger.debug("Using GitHub Actions run state")
        return ActionsRunState()

    state_file = state_file or Path.home() / ".odinkit" / "state.json"
    logger.debug(f"Using file run state: {state_file}")
    return FileRunState(state_file)


__all__ = [
    "StateError",
    "RunState",
    "MemoryRunState",
    "FileRunState",
    "ActionsRunState",
    "running_in_actions",
    "create_run_state",
]
