import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .errors import SnapshotError
from .models import LibraryState

logger = logging.getLogger(__name__)

STATE_FILE = Path(os.environ.get("LINKVAULT_STATE_FILE", "library_state.json"))


def load_state(path: Path = STATE_FILE) -> LibraryState:
    path = Path(path)
    if not path.exists():
        return LibraryState()
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Invalid JSON in {path}: {exc.msg}") from exc
    try:
        state = LibraryState.model_validate(data)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid library state in {path}: {exc}") from exc
    logger.info("Loaded library state from %s", path)
    return state


def save_state(state: LibraryState, path: Path = STATE_FILE) -> None:
    path = Path(path)
    path.write_text(
        json.dumps(state.model_dump(mode="json"), indent=2), encoding="utf-8"
    )
    logger.info("Saved library state to %s", path)
