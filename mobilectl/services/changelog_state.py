"""Persisted position of the last changelog generation"""

import json
import logging
from pathlib import Path
from typing import Union

from ..models.changelog import ChangelogState

logger = logging.getLogger(__name__)


class ChangelogStateManager:
    """Read and write ``.mobilectl/changelog-state.json``"""

    def __init__(self, state_file: Union[str, Path]):
        self.state_file = Path(state_file)

    def get_state(self) -> ChangelogState:
        """Saved state; empty when missing or unreadable"""
        if not self.state_file.is_file():
            return ChangelogState()
        try:
            data = json.loads(self.state_file.read_text(encoding='utf-8'))
        except ValueError as e:
            logger.warning(f"Ignoring corrupt changelog state {self.state_file}: {e}")
            return ChangelogState()
        if not isinstance(data, dict):
            return ChangelogState()
        return ChangelogState.from_dict(data)

    def save_state(self, state: ChangelogState) -> None:
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        self.state_file.write_text(json.dumps(state.to_dict(), indent=2) + "\n", encoding='utf-8')
        logger.debug(f"Saved changelog state to {self.state_file}")

    def reset(self) -> None:
        """Forget the last generation so the next one starts from scratch"""
        if self.state_file.exists():
            self.state_file.unlink()
