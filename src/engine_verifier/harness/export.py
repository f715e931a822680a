"""JSON export of game traces for offline debugging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from engine_verifier.trace import GameTrace

logger = logging.getLogger(__name__)


class TraceWriter:
    """Writes one ``game_<index>.json`` file per trace."""

    def __init__(self, output_dir: Path | str):
        """Initialize trace writer.

        Args:
            output_dir: Directory for trace files (created if missing)
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, game_index: int) -> Path:
        return self.output_dir / f"game_{game_index}.json"

    def write(self, trace: GameTrace) -> Path:
        path = self.path_for(trace.game_index)
        with open(path, "w") as f:
            json.dump(trace.to_dict(), f, indent=2)
        logger.debug(f"Wrote trace for game {trace.game_index} to {path}")
        return path
