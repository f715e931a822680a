"""Locate and construct the engine under test.

An engine is named by a target string:

    package.module:ClassName
    package.module.ClassName
    path/to/engine.py:ClassName

Construction prefers the two-argument form ``Engine(players, action_types)``
and falls back to ``Engine(players)`` for engines that pick their own
action cards.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from engine_verifier.contract import Engine, EngineConstructionError, Player
from engine_verifier.models.cards import CardType

logger = logging.getLogger(__name__)

REQUIRED_ENGINE_METHODS = ("set_observer", "play")


def _load_module_from_file(path: Path) -> Any:
    if not path.is_file():
        raise EngineConstructionError(f"Engine file not found: {path}")
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise EngineConstructionError(f"Cannot import engine file: {path}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise EngineConstructionError(f"Cannot import engine file {path}: {e}") from e
    return module


def _split_target(target: str) -> tuple[str, str]:
    if ":" in target:
        module_part, _, class_name = target.rpartition(":")
    elif "." in target:
        module_part, _, class_name = target.rpartition(".")
    else:
        raise EngineConstructionError(
            f"Engine target must be 'module:Class' or 'file.py:Class', got {target!r}"
        )
    if not module_part or not class_name:
        raise EngineConstructionError(f"Invalid engine target: {target!r}")
    return module_part, class_name


def _accepts_positional(signature: inspect.Signature, count: int) -> bool:
    try:
        signature.bind(*([None] * count))
    except TypeError:
        return False
    return True


class EngineLoader:
    """Builds engine instances from an engine class.

    Usable directly as an EngineFactory: ``loader(players, action_types)``.
    """

    def __init__(self, engine_class: type):
        """Initialize the loader.

        Args:
            engine_class: Class implementing set_observer() and play()

        Raises:
            EngineConstructionError: If the class lacks a required method
        """
        missing = [
            m for m in REQUIRED_ENGINE_METHODS if not callable(getattr(engine_class, m, None))
        ]
        if missing:
            raise EngineConstructionError(
                f"{engine_class.__qualname__} does not implement Engine "
                f"(missing: {', '.join(missing)})"
            )
        self.engine_class = engine_class
        try:
            self._signature: Optional[inspect.Signature] = inspect.signature(engine_class)
        except (TypeError, ValueError):
            self._signature = None

    @classmethod
    def from_class(cls, engine_class: type) -> EngineLoader:
        """For use with an engine class already importable (e.g. in tests)."""
        return cls(engine_class)

    @classmethod
    def from_target(cls, target: str) -> EngineLoader:
        """Load an engine class from a target string.

        Raises:
            EngineConstructionError: If the module or class cannot be found
        """
        module_part, class_name = _split_target(target)
        if module_part.endswith(".py"):
            module = _load_module_from_file(Path(module_part))
        else:
            try:
                module = importlib.import_module(module_part)
            except Exception as e:
                raise EngineConstructionError(
                    f"Cannot import engine module {module_part!r}: {e}"
                ) from e

        engine_class = getattr(module, class_name, None)
        if not isinstance(engine_class, type):
            raise EngineConstructionError(f"{class_name!r} is not a class in {module_part!r}")
        logger.info(f"Loaded engine class {engine_class.__module__}.{engine_class.__qualname__}")
        return cls(engine_class)

    @property
    def name(self) -> str:
        return f"{self.engine_class.__module__}.{self.engine_class.__qualname__}"

    def create(self, players: Sequence[Player], action_types: Sequence[CardType]) -> Engine:
        """Create a new engine bound to the given players and action types.

        Raises:
            EngineConstructionError: If neither constructor form is available
        """
        if self._signature is None:
            return self._create_uninspectable(players, action_types)
        if _accepts_positional(self._signature, 2):
            return self.engine_class(list(players), list(action_types))
        if _accepts_positional(self._signature, 1):
            logger.debug(f"{self.name} takes no action-type list; using its defaults")
            return self.engine_class(list(players))
        raise EngineConstructionError(
            f"{self.name} has neither an (players, action_types) nor a (players) constructor"
        )

    def _create_uninspectable(
        self, players: Sequence[Player], action_types: Sequence[CardType]
    ) -> Engine:
        # No signature to bind against, so let the constructor decide.
        try:
            return self.engine_class(list(players), list(action_types))
        except TypeError as two_arg_error:
            logger.debug(f"{self.name}(players, action_types) failed: {two_arg_error}")
        try:
            return self.engine_class(list(players))
        except TypeError as e:
            raise EngineConstructionError(
                f"{self.name} accepted neither (players, action_types) nor (players): {e}"
            ) from e

    __call__ = create
