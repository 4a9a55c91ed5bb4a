"""Name-to-definition registry for entity behaviors."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from functools import lru_cache
from typing import Optional

from .definitions import BUILTIN_BEHAVIORS
from .models import BehaviorDefinition


class BehaviorRegistry:
    """Read-only catalog of behavior definitions keyed by name.

    The registry is an ordinary value: build one, pass it to the resolver
    functions, and swap in a different one in tests.  Registration order is
    preserved by :meth:`list_names`.
    """

    def __init__(self, definitions: Iterable[BehaviorDefinition] = ()) -> None:
        self._definitions: dict[str, BehaviorDefinition] = {}
        for definition in definitions:
            if definition.name in self._definitions:
                raise ValueError(f"Behavior '{definition.name}' is registered twice")
            self._definitions[definition.name] = definition

    def get(self, name: str) -> Optional[BehaviorDefinition]:
        """Return the definition registered under *name*, or ``None``."""
        return self._definitions.get(name)

    def list_names(self) -> list[str]:
        """Return every registered behavior name in registration order."""
        return list(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[BehaviorDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"BehaviorRegistry({self.list_names()!r})"


@lru_cache(maxsize=1)
def default_registry() -> BehaviorRegistry:
    """Return the registry of built-in behaviors, built on first use."""
    return BehaviorRegistry(BUILTIN_BEHAVIORS)
