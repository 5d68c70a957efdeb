"""System base class for codec stages.

Systems are the logic layer. They read the components a stage needs from
an entity and attach the components the stage produces.

Systems support two modes:
- 'encode' or 'forward': pixels towards hash bytes
- 'decode' or 'inverse': hash bytes towards pixels
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Literal

from thumbhash.core.world import World

Mode = Literal["encode", "decode", "forward", "inverse"]


class System(ABC):
    """Base class for all codec systems.

    Attributes:
        mode: Transformation direction ('encode'/'forward'/'decode'/'inverse')
    """

    def __init__(self, mode: Mode = "forward") -> None:
        if mode not in ("encode", "decode", "forward", "inverse"):
            raise ValueError(f"Unknown mode: {mode!r}")
        self.mode = mode

    @property
    def is_forward(self) -> bool:
        """True when running in the encode direction."""
        return self.mode in ("encode", "forward")

    @abstractmethod
    def required_components(self) -> list[type]:
        """Return list of component types this system requires as input."""

    @abstractmethod
    def produced_components(self) -> list[type]:
        """Return list of component types this system produces as output."""

    @abstractmethod
    def run(self, world: World, eids: list[int]) -> None:
        """Execute system on given entities."""

    def can_run(self, world: World, eid: int) -> bool:
        """Check if entity has all required components."""
        return all(world.has_component(eid, ct) for ct in self.required_components())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(mode={self.mode})"
