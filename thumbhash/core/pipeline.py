"""Fluent chaining of codec stages.

The encode path is ColorConvert → CosineTransform → Quantize → PackHash and
the decode path runs the same systems in inverse mode, in reverse order.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel

if TYPE_CHECKING:
    from thumbhash.core.system import System
    from thumbhash.core.world import World

T = TypeVar("T", bound=BaseModel)

logger = logging.getLogger(__name__)


class Pipe:
    """Ordered list of systems bound to an entity.

    Nothing runs until `.out()` (or `.execute()`); each system is checked
    against the entity's components right before it runs.

    Example:
        >>> hash_bytes = (
        ...     world.pipe(entity)
        ...     | ColorConvert(mode="encode")
        ...     | CosineTransform(mode="encode")
        ...     | Quantize(mode="encode")
        ...     | PackHash(mode="encode")
        ... ).out(HashBytes)
    """

    def __init__(self, world: "World", entity: int) -> None:
        self.world: Any = world
        self.entities = [entity]
        self.systems: list[Any] = []

    def to(self, system: "System") -> "Pipe":
        self.systems.append(system)
        return self

    def __or__(self, system: "System") -> "Pipe":
        return self.to(system)

    def out(self, component_type: type[T]) -> T:
        """Run the chain and return the entity's ``component_type``.

        Raises:
            RuntimeError: If a system's inputs are missing
            KeyError: If the chain never produced ``component_type``
        """
        self.execute()
        return self.world.get_component(self.entities[0], component_type)  # type: ignore[no-any-return]

    def execute(self) -> None:
        """Run every system in order on the ready entities.

        Raises:
            RuntimeError: If no entity satisfies a system's requirements
        """
        for system in self.systems:
            ready = [eid for eid in self.entities if system.can_run(self.world, eid)]
            if not ready:
                missing = [ct.__name__ for ct in system.required_components()]
                raise RuntimeError(
                    f"System {type(system).__name__} cannot run: "
                    f"entities {self.entities} lack required components {missing}"
                )

            logger.debug("running %r on entities %s", system, ready)
            system.run(self.world, ready)
