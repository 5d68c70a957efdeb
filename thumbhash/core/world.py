"""World: the entity registry one codec call works in.

An encode call spawns a single entity from the source pixels and the
systems attach LPQA, Spectrum, HashFields and HashBytes to it in turn; a
decode call starts from a HashBytes entity and ends with ReconRGBA. All
planes live in the World's arena, so clear() releases them in one step.

Example:
    >>> world = World()
    >>> eid = world.spawn_image(np.zeros((4, 4, 4), dtype=np.uint8))
    >>> world.query(RGBA)
    [0]
    >>> world.clear()
"""

from __future__ import annotations

from typing import Any, TypeVar

import numpy as np
from pydantic import BaseModel

from thumbhash.core.arena import Arena

Component = BaseModel

T = TypeVar("T", bound=Component)


class World:
    """Entities, their components, and the arena backing their planes.

    Attributes:
        arena: Scratch memory for every TensorRef held by a component
        metadata: Free-form per-entity notes (e.g. the source image shape)
    """

    def __init__(self, arena_bytes: int = 1 << 20, arena: Arena | None = None):
        """Create an empty world over a new or borrowed arena.

        Args:
            arena_bytes: Size of the arena created when none is given
            arena: Arena checked out from a pool; the World does not own it
        """
        self.arena = arena if arena is not None else Arena(size_bytes=arena_bytes)
        self._next_eid = 0
        self._store: dict[type[Component], dict[int, Component]] = {}
        self.metadata: dict[int, dict[str, Any]] = {}

    def new_entity(self) -> int:
        eid = self._next_eid
        self._next_eid += 1
        self.metadata[eid] = {}
        return eid

    def spawn_image(self, img: np.ndarray) -> int:
        """Copy an (H, W, 4) uint8 buffer into the arena as a new RGBA entity.

        Raises:
            ValueError: If the buffer is not a non-empty RGBA uint8 image
        """
        from thumbhash.components.image import RGBA

        if img.ndim != 3 or img.shape[2] != 4:
            raise ValueError(f"Expected image with shape (H, W, 4), got {img.shape}")
        if img.shape[0] < 1 or img.shape[1] < 1:
            raise ValueError(f"Image must hold at least one pixel, got {img.shape}")
        if img.dtype != np.uint8:
            raise ValueError(f"Expected dtype uint8, got {img.dtype}")

        eid = self.new_entity()
        self.add_component(eid, RGBA(pix=self.arena.copy_tensor(img)))
        self.metadata[eid]["image_shape"] = img.shape
        return eid

    def clear(self) -> None:
        """Forget every entity and reset the arena, staling all refs."""
        self.arena.reset()
        self._next_eid = 0
        self._store.clear()
        self.metadata.clear()

    def add_component(self, eid: int, component: Component) -> None:
        """Attach ``component`` to ``eid``, replacing one of the same type.

        Raises:
            ValueError: If the entity does not exist
        """
        if eid not in self.metadata:
            raise ValueError(f"Entity {eid} does not exist")
        self._store.setdefault(type(component), {})[eid] = component

    def get_component(self, eid: int, comp_type: type[T]) -> T:
        """Return the ``comp_type`` component of ``eid``.

        Raises:
            KeyError: If the entity has no component of that type
        """
        by_entity = self._store.get(comp_type)
        if by_entity is None:
            raise KeyError(f"No entities have component type {comp_type.__name__}")
        if eid not in by_entity:
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")
        return by_entity[eid]  # type: ignore[return-value]

    def has_component(self, eid: int, comp_type: type[Component]) -> bool:
        return eid in self._store.get(comp_type, {})

    def remove_component(self, eid: int, comp_type: type[Component]) -> None:
        """Detach the ``comp_type`` component from ``eid``.

        Raises:
            KeyError: If the entity has no component of that type
        """
        if not self.has_component(eid, comp_type):
            raise KeyError(f"Entity {eid} does not have component {comp_type.__name__}")
        del self._store[comp_type][eid]

    def query(self, *comp_types: type[Component]) -> list[int]:
        """Sorted ids of entities holding every one of ``comp_types``.

        With no types, every entity.
        """
        if not comp_types:
            return list(self.metadata)

        matches = set(self._store.get(comp_types[0], {}))
        for comp_type in comp_types[1:]:
            matches &= set(self._store.get(comp_type, {}))
        return sorted(matches)

    def pipe(self, entity: int) -> Any:
        """Start a system chain on ``entity``.

        Example:
            >>> spectrum = (
            ...     world.pipe(entity)
            ...     .to(ColorConvert(mode="forward"))
            ...     .to(CosineTransform(mode="forward"))
            ...     .out(Spectrum)
            ... )
        """
        from thumbhash.core.pipeline import Pipe

        return Pipe(world=self, entity=entity)

    def __repr__(self) -> str:
        return (
            f"World(entities={len(self.metadata)}, "
            f"component_types={len(self._store)}, arena={self.arena})"
        )
