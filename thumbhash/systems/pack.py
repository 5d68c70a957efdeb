"""Bit packing system.

Forward mode: HashFields → HashBytes
Inverse mode: HashBytes → HashFields (raises InvalidHash on malformed input)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from thumbhash.components.hash import HashBytes, HashFields
from thumbhash.core.serialization import deserialize_hash, serialize_hash
from thumbhash.core.system import System

if TYPE_CHECKING:
    from thumbhash.core.world import World


class PackHash(System):
    """Serialize quantized hash fields to bytes and back."""

    def required_components(self) -> list[type]:
        """Return required component types based on mode."""
        return [HashFields] if self.is_forward else [HashBytes]

    def produced_components(self) -> list[type]:
        """Return produced component types based on mode."""
        return [HashBytes] if self.is_forward else [HashFields]

    def run(self, world: World, eids: list[int]) -> None:
        """Pack or unpack each entity's hash."""
        for eid in eids:
            if self.is_forward:
                fields = world.get_component(eid, HashFields)
                world.add_component(eid, HashBytes(data=serialize_hash(fields)))
            else:
                packed = world.get_component(eid, HashBytes)
                world.add_component(eid, deserialize_hash(packed.data))
