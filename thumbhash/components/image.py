"""Image components: RGBA, ReconRGBA."""

from pydantic import BaseModel

from thumbhash.core.arena import TensorRef


class Component(BaseModel):
    """Base class for all ECS components.

    Components are data containers using Pydantic for validation and type safety.
    Pixel and channel planes are stored as TensorRef handles pointing into the arena.
    """

    model_config = {"arbitrary_types_allowed": True}


class RGBA(Component):
    """Source pixel buffer.

    Attributes:
        pix: TensorRef to RGBA pixel data (H, W, 4) uint8
    """

    pix: TensorRef


class ReconRGBA(Component):
    """Placeholder pixels rebuilt from a hash.

    Attributes:
        pix: TensorRef to RGBA pixel data (H, W, 4) uint8
    """

    pix: TensorRef
