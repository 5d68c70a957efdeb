"""Core ECS infrastructure: arena, pool, world, systems, pipeline, wire format."""
