"""JSON projection of the reflection graph."""

from docgraph.serialization.serializer import OMIT, SerializeWorker, Serializer

__all__ = ["OMIT", "SerializeWorker", "Serializer"]
