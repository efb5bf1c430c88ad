"""docgraph - convert a semantic program model into a serializable documentation graph."""

__version__ = "0.1.0"
