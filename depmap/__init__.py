"""depmap: dependency-graph analysis for Cargo projects."""

__version__ = "0.1.0"
