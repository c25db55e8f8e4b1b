"""graphwalk — breadth-first inspection of graphs kept in vertex/edge tables."""

__version__ = "0.1.0"
