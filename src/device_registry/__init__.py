"""Device Registry - device groups with namespace isolation.

Tracks registered devices, their reported system information, and the
static or expression-driven groups they belong to.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
