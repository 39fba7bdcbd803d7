"""hubtools - GitHub REST operations as MCP tools, grouped into toolsets.

Tools are bundled into named toolsets that are enabled as a unit, either
at startup or at runtime through the dynamic toolset.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
