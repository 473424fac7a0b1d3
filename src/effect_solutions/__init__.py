"""Effect Solutions - curated Effect best-practice docs over MCP and a CLI."""

__version__ = "0.4.0"
