"""Core package for the weekly settlement report parser."""

__all__ = [
    "config",
    "models",
    "schema",
    "text",
    "numeral",
    "locator",
    "resolver",
    "extractor",
    "grouper",
    "checker",
    "parser",
    "loader",
    "cli",
]
