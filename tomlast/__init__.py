"""Low-level TOML parser producing a syntax tree for each top-level expression."""

__version__ = "0.1.0"
__all__ = ["ast", "errors", "kind", "parser", "scanner", "strings"]