"""Node inventory helpers: data model, resource parsing, taints, sorting, table rendering, retries and terminal detection."""

__version__ = "0.1.0"

__all__ = ["model", "parser", "taints", "sorting", "render", "retry", "terminal"]