"""CRUD package exports with lazy module loading.

Submodules are imported on first attribute access so model/schema imports
stay out of unrelated unit-test collection.
"""

from importlib import import_module

__all__ = ["user", "review"]


def __getattr__(name):
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
