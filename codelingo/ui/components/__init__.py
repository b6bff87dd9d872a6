"""
UI components for CodeLingo.

Component imports are lazy-loaded for faster startup.
Use explicit imports like:
    from codelingo.ui.components.code_panel import create_input_panel
"""

# Lazy-loaded components via __getattr__
_LAZY_IMPORTS = {
    "create_toolbar": "code_panel",
    "create_input_panel": "code_panel",
    "create_output_panel": "code_panel",
    "create_feedback_line": "code_panel",
}


def __getattr__(name: str):
    """Lazy-load component modules on first access."""
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        import importlib

        module = importlib.import_module(f".{module_name}", __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "create_toolbar",
    "create_input_panel",
    "create_output_panel",
    "create_feedback_line",
]
