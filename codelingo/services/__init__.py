"""
Service layer for CodeLingo.

Heavier service imports are lazy-loaded for faster startup.
Use explicit imports like:
    from codelingo.services.conversion_controller import ConversionController
"""

# Fast imports - basic types
from .prompt_builder import PromptBuilder

# Lazy-loaded services via __getattr__
_LAZY_IMPORTS = {
    'CapabilityMonitor': 'capability_monitor',
    'find_chat_entry_point': 'capability_monitor',
    'ChatClient': 'chat_client',
    'ChatRuntime': 'chat_client',
    'ConversionController': 'conversion_controller',
    'FeedbackPresenter': 'feedback',
    'Outcome': 'feedback',
    'normalize': 'response_normalizer',
    'decode_response': 'response_normalizer',
}

# Submodules that can be accessed via __getattr__ (for patching support)
_SUBMODULES = {
    'capability_monitor',
    'chat_client',
    'conversion_controller',
    'feedback',
    'prompt_builder',
    'response_normalizer',
}


def __getattr__(name: str):
    """Lazy-load service modules on first access."""
    import importlib
    # Support accessing submodules directly (for unittest.mock.patch)
    if name in _SUBMODULES:
        return importlib.import_module(f'.{name}', __package__)
    if name in _LAZY_IMPORTS:
        module_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(f'.{module_name}', __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'CapabilityMonitor',
    'find_chat_entry_point',
    'ChatClient',
    'ChatRuntime',
    'ConversionController',
    'FeedbackPresenter',
    'Outcome',
    'PromptBuilder',
    'normalize',
    'decode_response',
]
