# fragnav/__init__.py

"""
fragnav: view-fragment navigation for single host pages.

Loads remote fragments (markup plus embedded scripts) into named view
containers, re-runs their scripts safely on every load, and keeps an ordered
navigation history with back-navigation. The desktop shell lives in
`fragnav.window` and is imported separately since it needs PySide6.
"""

# --- Configuration & Logging ---
from .config import Config, DEFAULT_STYLE_RULES, DEFAULT_WAIT_MS
from .log import configure_logging

# --- Errors ---
from .errors import (
    NavigationError,
    FetchError,
    ContainerNotFound,
    CodeExecutionError,
    ExternalFragmentLoadError,
)

# --- Navigation Engine ---
from .registry import NavigationStack
from .fetcher import ContentFetcher
from .fragments import EmbeddedFragment, parse_fragments, wrap_inline
from .surface import RenderingSurface, ViewContainer, StyleRecord, apply_style, clear
from .memory import InMemorySurface, InMemoryContainer
from .reactivator import reactivate, ReactivationReport
from .callbacks import CallbackTable, dispatch
from .navigator import Navigator, NavigationResult, NavigationStatus

__all__ = [
    # Configuration
    'Config', 'DEFAULT_STYLE_RULES', 'DEFAULT_WAIT_MS', 'configure_logging',
    # Errors
    'NavigationError', 'FetchError', 'ContainerNotFound', 'CodeExecutionError',
    'ExternalFragmentLoadError',
    # Engine
    'NavigationStack', 'ContentFetcher', 'EmbeddedFragment', 'parse_fragments', 'wrap_inline',
    'RenderingSurface', 'ViewContainer', 'StyleRecord', 'apply_style', 'clear',
    'InMemorySurface', 'InMemoryContainer', 'reactivate', 'ReactivationReport',
    'CallbackTable', 'dispatch',
    'Navigator', 'NavigationResult', 'NavigationStatus',
]

__version__ = "0.1.0"
