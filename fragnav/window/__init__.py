# fragnav/window/__init__.py
"""Desktop shell: a QtWebEngine host page driven by the navigator. Requires PySide6."""
