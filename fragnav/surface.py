# fragnav/surface.py
"""
The rendering surface the navigation engine drives.

A surface owns addressable view containers and the style records tagged
with their ids. The navigator only ever talks to these two abstractions, so
the same engine runs against the headless surface (tests, `fragnav replay`)
and the desktop webview shell.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

from .fragments import EmbeddedFragment, parse_fragments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyleRecord:
    container_id: str
    css: str


class ViewContainer(ABC):
    """An opaque, id-addressed region that fragment content is loaded into."""

    def __init__(self, container_id: str):
        self.container_id = container_id

    @property
    @abstractmethod
    def content(self) -> str:
        ...

    @property
    @abstractmethod
    def is_visible(self) -> bool:
        ...

    @abstractmethod
    def set_visible(self, visible: bool) -> None:
        ...

    @abstractmethod
    def replace_content(self, content: str) -> None:
        ...

    @abstractmethod
    def clear_content(self) -> None:
        ...

    def embedded_fragments(self) -> List[EmbeddedFragment]:
        return parse_fragments(self.content)

    @abstractmethod
    def run_inline(self, fragment: EmbeddedFragment, wrapped_code: str) -> None:
        """Re-inserts an inline fragment carrying `wrapped_code` (the bare body for modules) and runs it."""

    @abstractmethod
    async def load_external(self, fragment: EmbeddedFragment) -> None:
        """
        Replaces an externally-sourced fragment with a fresh node carrying the
        same attributes and waits for its load-or-error signal.

        Raises ExternalFragmentLoadError when the resource fails to load.
        """

    def __repr__(self):
        return f"{type(self).__name__}({self.container_id!r}, visible={self.is_visible})"


class RenderingSurface(ABC):

    @abstractmethod
    def get(self, container_id: str) -> Optional[ViewContainer]:
        ...

    @abstractmethod
    def add_style(self, record: StyleRecord) -> None:
        ...

    @abstractmethod
    def remove_styles(self, container_id: str) -> int:
        """Removes every style record tagged with `container_id`; returns how many."""

    @abstractmethod
    def styles_for(self, container_id: str) -> List[StyleRecord]:
        ...

    def resolve_callback(self, name: str) -> Optional[Callable[[], object]]:
        """Hook defined by the page itself under `name`, for names the callback table lacks."""
        return None


def build_style_block(container_id: str, rules: str) -> str:
    return f"#{container_id} {{\n    {rules.strip()}\n}}"


def apply_style(surface: RenderingSurface, container_id: str, rules: str) -> StyleRecord:
    """
    Installs a scoped style block for the container, tagged with its id.

    Always additive: a reload relies on `clear` having removed the previous
    record first.
    """
    record = StyleRecord(container_id, build_style_block(container_id, rules))
    surface.add_style(record)
    return record


def clear(surface: RenderingSurface, container_id: str) -> None:
    """Drops the container's style records and empties it. Missing containers are fine."""
    removed = surface.remove_styles(container_id)
    container = surface.get(container_id)
    if container is not None:
        container.clear_content()
    logger.debug("[Surface] cleared '%s' (%d style record(s) removed)", container_id, removed)
