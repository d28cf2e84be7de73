# fragnav/memory.py
import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .errors import ExternalFragmentLoadError
from .fragments import EmbeddedFragment
from .surface import RenderingSurface, StyleRecord, ViewContainer

logger = logging.getLogger(__name__)

JournalEntry = Tuple[str, str, str]
InlineExecutor = Callable[["InMemoryContainer", EmbeddedFragment, str], None]


class InMemoryContainer(ViewContainer):
    def __init__(self, container_id: str, surface: "InMemorySurface"):
        super().__init__(container_id)
        self._surface = surface
        self._content = ""
        self._visible = False

    @property
    def content(self) -> str:
        return self._content

    @property
    def is_visible(self) -> bool:
        return self._visible

    def set_visible(self, visible: bool) -> None:
        self._visible = bool(visible)

    def replace_content(self, content: str) -> None:
        self._content = content

    def clear_content(self) -> None:
        self._content = ""

    def run_inline(self, fragment: EmbeddedFragment, wrapped_code: str) -> None:
        self._surface.journal.append(("inline", self.container_id, str(fragment.index)))
        if self._surface.executor is not None:
            self._surface.executor(self, fragment, wrapped_code)

    async def load_external(self, fragment: EmbeddedFragment) -> None:
        journal = self._surface.journal
        journal.append(("external-start", self.container_id, fragment.src))
        fetcher = self._surface.fetcher
        body = await fetcher.fetch(fragment.src) if fetcher is not None else None
        if body is None:
            journal.append(("external-failed", self.container_id, fragment.src))
            raise ExternalFragmentLoadError(fragment.src, "resource unavailable")
        journal.append(("external-done", self.container_id, fragment.src))


class InMemorySurface(RenderingSurface):
    """
    Headless rendering surface.

    Containers keep content and visibility in memory and every fragment run is
    appended to `journal` as (event, container_id, detail). External fragments
    are retrieved through `fetcher`, so their load is a real suspension point;
    inline fragments are handed to `executor` when one is given.
    """

    def __init__(
        self,
        container_ids: Iterable[str] = (),
        fetcher=None,
        executor: Optional[InlineExecutor] = None,
    ):
        self.fetcher = fetcher
        self.executor = executor
        self.journal: List[JournalEntry] = []
        self._containers: Dict[str, InMemoryContainer] = {}
        self._styles: List[StyleRecord] = []
        for container_id in container_ids:
            self.add_container(container_id)

    def add_container(self, container_id: str) -> InMemoryContainer:
        container = self._containers.get(container_id)
        if container is None:
            container = InMemoryContainer(container_id, self)
            self._containers[container_id] = container
        return container

    def get(self, container_id: str) -> Optional[InMemoryContainer]:
        return self._containers.get(container_id)

    @property
    def containers(self) -> Dict[str, InMemoryContainer]:
        return dict(self._containers)

    def visible_ids(self) -> List[str]:
        return [cid for cid, c in self._containers.items() if c.is_visible]

    def add_style(self, record: StyleRecord) -> None:
        self._styles.append(record)

    def remove_styles(self, container_id: str) -> int:
        before = len(self._styles)
        self._styles = [s for s in self._styles if s.container_id != container_id]
        return before - len(self._styles)

    def styles_for(self, container_id: str) -> List[StyleRecord]:
        return [s for s in self._styles if s.container_id == container_id]
