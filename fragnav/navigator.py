# fragnav/navigator.py
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .callbacks import CallbackSpec, CallbackTable, dispatch
from .config import Config
from .errors import ContainerNotFound
from .reactivator import reactivate
from .registry import NavigationStack
from .surface import RenderingSurface, apply_style, clear

logger = logging.getLogger(__name__)


class NavigationStatus(str, Enum):
    LOADED = "loaded"    # fetched, injected, reactivated
    SHOWN = "shown"      # already registered, only promoted
    ABORTED = "aborted"  # fetch failed or container missing
    FAILED = "failed"    # unexpected error


@dataclass(frozen=True)
class NavigationResult:
    status: NavigationStatus
    container_id: str
    address: str = ""
    reason: str = ""

    def __bool__(self):
        return self.status in (NavigationStatus.LOADED, NavigationStatus.SHOWN)


class Navigator:
    """
    Loads fragments into view containers and keeps the navigation history.

    `navigate_forward` shows a container, fetching and reactivating its
    fragment unless it is already registered; `navigate_back` drops the most
    recent container and shows the one before it. Neither ever raises: every
    failure is logged and reported through the return value.

    Forward navigations are served one at a time, in call order. A call made
    while another is suspended (fetching, loading an external fragment, or
    settling) waits for it to finish instead of interleaving with it.

    :param surface: Rendering surface owning the containers and style records.
    :param fetcher: Object with `async fetch(address) -> str | None`.
    :param callbacks: Named-hook table (defaults to the shared CallbackTable).
    :param config: Source of the default wait and style rules.
    """

    def __init__(
        self,
        surface: RenderingSurface,
        fetcher,
        callbacks: Optional[CallbackTable] = None,
        config: Optional[Config] = None,
    ):
        self.surface = surface
        self.fetcher = fetcher
        self.callbacks = callbacks if callbacks is not None else CallbackTable()
        self.config = config if config is not None else Config()
        self._stack = NavigationStack()
        self._lock = asyncio.Lock()

    @property
    def registry(self) -> Tuple[str, ...]:
        return self._stack.snapshot()

    @property
    def active(self) -> Optional[str]:
        return self._stack.top

    # --- Admission ---

    def admit(self, container_id: str, force_reload: bool = False) -> bool:
        """
        Hides every registered container, then registers or promotes `container_id`.

        Returns True when the container was already registered and no reload
        was asked for, meaning it is now shown and nothing has to be loaded.
        """
        try:
            for registered_id in self._stack:
                container = self.surface.get(registered_id)
                if container is not None:
                    container.set_visible(False)

            if container_id in self._stack:
                container = self.surface.get(container_id)
                if container is not None:
                    container.set_visible(True)
                self._stack.promote(container_id)
                return not force_reload

            self._stack.push(container_id)
            return False
        except Exception as e:
            logger.error("❌ [Navigator] registry update for '%s' failed: %s", container_id, e)
            return False

    # --- Forward ---

    async def navigate_forward(
        self,
        address: str,
        container_id: str,
        wait_ms: Optional[int] = None,
        style_rules: Optional[str] = None,
        callbacks: CallbackSpec = None,
        force_reload: bool = False,
    ) -> NavigationResult:
        async with self._lock:
            try:
                return await self._forward(address, container_id, wait_ms, style_rules, callbacks, force_reload)
            except Exception as e:
                logger.exception("❌ [Navigator] unexpected error loading '%s' into '%s'", address, container_id)
                return NavigationResult(NavigationStatus.FAILED, container_id, address, str(e))

    async def _forward(self, address, container_id, wait_ms, style_rules, callbacks, force_reload):
        wait_ms = self.config.wait_ms if wait_ms is None else wait_ms
        style_rules = self.config.style_rules if style_rules is None else style_rules

        if self.surface.get(container_id) is None:
            error = ContainerNotFound(container_id)
            logger.error("❌ [Navigator] %s", error)
            return NavigationResult(NavigationStatus.ABORTED, container_id, address, str(error))

        snapshot = self._stack.snapshot()
        visibility = self._visibility(snapshot + (container_id,))

        if self.admit(container_id, force_reload):
            dispatch(callbacks, self.callbacks, self.surface.resolve_callback)
            return NavigationResult(NavigationStatus.SHOWN, container_id, address)

        if force_reload:
            clear(self.surface, container_id)

        content = await self.fetcher.fetch(address)
        if self._superseded(container_id):
            return NavigationResult(NavigationStatus.ABORTED, container_id, address, "navigated away")
        if content is None:
            logger.error("❌ [Navigator] could not load '%s' into '%s', keeping the current view", address, container_id)
            self._rollback(snapshot, visibility)
            return NavigationResult(NavigationStatus.ABORTED, container_id, address, "fetch failed")

        container = self.surface.get(container_id)
        if container is None:
            error = ContainerNotFound(container_id)
            logger.error("❌ [Navigator] %s", error)
            self._rollback(snapshot, visibility)
            return NavigationResult(NavigationStatus.ABORTED, container_id, address, str(error))

        container.replace_content(content)
        container.set_visible(True)
        apply_style(self.surface, container_id, style_rules)

        await reactivate(container)
        if wait_ms and wait_ms > 0:
            await asyncio.sleep(wait_ms / 1000)
        if self._superseded(container_id):
            return NavigationResult(NavigationStatus.ABORTED, container_id, address, "navigated away")

        logger.info(
            "✔ [Navigator] loaded '%s' into '%s' (reload=%s)", address, container_id, force_reload
        )
        dispatch(callbacks, self.callbacks, self.surface.resolve_callback)
        return NavigationResult(NavigationStatus.LOADED, container_id, address)

    def _superseded(self, container_id: str) -> bool:
        """True once a back-navigation has dropped `container_id` while this call was suspended."""
        if self._stack.top == container_id:
            return False
        logger.warning(
            "⚠ [Navigator] '%s' was left while loading, leaving it hidden", container_id
        )
        return True

    def _visibility(self, container_ids) -> Dict[str, bool]:
        states = {}
        for container_id in container_ids:
            container = self.surface.get(container_id)
            if container is not None:
                states[container_id] = container.is_visible
        return states

    def _rollback(self, snapshot: Tuple[str, ...], visibility: Dict[str, bool]) -> None:
        """Puts history and visibility back the way they were before an aborted call."""
        self._stack.restore(snapshot)
        for container_id, visible in visibility.items():
            container = self.surface.get(container_id)
            if container is not None:
                container.set_visible(visible)

    # --- Back ---

    def navigate_back(self) -> bool:
        """
        Drops the most recent container (hiding and clearing it) and shows the
        previous one. Returns False when there is nothing to go back to.

        Safe to call while a forward navigation is suspended: if that call was
        loading the container dropped here, it gives up once it resumes.
        """
        try:
            if len(self._stack) < 2:
                logger.warning("⚠ [Navigator] no previous container to return to")
                return False

            current_id = self._stack.pop()
            previous_id = self._stack.top

            current = self.surface.get(current_id)
            if current is not None:
                current.set_visible(False)
            clear(self.surface, current_id)

            previous = self.surface.get(previous_id)
            if previous is None:
                logger.error("❌ [Navigator] %s", ContainerNotFound(previous_id))
                return False
            previous.set_visible(True)

            logger.info(
                "↩ [Navigator] back from '%s' to '%s', history: [%s]",
                current_id, previous_id, ", ".join(self._stack),
            )
            return True
        except Exception:
            logger.exception("❌ [Navigator] unexpected error while going back")
            return False

    async def go_back(self) -> bool:
        """`navigate_back`, taken in turn after any forward navigation in flight."""
        async with self._lock:
            return self.navigate_back()
