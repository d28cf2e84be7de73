# fragnav/window/webview.py
import asyncio
import json
import logging
import sys
import threading
import uuid
from concurrent.futures import Future as ConcurrentFuture
from typing import Callable, Dict, Iterable, List, Optional

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWebChannel import QWebChannel
from PySide6.QtWebEngineCore import QWebEngineSettings
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import QApplication, QVBoxLayout, QWidget

from ..errors import ExternalFragmentLoadError
from ..fetcher import ContentFetcher
from ..fragments import EmbeddedFragment, tag_fragments
from ..navigator import Navigator
from ..surface import RenderingSurface, StyleRecord, ViewContainer

logger = logging.getLogger(__name__)

EXTERNAL_LOAD_TIMEOUT = 30.0
SHUTDOWN_TIMEOUT = 5.0

HOST_SCRIPT = r"""
window.fragnav = {
    bridge: null,
    pending: [],
    settle(token, ok) {
        if (this.bridge) { this.bridge.settle(token, ok); }
        else { this.pending.push([token, ok]); }
    },
    setVisible(id, visible) {
        const el = document.getElementById(id);
        if (el) el.style.display = visible ? "block" : "none";
    },
    replaceContent(id, html) {
        const el = document.getElementById(id);
        if (el) el.innerHTML = html;
    },
    addStyle(id, css) {
        const tag = document.createElement("style");
        tag.setAttribute("data-loader-id", id);
        tag.textContent = css;
        document.head.appendChild(tag);
    },
    removeStyles(id) {
        document.querySelectorAll(`style[data-loader-id="${id}"]`).forEach(t => t.remove());
    },
    replaceScript(id, index, code, token) {
        const el = document.getElementById(id);
        const old = el ? el.querySelector(`script[data-fragnav-index="${index}"]`) : null;
        if (!old) { if (token) this.settle(token, false); return; }
        const fresh = document.createElement("script");
        for (const attr of old.attributes) fresh.setAttribute(attr.name, attr.value);
        if (code !== null) fresh.textContent = code;
        if (token) {
            fresh.onload = () => this.settle(token, true);
            fresh.onerror = () => {
                console.error(`❌ Failed to load external script: ${fresh.src}`);
                this.settle(token, false);
            };
        }
        old.replaceWith(fresh);
    },
    runHook(name) {
        if (typeof window[name] !== "function") {
            console.warn(`⚠ No page callback named ${name}`);
            return;
        }
        try { window[name](); }
        catch (err) { console.error(`❌ Page callback ${name} failed:`, err); }
    },
    navigate(address, containerId, callbacks, reload) {
        if (this.bridge) this.bridge.navigate(address, containerId, callbacks || [], !!reload);
    },
    back() {
        if (this.bridge) this.bridge.back();
    },
};
new QWebChannel(qt.webChannelTransport, (channel) => {
    window.fragnav.bridge = channel.objects.fragnavBridge;
    window.fragnav.pending.splice(0).forEach(([t, ok]) => window.fragnav.bridge.settle(t, ok));
});
"""


def build_host_page(container_ids: Iterable[str], title: str = "fragnav") -> str:
    """Host page with one hidden <div> per container."""
    divs = "\n".join(f'    <div id="{cid}" style="display: none;"></div>' for cid in container_ids)
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        '  <meta charset="utf-8">\n'
        f"  <title>{title}</title>\n"
        "  <style>html, body { margin: 0; height: 100%; display: flex; flex-direction: column; }</style>\n"
        '  <script src="qrc:///qtwebchannel/qwebchannel.js"></script>\n'
        "</head>\n<body>\n"
        f"{divs}\n"
        f"  <script>{HOST_SCRIPT}</script>\n"
        "</body>\n</html>"
    )


class PageDriver(QObject):
    """Runs page scripts on the GUI thread, whichever thread asks."""

    script_requested = Signal(str)

    def __init__(self, view: QWebEngineView):
        super().__init__()
        self.view = view
        self.script_requested.connect(self._run)

    @Slot(str)
    def _run(self, script: str):
        self.view.page().runJavaScript(script)

    def run_js(self, script: str):
        self.script_requested.emit(script)


class FragmentBridge(QObject):
    """
    Object published to the page as `fragnavBridge`.

    Page scripts report external script load/error through `settle` and may
    request navigation through `navigate` and `back`.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop):
        super().__init__()
        self.loop = loop
        self.navigator = None
        self._pending: Dict[str, asyncio.Future] = {}

    def expect(self, token: str) -> asyncio.Future:
        future = self.loop.create_future()
        self._pending[token] = future
        return future

    def forget(self, token: str):
        self._pending.pop(token, None)

    @Slot(str, bool)
    def settle(self, token: str, ok: bool):
        future = self._pending.pop(token, None)
        if future is not None:
            self.loop.call_soon_threadsafe(_resolve, future, bool(ok))

    @Slot(str, str, list, bool)
    def navigate(self, address: str, container_id: str, callbacks: list, reload: bool):
        if self.navigator is None:
            logger.warning("⚠ [Bridge] navigation requested before the shell was ready")
            return
        asyncio.run_coroutine_threadsafe(
            self.navigator.navigate_forward(
                address, container_id, callbacks=list(callbacks) or None, force_reload=reload
            ),
            self.loop,
        )

    @Slot()
    def back(self):
        if self.navigator is not None:
            asyncio.run_coroutine_threadsafe(self.navigator.go_back(), self.loop)


def _resolve(future: asyncio.Future, value):
    if not future.done():
        future.set_result(value)


class WebViewContainer(ViewContainer):
    def __init__(self, container_id: str, surface: "WebViewSurface"):
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
        self._surface.call("setVisible", self.container_id, self._visible)

    def replace_content(self, content: str) -> None:
        self._content = tag_fragments(content)
        self._surface.call("replaceContent", self.container_id, self._content)

    def clear_content(self) -> None:
        self.replace_content("")

    def run_inline(self, fragment: EmbeddedFragment, wrapped_code: str) -> None:
        self._surface.call("replaceScript", self.container_id, fragment.index, wrapped_code, None)

    async def load_external(self, fragment: EmbeddedFragment) -> None:
        bridge = self._surface.bridge
        token = uuid.uuid4().hex
        future = bridge.expect(token)
        self._surface.call("replaceScript", self.container_id, fragment.index, None, token)
        try:
            ok = await asyncio.wait_for(future, timeout=self._surface.external_timeout)
        except asyncio.TimeoutError:
            bridge.forget(token)
            raise ExternalFragmentLoadError(fragment.src, "timed out")
        if not ok:
            raise ExternalFragmentLoadError(fragment.src)


class WebViewSurface(RenderingSurface):
    """Rendering surface backed by the host page of a QWebEngineView."""

    def __init__(
        self,
        driver: PageDriver,
        bridge: FragmentBridge,
        container_ids: Iterable[str],
        external_timeout: float = EXTERNAL_LOAD_TIMEOUT,
    ):
        self.driver = driver
        self.bridge = bridge
        self.external_timeout = external_timeout
        self._containers = {cid: WebViewContainer(cid, self) for cid in container_ids}
        self._styles: List[StyleRecord] = []

    def call(self, function: str, *args):
        arguments = ", ".join(json.dumps(a) for a in args)
        self.driver.run_js(f"window.fragnav.{function}({arguments});")

    def get(self, container_id: str) -> Optional[WebViewContainer]:
        return self._containers.get(container_id)

    def add_style(self, record: StyleRecord) -> None:
        self._styles.append(record)
        self.call("addStyle", record.container_id, record.css)

    def remove_styles(self, container_id: str) -> int:
        before = len(self._styles)
        self._styles = [s for s in self._styles if s.container_id != container_id]
        self.call("removeStyles", container_id)
        return before - len(self._styles)

    def styles_for(self, container_id: str) -> List[StyleRecord]:
        return [s for s in self._styles if s.container_id == container_id]

    def resolve_callback(self, name: str) -> Callable[[], None]:
        return lambda: self.call("runHook", name)


class NavigationLoop(threading.Thread):
    """Background thread running the asyncio loop the navigator lives on."""

    def __init__(self):
        super().__init__(daemon=True, name="fragnav-loop")
        self.loop = asyncio.new_event_loop()

    def run(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def submit(self, coro) -> ConcurrentFuture:
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def stop(self):
        self.loop.call_soon_threadsafe(self.loop.stop)

    def shutdown(self, *resources, timeout: float = SHUTDOWN_TIMEOUT):
        """Closes `resources` (anything with `aclose()`) on the loop, then stops it."""
        if self.is_alive():
            for resource in resources:
                try:
                    self.submit(resource.aclose()).result(timeout=timeout)
                except Exception as e:
                    logger.warning("⚠ [Shell] could not close %r: %s", resource, e)
        self.stop()
        if self.is_alive():
            self.join(timeout)


class ShellWindow(QWidget):
    def __init__(self, title: str, base_url: str, container_ids: List[str], width=1000, height=700):
        super().__init__()
        self.setWindowTitle(title)
        self.resize(width, height)

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.webview = QWebEngineView(self)
        settings = self.webview.settings()
        settings.setAttribute(QWebEngineSettings.LocalContentCanAccessRemoteUrls, True)
        settings.setAttribute(QWebEngineSettings.AllowRunningInsecureContent, True)
        self.layout.addWidget(self.webview)

        self.loop_thread = NavigationLoop()
        self.resources = []
        self.bridge = FragmentBridge(self.loop_thread.loop)
        self.channel = QWebChannel()
        self.channel.registerObject("fragnavBridge", self.bridge)
        self.webview.page().setWebChannel(self.channel)

        self.driver = PageDriver(self.webview)
        self.surface = WebViewSurface(self.driver, self.bridge, container_ids)

        self.webview.setHtml(build_host_page(container_ids, title), QUrl(base_url))

        back = QShortcut(QKeySequence("Alt+Left"), self)
        back.activated.connect(self.bridge.back)

    def closeEvent(self, event):
        self.loop_thread.shutdown(*self.resources)
        super().closeEvent(event)


def run_shell(
    base_url: str,
    start_address: str,
    start_container: str,
    container_ids: List[str],
    title: str = "fragnav",
    width: int = 1000,
    height: int = 700,
    callbacks=None,
) -> int:
    """Opens the shell window, loads the first view and runs the Qt event loop."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = ShellWindow(title, base_url, container_ids, width=width, height=height)
    fetcher = ContentFetcher(base_url=base_url)
    window.resources.append(fetcher)
    navigator = Navigator(window.surface, fetcher)
    window.bridge.navigator = navigator
    window.loop_thread.start()

    def on_load_finished(ok: bool):
        if not ok:
            logger.error("❌ [Shell] host page failed to load")
            return
        logger.info("⚡ [Shell] host page loaded, opening '%s'", start_address)
        window.loop_thread.submit(
            navigator.navigate_forward(start_address, start_container, callbacks=callbacks)
        )

    window.webview.loadFinished.connect(on_load_finished)
    window.show()
    return app.exec()
