# fragnav/callbacks.py
import logging
from typing import Callable, Dict, Optional, Sequence, Union

logger = logging.getLogger(__name__)

CallbackSpec = Union[None, str, Callable[[], object], Sequence[Union[str, Callable[[], object]]]]


class CallbackTable:
    """
    Process-wide table of named completion hooks.

    Views that want to run something once they are loaded register a function
    under a name; navigation calls then refer to it by that name.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(CallbackTable, cls).__new__(cls)
            cls._instance.callbacks = {}
        return cls._instance

    def register(self, name: str, callback: Callable[[], object]) -> None:
        self.callbacks[name] = callback

    def unregister(self, name: str) -> None:
        self.callbacks.pop(name, None)

    def get(self, name: str) -> Optional[Callable[[], object]]:
        callback = self.callbacks.get(name)
        return callback if callable(callback) else None

    def clear(self) -> None:
        """Removes all registered callbacks."""
        self.callbacks.clear()

    def __contains__(self, name: object) -> bool:
        return name in self.callbacks

    def __len__(self) -> int:
        return len(self.callbacks)


CallbackResolver = Callable[[str], Optional[Callable[[], object]]]


def dispatch(
    callbacks: CallbackSpec,
    table: Optional[CallbackTable] = None,
    fallback: Optional[CallbackResolver] = None,
) -> int:
    """
    Runs the completion hooks of a navigation, in order.

    `callbacks` may be None, a name, a callable, or a sequence of names and
    callables. Names missing from the table are handed to `fallback`, when
    given, and skipped if it has nothing for them either. A hook that raises is
    logged and the remaining hooks still run. Returns how many hooks completed.
    """
    if not callbacks:
        return 0
    if isinstance(callbacks, str) or callable(callbacks):
        callbacks = [callbacks]
    table = table if table is not None else CallbackTable()

    invoked = 0
    for entry in callbacks:
        if callable(entry):
            callback, label = entry, getattr(entry, "__name__", repr(entry))
        else:
            callback, label = table.get(entry), entry
            if callback is None and fallback is not None:
                callback = fallback(entry)
            if callback is None:
                logger.debug("[Callbacks] no callback registered as '%s', skipping", entry)
                continue
        try:
            callback()
            invoked += 1
            logger.info("✔ [Callbacks] ran '%s'", label)
        except Exception as e:
            logger.error("❌ [Callbacks] '%s' raised: %s", label, e)
    return invoked
