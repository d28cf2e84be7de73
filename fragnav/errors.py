# fragnav/errors.py
from typing import Optional


class NavigationError(Exception):
    """Base class for failures inside the navigation engine."""


class FetchError(NavigationError):
    """Non-success response or transport failure while retrieving a fragment."""

    def __init__(self, address: str, status: Optional[int] = None, detail: str = ""):
        self.address = address
        self.status = status
        msg = f"Failed to fetch '{address}'"
        if status is not None:
            msg += f" ({status})"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ContainerNotFound(NavigationError):
    def __init__(self, container_id: str):
        self.container_id = container_id
        super().__init__(f"Container '{container_id}' not found on the rendering surface")


class CodeExecutionError(NavigationError):
    """An inline fragment raised while being re-run."""

    def __init__(self, container_id: str, index: int, cause: BaseException):
        self.container_id = container_id
        self.index = index
        self.cause = cause
        super().__init__(f"Inline fragment #{index} in '{container_id}' failed: {cause}")


class ExternalFragmentLoadError(NavigationError):
    def __init__(self, src: str, detail: str = ""):
        self.src = src
        super().__init__(f"Failed to load external fragment '{src}'" + (f": {detail}" if detail else ""))
