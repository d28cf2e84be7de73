# fragnav/reactivator.py
import logging
from dataclasses import dataclass

from .errors import CodeExecutionError, ExternalFragmentLoadError
from .fragments import wrap_inline
from .surface import ViewContainer

logger = logging.getLogger(__name__)


@dataclass
class ReactivationReport:
    executed: int = 0
    loaded: int = 0
    failed: int = 0
    skipped: int = 0


async def reactivate(container: ViewContainer) -> ReactivationReport:
    """
    Re-runs every embedded fragment of a freshly populated container.

    Injected markup does not run its own scripts, so each one is re-inserted:
    inline bodies wrapped in a closure, external ones as a fresh node whose
    load (or error) is awaited before the next fragment starts. Module bodies
    already get their own scope and go in unwrapped. Failures of either kind
    are logged and the pipeline moves on.
    """
    report = ReactivationReport()
    for fragment in container.embedded_fragments():
        if not fragment.is_executable or not (fragment.is_external or fragment.is_inline):
            report.skipped += 1
            continue

        if fragment.is_external:
            try:
                await container.load_external(fragment)
                report.loaded += 1
            except ExternalFragmentLoadError as e:
                report.failed += 1
                logger.error("❌ [Reactivator] %s", e)
            except Exception as e:
                report.failed += 1
                logger.error("❌ [Reactivator] %s", ExternalFragmentLoadError(fragment.src, str(e)))
            continue

        try:
            code = fragment.code if fragment.is_module else wrap_inline(fragment.code)
            container.run_inline(fragment, code)
            report.executed += 1
        except Exception as e:
            report.failed += 1
            logger.error("❌ [Reactivator] %s", CodeExecutionError(container.container_id, fragment.index, e))

    logger.debug(
        "[Reactivator] '%s': %d inline, %d external, %d failed, %d skipped",
        container.container_id, report.executed, report.loaded, report.failed, report.skipped,
    )
    return report
