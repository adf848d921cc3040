"""
Logging for layoutsyntax, built on Loguru.

Two channels share one stderr sink:

- LOG(message, level): progress chatter, shown only when the verbosity of
  the ProgramState bound to the current context is high enough. Pipeline
  stages bind their state once with state_connectToLogger(); library code
  calls LOG() without passing state around.
- Diagnostics: the directive engine and the AI pass report handler errors,
  leftover directives and failed completions through an injectable logger
  (anything shaped like DiagnosticLogger). The default is loguru's
  ``logger``, so these always reach the sink regardless of verbosity.

While a document is being transformed, document_context() tags every line
with its path, so a warning about ``::mystery`` says where it came from.

Usage:
    from layoutsyntax.lib.log import LOG, state_connectToLogger, document_context

    state_connectToLogger(state)
    with document_context("blog/post.md"):
        LOG("Resolving 2 ::ai directive(s)", level=2)
"""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional, Protocol
import sys

from loguru import logger

# ProgramState of the pipeline running in this context
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <7}</level> │ "
    "<magenta>{extra[document]: <24}</magenta> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()
logger.configure(extra={"document": "-"})
logger.add(sys.stderr, format=logger_format, level="DEBUG")


class DiagnosticLogger(Protocol):
    """Minimal logger surface used by the engine and the AI pass"""

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None: ...


def state_connectToLogger(state: Any) -> None:
    """
    Bind a ProgramState to the current logging context.

    Args:
        state: Object with a ``verbosity`` attribute (normally ProgramState)
    """
    _program_state.set(state)


def verbosity_get() -> int:
    """Verbosity of the bound state; 0 when nothing is bound"""
    state = _program_state.get()
    return getattr(state, 'verbosity', 0) if state is not None else 0


@contextmanager
def document_context(document: Any) -> Iterator[None]:
    """Tag log lines emitted inside the block with a document path"""
    with logger.contextualize(document=str(document)):
        yield


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Emit a progress message if the bound verbosity allows it.

    Args:
        message: Text to log
        level: Minimum verbosity required (1=normal, 2=verbose, 3=debug)
        **kwargs: Passed through to loguru

    Example:
        LOG("Read 12 documents", level=1)
        LOG("::columns (block): 3 match(es)", level=3)
    """
    if verbosity_get() >= level:
        logger.debug(message, **kwargs)
