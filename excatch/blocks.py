"""Try/catch blocks driven by numeric exception codes.

A :class:`TryBlock` opens an entry on the calling thread's exception stack
and catches every :class:`~excatch.runtime.Thrown` raised inside it. Codes
without a handler are dropped, just as a block without a matching catch
clause ends quietly. Handlers run after the block has been left, so a
:func:`rethrow` from a handler reaches the next enclosing block.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, Callable, Mapping, Optional, Type

from excatch import runtime
from excatch.runtime import SetupError, Thrown

Handler = Callable[[Thrown], Any]


class TryBlock:
    """Context manager for one try block.

    After the ``with`` statement, :attr:`caught` holds the exception thrown
    inside the block, or ``None`` if the body finished normally.
    """

    def __init__(self) -> None:
        self.caught: Optional[Thrown] = None
        self._depth = 0

    def __enter__(self) -> "TryBlock":
        if not runtime.is_global_setup_done() or not runtime.is_thread_setup_done():
            raise SetupError(
                "global_setup and/or thread_setup have not been called. "
                "Please call them before opening a try block."
            )
        self.caught = None
        self._depth = runtime.push_stack()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> bool:
        # A throw through ``unwind`` has already left this block; anything
        # else (normal exit, a foreign exception) still has to pop it.
        if runtime.stack_depth() >= self._depth > 0:
            runtime.pop_stack()
        if isinstance(exc, Thrown):
            self.caught = exc
            return True
        return False


def throw(code: int, what: Optional[str] = None) -> None:
    """Throw ``code`` with an optional message to the innermost try block."""
    runtime.unwind(code, what)


def rethrow() -> None:
    """Throw the last exception of this thread again, with its message."""
    runtime.unwind(runtime.last_exception(), runtime.last_exception_what())


def what() -> Optional[str]:
    """Message of the last exception thrown in this thread."""
    return runtime.last_exception_what()


def try_catch(
    body: Callable[[], Any],
    handlers: Optional[Mapping[int, Handler]] = None,
    default: Optional[Handler] = None,
) -> Any:
    """Run ``body`` in a try block and dispatch a thrown code to a handler.

    ``handlers`` maps codes to callables; ``default`` handles any other code.
    A code with no handler is dropped. Returns what the body or the handler
    returned, or ``None`` when the exception was dropped.
    """
    result = None
    with TryBlock() as block:
        result = body()
    caught = block.caught
    if caught is None:
        return result
    handler = (handlers or {}).get(caught.code, default)
    if handler is None:
        return None
    return handler(caught)