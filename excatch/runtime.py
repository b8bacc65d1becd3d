"""Per-thread exception stack that backs the try/catch blocks.

Global setup fixes how many try blocks may be nested. Each thread then sets
up its own stack, its own last exception code and its own "what" message.
"""

from __future__ import annotations

import enum
import sys
import threading
from typing import Any, Callable, List, Optional

WHAT_MAX_SIZE = 256 * 2 * 2 * 2
EXIT_FAILURE = 1

P_RED = "\033[0;31m"
P_BOLD = "\033[1m"
P_RESET = "\033[0m"
ERROR_PREFIX = P_RED + P_BOLD + "EXCEPT ERROR:" + P_RESET

TermHandler = Callable[..., Any]


class Flags(enum.IntFlag):
    """Options for :func:`global_setup`. None are defined yet."""

    NONE = 0


class SetupError(RuntimeError):
    """The exception machinery is not set up, or it could not be set up."""


class Thrown(Exception):
    """An exception carrying a numeric code and an optional message."""

    def __init__(self, code: int, what: str = "") -> None:
        super().__init__(code, what)
        self.code = code
        self.what = what

    def __str__(self) -> str:
        return self.what or f"exception {self.code}"


def _default_term_handler(status: int, *args: Any) -> None:
    sys.exit(status)


class _ThreadFlags(threading.local):
    """Flags each thread keeps for itself."""

    def __init__(self) -> None:
        self.setup_done = False
        self.stack_created = False
        self.last_exception = 0


class _ThreadStorage(threading.local):
    """The per-thread buffers: the try-block stack and the "what" message."""

    def __init__(self) -> None:
        self.stack: Optional[List[object]] = None
        self.what: Optional[str] = None


_global_setup_done = False
_stack_size = 0
_stack_size_set = False
_user_flags = Flags.NONE
_term_handler: TermHandler = _default_term_handler
_keys_deleted = False
_thread = _ThreadFlags()
_storage = _ThreadStorage()


def _error(message: str) -> None:
    print(f"{ERROR_PREFIX} {message}", file=sys.stderr)


def _delete_keys() -> None:
    global _storage, _keys_deleted
    _storage = _ThreadStorage()
    _keys_deleted = True


def _reset() -> None:
    """Forget every setup, in every thread."""
    global _global_setup_done, _stack_size, _stack_size_set, _user_flags
    global _term_handler, _keys_deleted, _thread, _storage
    _global_setup_done = False
    _stack_size = 0
    _stack_size_set = False
    _user_flags = Flags.NONE
    _term_handler = _default_term_handler
    _keys_deleted = False
    _thread = _ThreadFlags()
    _storage = _ThreadStorage()


def is_global_setup_done() -> bool:
    """Whether :func:`global_setup` has run."""
    return _global_setup_done and _stack_size_set


def is_thread_setup_done() -> bool:
    """Whether :func:`thread_setup` has run in the calling thread."""
    return _thread.setup_done and _thread.stack_created


def is_stack_size_set() -> bool:
    return _stack_size_set


def is_stack_created() -> bool:
    return _thread.stack_created


def global_setup(stack_size: int, flags: Flags = Flags.NONE) -> None:
    """Fix the maximum nesting of try blocks. Later calls change nothing."""
    global _global_setup_done, _user_flags, _stack_size, _stack_size_set
    if stack_size < 0:
        raise ValueError("stack_size must not be negative")
    if _global_setup_done:
        return
    _user_flags = Flags(flags)
    if not _stack_size_set:
        _stack_size = stack_size
        _stack_size_set = True
    _global_setup_done = True


def _create_stack() -> None:
    if _thread.stack_created:
        return
    if not _stack_size_set or _keys_deleted:
        raise SetupError("could not create the exception stack")
    _storage.stack = []
    _storage.what = ""
    _thread.stack_created = True


def thread_setup() -> None:
    """Create the calling thread's exception stack."""
    if not _global_setup_done:
        raise SetupError("global_setup has not been called")
    if _thread.setup_done:
        return
    _create_stack()
    _thread.setup_done = True


def push_stack() -> int:
    """Enter a try block; return the new nesting depth."""
    if not _thread.stack_created:
        raise SetupError("the exception stack has not been created")
    stack = _storage.stack
    if stack is None:
        raise SetupError("the exception stack has been released")
    if len(stack) >= _stack_size:
        _error("Exception stack overflow.")
        terminate(EXIT_FAILURE)
    stack.append(object())
    return len(stack)


def pop_stack() -> None:
    """Leave the innermost try block; does nothing when none is open."""
    if not _thread.stack_created:
        return
    stack = _storage.stack
    if stack is None:
        _error("Failed to pop exception stack.")
        terminate(EXIT_FAILURE)
    if stack:
        stack.pop()


def stack_depth() -> int:
    """Number of try blocks currently open in the calling thread."""
    stack = _storage.stack if _thread.stack_created else None
    return len(stack) if stack else 0


def unwind(code: int, what: Optional[str] = None) -> None:
    """Record the exception, leave the innermost try block and raise it."""
    if not _thread.stack_created or stack_depth() == 0:
        _error("Exception has been thrown without initializing the exception stack.")
        terminate(EXIT_FAILURE)
    _thread.last_exception = code
    stack = _storage.stack
    if stack is None or _storage.what is None:
        _error("Failed to unwind exception stack.")
        terminate(EXIT_FAILURE)
    message = what[: WHAT_MAX_SIZE - 1] if what is not None else ""
    _storage.what = message
    stack.pop()
    raise Thrown(code, message)


def last_exception() -> int:
    """Code of the last exception thrown in the calling thread."""
    return _thread.last_exception


def last_exception_what() -> Optional[str]:
    """Message of the last exception, or None if the thread has no buffer."""
    return _storage.what


def set_term_handler(handler: TermHandler) -> None:
    """Set the function that :func:`terminate` calls before exiting."""
    global _term_handler
    if handler is None or not callable(handler):
        raise ValueError("the termination handler must be callable")
    _term_handler = handler


def terminate(status: int, *args: Any) -> None:
    """Release all thread buffers, call the handler, then exit with status."""
    handler = _term_handler
    _delete_keys()
    handler(status, *args)
    sys.exit(status)


def thread_deinit() -> None:
    """Release the calling thread's stack and message buffer."""
    _storage.stack = None
    _storage.what = None


def global_deinit() -> None:
    """Release the buffers of every thread; they cannot be created again."""
    _delete_keys()