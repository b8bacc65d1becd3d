"""Walk through the try/catch features, printing each step to stderr.

Lines marked "(unreachable)" are never printed: each sits just after a
throw.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, Optional, Sequence

from excatch import runtime
from excatch.blocks import TryBlock, rethrow, throw, try_catch, what
from excatch.guards import SyncedVars
from excatch.runtime import Thrown

EXCEPTION_FOO = 1
EXCEPTION_BAR = 2
EXCEPTION_BAZ = 3

STACK_SIZE = 42


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def _say(message: str) -> Callable[[Thrown], None]:
    def handler(exc: Thrown) -> None:
        _log(message)

    return handler


def _numbered_handlers(suffix: str = "") -> Dict[int, Callable[[Thrown], None]]:
    """Handlers for codes 1, 2 and 3 that only announce themselves."""
    return {code: _say(f"CATCH({code}){suffix}") for code in (1, 2, 3)}


def _section(title: str, description: str) -> None:
    _log("")
    _log(title)
    _log(f"({description})")


def _first_test_func() -> None:
    _log("first_test_func")
    throw(3)
    _log("first_test_func (unreachable)")


def _second_test_func() -> None:
    _log("second_test_func")
    _first_test_func()
    _log("second_test_func (unreachable)")


def _third_test_func() -> None:
    _log("third_test_func")

    def body() -> None:
        _log("TRY (third_test_func)")
        _first_test_func()
        _log("TRY (third_test_func) (unreachable)")

    def handler(exc: Thrown) -> None:
        _log(f"CATCH({exc.code}) (third_test_func)")
        rethrow()
        _log(f"CATCH({exc.code}) (third_test_func) (unreachable)")

    try_catch(body, {1: handler, 2: handler, 3: handler})
    _log("third_test_func (unreachable)")


def _basic() -> None:
    _section("FIRST TEST", "Basic functionalities")

    def body() -> None:
        _log("TRY")
        throw(1)

    try_catch(body, _numbered_handlers())
    _log("")


def _throw_from_function() -> None:
    _section("SECOND TEST", "Throwing from a function")

    def body() -> None:
        _log("TRY")
        _second_test_func()

    try_catch(body, _numbered_handlers())
    _log("")


def _no_outer_block() -> None:
    _section("THIRD TEST", "Rethrowing to an outer TRY block that doesn't exist")

    def body() -> None:
        _log("TRY")
        throw(2)

    # Calling rethrow() in the handler for 2 would terminate: no block is left.
    try_catch(body, _numbered_handlers())
    _log("")


def _nested_blocks() -> None:
    _section(
        "FOURTH TEST",
        "Rethrowing to an outer TRY block, nested TRY blocks in the same scope",
    )

    def inner_body() -> None:
        _log("TRY (inner)")
        throw(2)

    def inner_two(exc: Thrown) -> None:
        _log("CATCH(2) (inner)")
        rethrow()
        _log("CATCH(2) (unreachable)")

    inner_handlers = _numbered_handlers(" (inner)")
    inner_handlers[2] = inner_two

    def outer_body() -> None:
        _log("TRY (outer)")
        try_catch(inner_body, inner_handlers)

    try_catch(outer_body, _numbered_handlers(" (outer)"))
    _log("")


def _rethrow_across_functions() -> None:
    _section("FIFTH TEST", "Rethrowing from a function to another")

    def body() -> None:
        _log("TRY")
        _third_test_func()
        throw(1)

    try_catch(body, _numbered_handlers())
    _log("")


def _synchronized_changes() -> None:
    _section("SIXTH TEST", '"Synchronizing" changes')
    i = j = k = 0
    _log(f"i (before TRY) = {i}")
    _log(f"j (before TRY) = {j}")
    _log(f"k (before TRY) = {k}")
    synced = SyncedVars(i=i, j=j)
    with TryBlock() as block:
        k = 1
        i = 1
        synced.save(i=i)
        synced["j"] = 1
        _log("Modifying i, j and k (in TRY)")
        throw(1)
    if block.caught is not None and block.caught.code == 1:
        i, j = synced.load("i", "j")
        _log("CATCH(1)")
        _log(f"i (in CATCH) = {i}")
        _log(f"j (in CATCH) = {j}")
        _log(f"k (in CATCH) = {k}")
    i, j = synced.load("i", "j")
    _log(f"i (after TRY) = {i}")
    _log(f"j (after TRY) = {j}")
    _log(f"k (after TRY) = {k}")
    _log("")


def _named_catch_all() -> None:
    _section("SEVENTH TEST", "Different flavours of CATCH")

    def body() -> None:
        _log("TRY")
        throw(4)

    def catch_all(exc: Thrown) -> None:
        _log("CATCH(e)")
        _log(f"e = {exc.code}")

    try_catch(body, _numbered_handlers(), default=catch_all)
    _log("")


def _unnamed_catch_all() -> None:
    _section("EIGHTH TEST", "Different flavours of CATCH")

    def body() -> None:
        _log("TRY")
        throw(4)

    try_catch(body, default=_say("CATCH() something"))
    _log("")


def _no_catch() -> None:
    _section("NINTH TEST", "No CATCH")

    def body() -> None:
        _log("TRY")
        throw(4)

    try_catch(body)
    _log("")


def _named_codes_with_message() -> None:
    _section("TENTH TEST", "...")

    def body() -> None:
        _log("TRY")
        throw(EXCEPTION_FOO, 'this is a "what" message')

    def on_foo(exc: Thrown) -> None:
        _log(f"CATCH(EXCEPTION_FOO) where EXCEPTION_FOO = {EXCEPTION_FOO}")
        _log(f"what = {what()}")

    handlers = {
        EXCEPTION_FOO: on_foo,
        EXCEPTION_BAR: _say(
            f"CATCH(EXCEPTION_BAR) where EXCEPTION_BAR = {EXCEPTION_BAR}"
        ),
        EXCEPTION_BAZ: _say(
            f"CATCH(EXCEPTION_BAZ) where EXCEPTION_BAZ = {EXCEPTION_BAZ}"
        ),
    }
    try_catch(body, handlers)
    _log("")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run every demonstration in order and return the exit status."""
    runtime.global_setup(STACK_SIZE, runtime.Flags.NONE)
    runtime.thread_setup()

    _basic()
    _throw_from_function()
    _no_outer_block()
    _nested_blocks()
    _rethrow_across_functions()
    _synchronized_changes()
    _named_catch_all()
    _unnamed_catch_all()
    _no_catch()
    _named_codes_with_message()
    return 0


if __name__ == "__main__":
    sys.exit(main())