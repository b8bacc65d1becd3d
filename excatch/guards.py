"""Helpers around try blocks: saved variables and no-throw regions.

:class:`SyncedVars` keeps copies of values so that changes made inside a try
block survive a throw and can be read back in a handler or afterwards.
:func:`noexcept` marks a region in which any thrown exception terminates
the program.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator

from excatch import runtime
from excatch.blocks import TryBlock


class SyncedVars:
    """Saved copies of named values, declared once and updated by name."""

    def __init__(self, **kwargs: Any) -> None:
        self._saved: Dict[str, Any] = dict(kwargs)

    def _check(self, name: str) -> None:
        if name not in self._saved:
            raise KeyError(f"variable {name!r} is not synchronized")

    def save(self, **kwargs: Any) -> None:
        """Store new values for variables that were declared."""
        for name in kwargs:
            self._check(name)
        self._saved.update(kwargs)

    def load(self, *args: str) -> Any:
        """Return the saved value of one name, or a tuple for several."""
        if not args:
            raise TypeError("load() needs at least one variable name")
        for name in args:
            self._check(name)
        if len(args) == 1:
            return self._saved[args[0]]
        return tuple(self._saved[name] for name in args)

    def var(self, name: str) -> Any:
        """Return the saved value of ``name``."""
        self._check(name)
        return self._saved[name]

    def __getitem__(self, name: str) -> Any:
        return self.var(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.save(**{name: value})

    def __contains__(self, name: object) -> bool:
        return name in self._saved

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v!r}" for k, v in self._saved.items())
        return f"SyncedVars({items})"


@contextmanager
def noexcept() -> Iterator[None]:
    """Run the enclosed code in a try block that terminates on any throw."""
    with TryBlock() as block:
        yield
    if block.caught is not None:
        runtime.terminate(runtime.EXIT_FAILURE)