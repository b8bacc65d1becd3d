# excatch

Exceptions identified by integer codes, each carrying an optional "what"
message, caught by try blocks that are kept on a per-thread stack. When the
machinery itself is misused (a throw with no open try block, too many nested
blocks), the library calls a termination handler that you can replace.

## Setup

Configure the library once per process and once in each thread that uses it:

```python
from excatch.runtime import Flags, global_setup, thread_setup

global_setup(42, Flags.NONE)   # at most 42 nested try blocks per thread
thread_setup()
```

A second call to either function changes nothing. `global_setup()` raises
`ValueError` for a negative stack size. `thread_setup()` raises
`excatch.runtime.SetupError` if `global_setup()` has not been called.

`is_global_setup_done()`, `is_thread_setup_done()`, `is_stack_size_set()`
and `is_stack_created()` report the setup state; `stack_depth()` gives the
number of try blocks open in the calling thread.

## Throwing and catching

```python
from excatch.blocks import TryBlock, rethrow, throw, try_catch, what

DIV_BY_ZERO = 1

def divide(a, b):
    if b == 0:
        throw(DIV_BY_ZERO, "Division by zero occurred in divide()")
    return a / b

try_catch(
    lambda: divide(1, 0),
    {DIV_BY_ZERO: lambda exc: print("caught:", what())},
    default=lambda exc: print("other code", exc.code),
)
```

- `throw(code, what=None)` records the code and message for the calling
  thread, leaves the innermost try block and raises
  `excatch.runtime.Thrown`, which has `code` and `what` attributes. Messages
  longer than 2047 characters are cut short.
- `rethrow()` throws the thread's last code and message again, to the next
  enclosing try block.
- `what()` returns the message of the last exception: an empty string when
  none was given or nothing has been thrown yet, `None` when the thread's
  buffers have not been created or have been released.
- `try_catch(body, handlers=None, default=None)` runs `body` in a try block.
  If a `Thrown` escapes it, the handler registered for its code (or else
  `default`) is called with the exception, after the block has been left.
  With no matching handler the exception is dropped and `None` is returned;
  otherwise the return value of the body or handler is returned.

`TryBlock` is the context manager underneath. Entering it pushes an entry
onto the thread's stack (raising `SetupError` if setup has not been done);
leaving it pops the entry. It swallows any `Thrown` raised inside and keeps
it in `block.caught` (`None` if the body finished normally); other
exceptions pass through.

```python
with TryBlock() as block:
    throw(4)
if block.caught is not None:
    print(block.caught.code)   # 4
```

Throwing while no try block is open, or opening more blocks than the
configured stack size, prints an error to standard error and calls
`terminate(1)`.

## Keeping values across a throw

`excatch.guards.SyncedVars` stores named values that must be read back after
a throw:

```python
from excatch.guards import SyncedVars

saved = SyncedVars(i=0, j=0)
saved.save(i=1)
saved["j"] = 1
i, j = saved.load("i", "j")   # (1, 1)
saved.var("j")                # 1
```

Only names given to the constructor can be saved or read; any other name
raises `KeyError`. `load()` with one name returns a single value, with
several a tuple.

`excatch.guards.noexcept()` is a context manager: any exception thrown inside
it calls `terminate(1)`.

## Termination

```python
from excatch.runtime import set_term_handler, terminate

set_term_handler(lambda status, *args: print("terminating with", status))
```

`terminate(status, *args)` releases the buffers of every thread, calls the
handler with the status and any extra arguments, then exits with
`sys.exit(status)`. The default handler exits straight away.
`set_term_handler()` raises `ValueError` if the handler is not callable.
After `terminate()` or `global_deinit()`, no thread can create its stack
again. `thread_deinit()` releases only the calling thread's buffers.

## Demo

```
excatch-demo
```

Runs a walk-through of the features (nested blocks, rethrowing, catch-all
handlers, synced variables and "what" messages) and writes its trace to
standard error.

## What it does not do

There is no `finally` clause: put clean-up code in an ordinary
`try`/`finally` around the block. Handlers are selected by exact code only.