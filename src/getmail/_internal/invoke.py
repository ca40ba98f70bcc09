"""Invoke helpers: call sync or async controller actions uniformly.

Controller actions can be ``def`` or ``async def``. The dispatcher and
the transport both call user code, so the sync/async check lives here.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
