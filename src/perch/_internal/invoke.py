"""Invoke helpers — call sync or async collaborators uniformly.

Route callables, transformers and response handlers can be ``def`` or
``async def``. Anything that calls user-provided code goes through
:func:`invoke` so the sync/async check lives in exactly one place.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler.handle, typed_response)
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
