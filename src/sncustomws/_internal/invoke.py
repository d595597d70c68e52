"""Call sync or async handlers uniformly.

Handlers, providers, and error handlers can be ``def`` or ``async def``;
the sync/async check lives here only.
"""

import inspect
from typing import Any


async def invoke(handler: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *handler* and await the result if it is awaitable."""
    result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
