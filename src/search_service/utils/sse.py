"""
Server-sent events reader for streaming HTTP responses.
"""

import json
from typing import AsyncIterator

import httpx

from search_service.core.exceptions import NetworkError

DONE = "[DONE]"


async def sse_iterable(response: httpx.Response) -> AsyncIterator[str]:
    """
    Yield the payload of every event in a server-sent events stream.

    Events are separated by blank lines; a leading ``data: `` is
    stripped and empty events are skipped. After the body is exhausted
    ``"[DONE]"`` is yielded once.

    Args:
        response: A streaming httpx response

    Yields:
        Event payload strings

    Raises:
        NetworkError: If the response has an error status
    """
    if response.is_error:
        await response.aread()
        try:
            body = response.json()
        except ValueError:
            body = {}
        raise NetworkError(
            f"{response.status_code} {response.reason_phrase} {json.dumps(body)}",
            status_code=response.status_code,
        )

    buffer = ""
    async for chunk in response.aiter_text():
        buffer += chunk
        *events, buffer = buffer.split("\n\n")
        for event in events:
            payload = _event_payload(event)
            if payload is not None:
                yield payload

    payload = _event_payload(buffer)
    if payload is not None:
        yield payload

    yield DONE


def _event_payload(event: str) -> str | None:
    """Strip the ``data: `` prefix; None for blank events."""
    if not event.strip():
        return None
    if event.startswith("data: "):
        return event[len("data: "):]
    return event
