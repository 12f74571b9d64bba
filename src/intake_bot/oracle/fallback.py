"""
One policy for every oracle call: bounded wait, defensive parsing, local
fallback on any failure.
"""

import asyncio
import json
import re
from typing import Any, Awaitable, Callable, TypeVar

from intake_bot.core.exceptions import OracleError
from intake_bot.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def extract_json_object(text: str) -> dict[str, Any]:
    """
    Pull the first well-formed JSON object out of an oracle answer.

    Markdown code fences are looked into first, then the raw text.

    Raises:
        OracleError: If no JSON object can be decoded
    """
    if not text or not text.strip():
        raise OracleError("Oracle answer is empty")

    candidates = [block.strip() for block in _FENCED_BLOCK.findall(text)]
    candidates.append(text)

    decoder = json.JSONDecoder()
    for candidate in candidates:
        for match in re.finditer(r"\{", candidate):
            try:
                obj, _ = decoder.raw_decode(candidate, match.start())
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                return obj

    raise OracleError("Oracle answer contains no JSON object", details={"answer": text[:200]})


async def call_with_fallback(
    operation: str,
    call: Callable[[], Awaitable[str]],
    parse: Callable[[str], T],
    fallback: Callable[[], T],
    timeout: float,
) -> T:
    """
    Ask the oracle once and parse the answer, or fall back locally.

    Args:
        operation: Name used in logs (e.g. ``readiness``)
        call: Coroutine factory performing the oracle request
        parse: Turns the raw answer into a result; raising means failure
        fallback: Produces the local result when anything goes wrong
        timeout: Seconds to wait for the oracle

    Returns:
        The parsed oracle result, or the fallback result
    """
    try:
        answer = await asyncio.wait_for(call(), timeout=timeout)
        return parse(answer)
    except asyncio.TimeoutError:
        logger.warning("Oracle call timed out, using fallback", operation=operation, timeout=timeout)
    except Exception as e:
        logger.warning(
            "Oracle call failed, using fallback",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
    return fallback()
