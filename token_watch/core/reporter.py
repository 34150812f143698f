"""
Reporter

Aggregates per-token results into a single text payload.

- report(): one line per token, always
- check(): only tokens outside their alert band (or failing), wrapped in
  an ALERT block; "" when nothing needs attention
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, Union

from ..api.feeds import PriceClient
from ..models import Token
from ..utils.formatting import code_block

logger = logging.getLogger(__name__)

ALERT_HEADER = "**ALERT**"


def failure_line(token: Token, error: BaseException) -> str:
    return f"fail to diff pct for token: {token.name}, got error: {error}"


class Reporter:
    """
    Owns the tracked tokens and the price client used to evaluate them.

    Read-only after construction, so the watcher and the command handler can
    share one instance.
    """

    def __init__(self, tokens: Sequence[Token], client: PriceClient):
        self.tokens = tuple(tokens)
        self.client = client

    async def _evaluate(
        self,
        evaluate: Callable[[Token], Awaitable[str]],
    ) -> List[Union[str, Exception]]:
        """
        Run evaluate() for every token concurrently.

        Results come back in token order; a failing token yields its
        exception instead of a string and does not affect the others.
        """
        results = await asyncio.gather(
            *(evaluate(token) for token in self.tokens),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
        return results

    async def report(self) -> str:
        """Current status of every token, one newline-terminated line each."""
        results = await self._evaluate(lambda token: token.report(self.client))

        lines = []
        for token, result in zip(self.tokens, results):
            if isinstance(result, Exception):
                logger.warning(f"Report failed for {token.name}: {result}")
                lines.append(failure_line(token, result))
            else:
                lines.append(result)
            lines.append("\n")
        return "".join(lines)

    async def check(self) -> str:
        """Alert block for tokens that crossed their threshold, or ""."""
        results = await self._evaluate(lambda token: token.check(self.client))

        lines = []
        for token, result in zip(self.tokens, results):
            if isinstance(result, Exception):
                logger.warning(f"Check failed for {token.name}: {result}")
                lines.append(failure_line(token, result) + "\n")
            elif result:
                lines.append(result + "\n")

        if not lines:
            return ""

        return f"{ALERT_HEADER}\n{code_block(''.join(lines))}"
