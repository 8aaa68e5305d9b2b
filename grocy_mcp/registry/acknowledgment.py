"""
Acknowledgment (proof token) annotation.

A proof token is an operator-chosen string appended to the content of a
successful result. Its only purpose is to let the caller check that the
handler really ran; it is never derived from the operation's input or
output and is never attached to an error result.
"""

import logging
from typing import Mapping, Optional

from mcp.types import CallToolResult, TextContent

from ..config.settings import AppConfig

logger = logging.getLogger(__name__)


def annotate_result(result: CallToolResult, proof_token: Optional[str]) -> CallToolResult:
    """
    Append ``proof_token`` to a successful result.

    Returns:
        A new result with exactly one extra text entry, or ``result``
        unchanged when it is an error or no token is configured
    """
    if result.isError or not proof_token:
        return result
    content = list(result.content)
    content.append(TextContent(type="text", text=proof_token))
    return result.model_copy(update={"content": content})


class AcknowledgmentAnnotator:
    """Holds the proof tokens of enabled operations."""

    def __init__(self, tokens: Mapping[str, str]):
        self._tokens = dict(tokens)

    @classmethod
    def from_config(cls, config: AppConfig) -> "AcknowledgmentAnnotator":
        tokens = {
            name: config.proof_token(name)
            for name in config.operations_with_proof_tokens()
        }
        return cls(tokens)

    def has_token(self, name: str) -> bool:
        return name in self._tokens

    def annotate(self, name: str, result: CallToolResult) -> CallToolResult:
        token = self._tokens.get(name)
        if token and result.isError:
            logger.debug(f"Not acknowledging failed result of {name}")
        return annotate_result(result, token)
