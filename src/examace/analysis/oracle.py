"""
Module: analysis.oracle

Purpose:
    Semantic-equivalence oracle used by the concept matcher for
    ambiguous similarity scores. The oracle answers one question: do two
    question texts ask the same thing?

Key Classes:
    - SemanticOracle: Single-method protocol
    - OllamaOracle: Local LLM via the ollama client, JSON mode
    - StaticOracle: Deterministic stub for tests and offline runs

Key Functions:
    - parse_decision(): Extract the {"isSame": bool} decision from a reply

Dependencies:
    - ollama: Chat client for the local model server

Used By:
    - examace.analysis.concepts: Ambiguous-band consultation
    - examace.analysis.grouping: Legacy pairwise grouping
    - examace.cli: Oracle construction from flags/environment
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from examace.core.errors import MalformedOracleResponseError, OracleUnavailableError

logger = logging.getLogger(__name__)


__all__ = [
    "SemanticOracle",
    "OllamaOracle",
    "StaticOracle",
    "parse_decision",
    "DEFAULT_OLLAMA_MODEL",
]


DEFAULT_OLLAMA_MODEL = "llama2"

_SYSTEM_PROMPT = (
    "You compare exam questions. Two questions are the same if a student "
    "would write the same answer to both, even when the wording differs. "
    'Output JSON { "isSame": boolean }.\n\n'
    'IMPORTANT: You must output strictly valid JSON matching this schema: { "isSame": boolean }'
)


@runtime_checkable
class SemanticOracle(Protocol):
    """Decides whether two question texts are semantically equivalent."""

    def judge_equivalence(self, text_a: str, text_b: str, timeout: float) -> bool:
        """
        Return True if both texts ask the same question.

        Must return or raise within ``timeout`` seconds; callers abandon
        slower calls but cannot interrupt them.

        Raises:
            OracleUnavailableError: The oracle could not decide.
            MalformedOracleResponseError: The reply was not a boolean decision.
        """
        ...


def _extract_json(raw: str) -> Dict[str, Any]:
    """Parse JSON from LLM output, tolerating code fences and thinking blocks."""
    text = re.sub(r"<think>.*?</think>", "", raw, flags=re.DOTALL).strip()

    candidates: List[str] = []
    if text:
        candidates.append(text)
    m_full = re.search(r"\{.*\}", text, re.S)
    if m_full:
        candidates.append(m_full.group(0))
    if text.startswith("```"):
        inner = text.strip("` \n\t")
        if inner.lower().startswith("json"):
            inner = inner[4:].strip()
        candidates.append(inner)

    for cand in reversed(candidates):
        try:
            payload = json.loads(cand)
        except json.JSONDecodeError:
            continue
        if isinstance(payload, dict):
            return payload

    raise MalformedOracleResponseError(f"Could not parse JSON response: {raw!r}", raw=raw)


def parse_decision(raw: Optional[str]) -> bool:
    """
    Extract the equivalence decision from a model reply.

    Args:
        raw: Message content returned by the model.

    Returns:
        The boolean value of "isSame".

    Raises:
        MalformedOracleResponseError: If the reply is empty, not JSON, or
            "isSame" is missing or not a boolean.

    Example:
        >>> parse_decision('```json\\n{"isSame": true}\\n```')
        True
    """
    if not raw or not raw.strip():
        raise MalformedOracleResponseError("Empty response from oracle", raw=raw or "")
    payload = _extract_json(raw)
    decision = payload.get("isSame")
    if not isinstance(decision, bool):
        raise MalformedOracleResponseError(
            f"'isSame' missing or not a boolean: {payload!r}", raw=raw
        )
    return decision


class OllamaOracle:
    """
    Oracle backed by a local Ollama server.

    The host comes from OLLAMA_HOST (the ollama client's own default
    otherwise) and the model from EXAMACE_OLLAMA_MODEL, unless given
    explicitly. Each call makes a single attempt with no retries.

    Example:
        >>> oracle = OllamaOracle(model="llama3")
        >>> oracle.judge_equivalence("What is TCP?", "Define TCP", timeout=10.0)
        True
    """

    def __init__(
        self,
        model: Optional[str] = None,
        host: Optional[str] = None,
        temperature: float = 0.1,
        seed: int = 42,
    ):
        self.model = model or os.environ.get("EXAMACE_OLLAMA_MODEL") or DEFAULT_OLLAMA_MODEL
        self.host = host or os.environ.get("OLLAMA_HOST") or None
        self.options = {"temperature": temperature, "seed": seed}

    def _create_client(self, timeout: float):
        """Create a new ollama client (one per call, safe across threads)."""
        from ollama import Client

        return Client(host=self.host, timeout=timeout)

    def judge_equivalence(self, text_a: str, text_b: str, timeout: float) -> bool:
        prompt = f'Q1: "{text_a}"\nQ2: "{text_b}"\n\nAre these the same question?'
        try:
            client = self._create_client(timeout)
            response = client.chat(
                model=self.model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                format="json",
                options=self.options,
            )
        except Exception as exc:
            raise OracleUnavailableError(f"Ollama call failed: {exc}") from exc

        decision = parse_decision(response["message"]["content"])
        logger.debug(f"Oracle ({self.model}) isSame={decision} for {text_a[:40]!r} / {text_b[:40]!r}")
        return decision

    def __repr__(self) -> str:
        return f"OllamaOracle(model={self.model!r}, host={self.host!r})"


class StaticOracle:
    """
    Deterministic oracle for tests and offline runs.

    Always returns ``answer``, or raises ``error`` when one is set. An
    optional ``delay`` sleeps before answering so callers can exercise
    timeouts. Every consultation is recorded in ``calls``.

    Example:
        >>> oracle = StaticOracle(answer=False)
        >>> oracle.judge_equivalence("a", "b", timeout=1.0)
        False
        >>> oracle.calls
        [('a', 'b')]
    """

    def __init__(
        self,
        answer: bool = False,
        error: Optional[Exception] = None,
        delay: float = 0.0,
    ):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls: List[Tuple[str, str]] = []

    def judge_equivalence(self, text_a: str, text_b: str, timeout: float) -> bool:
        self.calls.append((text_a, text_b))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer

    def __repr__(self) -> str:
        return f"StaticOracle(answer={self.answer!r}, calls={len(self.calls)})"
