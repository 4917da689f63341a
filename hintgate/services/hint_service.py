"""
Hint orchestration: prompt the configured generators, parse their numbered output,
and fall back to deterministic hints built from the word itself when they fail.
"""
import asyncio
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence
from hintgate.errors import ProviderError
from hintgate.prompts.templates import HINT_SYSTEM_PROMPT, build_hint_prompt
from hintgate.utils.logger import logger

HINT_COUNT = 4
MIN_HINT_LENGTH = 5

# "1. hint", "2) hint", "3: hint", "4- hint"
NUMBERED_LINE = re.compile(r'^(\d+)[.):\-]\s*(.+)$')


@dataclass
class HintResult:
    hints: List[str]
    fallback: bool = False


def parse_hints(content: str) -> List[str]:
    """Extracts up to 4 numbered hints from a raw completion."""
    hints: List[str] = []
    lines = [line.strip() for line in (content or "").split("\n")]

    for line in lines:
        if len(hints) >= HINT_COUNT:
            break
        if not line:
            continue
        match = NUMBERED_LINE.match(line)
        if match and len(match.group(2).strip()) > MIN_HINT_LENGTH:
            hints.append(match.group(2).strip())

    return hints


def generate_fallback_hints(word: str, topic: str) -> List[str]:
    """Deterministic hints derived from the word alone. Never calls a provider."""
    first_letter = word[0].upper()
    partial = " ".join(
        char.upper() if i in (0, len(word) - 1) else "_"
        for i, char in enumerate(word)
    )

    return [
        f"Something related to {topic} that people often encounter",
        f"A {topic} word with {len(word)} letters",
        f'Starts with "{first_letter}", {len(word)} letters long',
        partial,
    ]


class HintService:
    def __init__(self, generators: Sequence, timeout_seconds: float = 10.0,
                 max_tokens: int = 200, temperature: float = 0.7):
        self.generators = list(generators)
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate_hints(self, word: str, topic: str, difficulty: str = "medium",
                             language: str = "en") -> HintResult:
        """Tries each generator in order; any failure or short output ends in fallback hints.

        The timeout bounds the whole provider chain, not each provider.
        """
        prompt = build_hint_prompt(word, topic, language)

        try:
            hints = await asyncio.wait_for(self._first_full_set(prompt, difficulty), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"Hint generation timed out after {self.timeout_seconds}s.")
            hints = None

        if hints:
            return HintResult(hints=hints)

        logger.info(f"Using fallback hints for topic '{topic}'.")
        return HintResult(hints=generate_fallback_hints(word, topic), fallback=True)

    async def _first_full_set(self, prompt: str, difficulty: str) -> Optional[List[str]]:
        for generator in self.generators:
            name = getattr(generator, "name", type(generator).__name__)
            try:
                content = await generator.complete(HINT_SYSTEM_PROMPT, prompt, self.max_tokens, self.temperature)
            except ProviderError as e:
                logger.error(f"{name} failed: {e.message}")
                continue
            except Exception as e:
                logger.error(f"{name} failed unexpectedly: {str(e)}")
                continue

            hints = parse_hints(content)
            if len(hints) == HINT_COUNT:
                return hints
            logger.warning(f"{name} returned {len(hints)} usable hints for {difficulty} request, expected {HINT_COUNT}.")

        return None
