# hintgate/prompts/templates.py

# System Instructions
HINT_SYSTEM_PROMPT = """You are a creative game hint generator. Generate progressive hints that help players guess words without revealing them directly. Always respond with exactly 4 numbered hints."""

LANGUAGE_INSTRUCTIONS = {
    "ta": "Generate hints in Tamil (தமிழ்) language.",
    "en": "Generate hints in English.",
}

# Difficulty tiers run from hardest (hint 1) to easiest (hint 4)
HINT_GENERATION_PROMPT = """Generate exactly 4 hints for the word "{word}" from category "{topic}".
{language_instructions}

DIFFICULTY LEVELS:
1. HARD: Indirect but relatable (what it's used for, where found) - MAX 10 WORDS
2. MODERATE: Clear category, main characteristics - MAX 10 WORDS
3. EASY: First letter + length + specific details - MAX 10 WORDS
4. VERY EASY: Partial letters (e.g. "P_ZZ_") + obvious clue - MAX 10 WORDS

RULES:
- Never use the word "{word}"
- Each hint under 10 words
- Number each hint (1. 2. 3. 4.)
- Make it relatable and fun

Now generate 4 hints for "{word}":"""


def build_hint_prompt(word: str, topic: str, language: str) -> str:
    language_instructions = LANGUAGE_INSTRUCTIONS.get(language, LANGUAGE_INSTRUCTIONS["en"])
    return HINT_GENERATION_PROMPT.format(
        word=word, topic=topic, language_instructions=language_instructions
    )
