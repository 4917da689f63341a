from typing import Optional

VALID_TOPICS = ['food', 'sports', 'movies', 'animals', 'places', 'music', 'general', 'actions', 'objects']
VALID_DIFFICULTIES = ['easy', 'medium', 'hard']
SUPPORTED_LANGUAGES = ['en', 'ta']


def validate_input(word, topic, difficulty, language: str = "en") -> Optional[str]:
    """Returns the first violated rule as a message, or None if the input is usable."""
    if not word or not isinstance(word, str):
        return "Word is required"

    if len(word) < 2 or len(word) > 50:
        return "Word must be between 2-50 characters"

    if not topic or not isinstance(topic, str) or topic.lower() not in VALID_TOPICS:
        return f"Invalid topic. Must be one of: {', '.join(VALID_TOPICS)}"

    if not isinstance(difficulty, str) or difficulty.lower() not in VALID_DIFFICULTIES:
        return "Invalid difficulty. Must be: easy, medium, or hard"

    if not isinstance(language, str) or language.lower() not in SUPPORTED_LANGUAGES:
        return f"Invalid language. Must be one of: {', '.join(SUPPORTED_LANGUAGES)}"

    return None
