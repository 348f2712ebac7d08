"""Supported answer languages and their display names.

Display names are used verbatim in generation and translation prompts
("Please respond in Spanish ...").
"""

from policy_advisor.utils.errors import ValidationError

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "pt": "Portuguese",
    "it": "Italian",
    "ru": "Russian",
}


def language_name(code: str) -> str:
    """Return the display name for *code*.

    Raises
    ------
    ValidationError
        If *code* is not a supported language.
    """
    try:
        return SUPPORTED_LANGUAGES[code]
    except KeyError:
        raise ValidationError(
            f"Unsupported language '{code}'. Supported: {', '.join(SUPPORTED_LANGUAGES)}"
        ) from None


def validate_language(code: str) -> str:
    """Return *code* unchanged if supported, else raise :class:`ValidationError`."""
    language_name(code)
    return code
