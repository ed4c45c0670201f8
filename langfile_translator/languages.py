from typing import Dict, Optional

# Languages offered to users; codes are what the host sends.
SUPPORTED_LANGUAGES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "sr": "Serbian (Latin)",
}

AUTO_DETECT = "auto"


def normalize_source_language(language_code: str) -> str:
    """
    Normalize a source language code.

    Auto-detection is not supported by the backends, so ``auto`` means English.
    """
    code = (language_code or "").strip()
    if not code or code.lower() == AUTO_DETECT:
        return "en"
    return code


def normalize_target_language(language_code: str) -> str:
    """Serbian is always translated into its Latin script variant."""
    code = (language_code or "").strip()
    if code.lower() in ("sr", "sr-latn"):
        return "sr-Latn"
    return code


def base_language(language_code: str) -> str:
    """Return the primary subtag of a language code, e.g. ``sr`` for ``sr-Latn``."""
    return (language_code or "").replace("_", "-").split("-")[0].lower()


def language_code_to_name(language_code: str) -> Optional[str]:
    """
    Convert a language code to a language name.

    Args:
        language_code (str): The language code (e.g., "sr-Latn").

    Returns:
        Optional[str]: The language name if found, else None.
    """
    return SUPPORTED_LANGUAGES.get(base_language(language_code))
