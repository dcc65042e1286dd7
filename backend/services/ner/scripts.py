"""Unicode script tables shared by the tokenizer and language detection."""

import re
from collections import Counter

# (script, first code point, last code point, language code of the dominant script)
SCRIPT_BLOCKS: list[tuple[str, int, int, str]] = [
    ("devanagari", 0x0900, 0x097F, "hi"),
    ("bengali", 0x0980, 0x09FF, "bn"),
    ("gurmukhi", 0x0A00, 0x0A7F, "pa"),
    ("gujarati", 0x0A80, 0x0AFF, "gu"),
    ("odia", 0x0B00, 0x0B7F, "or"),
    ("tamil", 0x0B80, 0x0BFF, "ta"),
    ("telugu", 0x0C00, 0x0C7F, "te"),
    ("kannada", 0x0C80, 0x0CFF, "kn"),
    ("malayalam", 0x0D00, 0x0D7F, "ml"),
    ("arabic", 0x0600, 0x06FF, "ur"),
]

_INDIC_CLASS = "".join(f"\\u{lo:04X}-\\u{hi:04X}" for _, lo, hi, _ in SCRIPT_BLOCKS)

# Everything outside this class is stripped from token text, as is sentence
# punctuation that sits inside a script block (danda, Arabic comma and full stop).
UNSUPPORTED_CHARS_RE = re.compile(rf"[\u0964\u0965\u060C\u061F\u06D4]|[^{_INDIC_CLASS}A-Za-z0-9_]")

# A name starts with a letter from a supported script (no digits or underscore).
NAME_START_RE = re.compile(rf"^[{_INDIC_CLASS}A-Za-z]")


def strip_unsupported(word: str) -> str:
    """Remove every character that is not in a supported script or a digit."""
    return UNSUPPORTED_CHARS_RE.sub("", word)


def script_of(char: str) -> str | None:
    cp = ord(char)
    if ("a" <= char <= "z") or ("A" <= char <= "Z"):
        return "latin"
    for name, lo, hi, _ in SCRIPT_BLOCKS:
        if lo <= cp <= hi:
            return name
    return None


def detect_language(text: str, default: str = "en") -> str:
    """Guess the language code from the dominant script of ``text``.

    Devanagari is reported as Hindi; Marathi shares the script and cannot be
    told apart here. Latin text is reported as English.
    """
    counts: Counter[str] = Counter()
    for char in text:
        script = script_of(char)
        if script is not None:
            counts[script] += 1
    if not counts:
        return default

    script, _ = counts.most_common(1)[0]
    if script == "latin":
        return "en"
    for name, _, _, lang in SCRIPT_BLOCKS:
        if name == script:
            return lang
    return default
