"""Whitespace tokenizer that keeps absolute character offsets."""

from dataclasses import dataclass

from services.ner.scripts import NAME_START_RE, strip_unsupported


@dataclass(frozen=True)
class Token:
    """One whitespace-delimited word of the source text.

    ``text`` holds only supported-script characters and digits;
    ``original_text`` is the raw word. Offsets cover the raw word.
    """

    text: str
    original_text: str
    start_pos: int
    end_pos: int


def tokenize(text: str) -> list[Token]:
    """Split ``text`` on whitespace into position-tagged tokens.

    Each word is located by a forward search from the end of the previous
    match, so repeated words get their own offsets. Words that are empty after
    script filtering (pure punctuation, emoji) are dropped.
    """
    tokens: list[Token] = []
    cursor = 0
    for word in text.split():
        start = text.find(word, cursor)
        if start == -1:
            continue
        end = start + len(word)
        cursor = end
        filtered = strip_unsupported(word)
        if filtered:
            tokens.append(Token(text=filtered, original_text=word, start_pos=start, end_pos=end))
    return tokens


def is_name_like(text: str) -> bool:
    """At least two characters, starting with a letter from a supported script."""
    return len(text) >= 2 and NAME_START_RE.match(text) is not None
