"""Category extractors, run in fixed priority order over one shared claim set.

Every extractor queries ``ctx.ranges`` before emitting a candidate and claims
the span it emits, so a span taken by a higher-priority category is never
re-labelled by a weaker one.
"""

from dataclasses import dataclass
from typing import Callable

from config import ConfidenceSettings
from models.entities import Entity, EntitySubtype, EntityType
from services.ner.gazetteer import LOCATIVE_MARKERS, LOCATIVE_PREPOSITIONS, Lexicon
from services.ner.patterns import EMAIL_RE, PHONE_PATTERNS, date_patterns
from services.ner.ranges import ProcessedRanges
from services.ner.tokenizer import Token, is_name_like


@dataclass
class ExtractionContext:
    text: str
    tokens: list[Token]
    lexicon: Lexicon
    ranges: ProcessedRanges
    language: str
    confidence: ConfidenceSettings


def _key(token: Token) -> str:
    return token.text.casefold()


def _free(ctx: ExtractionContext, *tokens: Token) -> bool:
    return not ctx.ranges.is_claimed(tokens[0].start_pos, tokens[-1].end_pos)


def _token_entity(
    ctx: ExtractionContext,
    tokens: list[Token],
    entity_type: EntityType,
    confidence: float,
    subtype: EntitySubtype | None = None,
) -> Entity | None:
    """Claim the span covered by ``tokens`` and build its entity."""
    start, end = tokens[0].start_pos, tokens[-1].end_pos
    if not ctx.ranges.claim(start, end):
        return None
    return Entity(
        text=" ".join(t.text for t in tokens),
        type=entity_type,
        subtype=subtype,
        start_pos=start,
        end_pos=end,
        confidence=confidence,
        language=ctx.language,
    )


def _regex_entities(
    ctx: ExtractionContext,
    pattern,
    entity_type: EntityType,
    confidence: float,
    subtype: EntitySubtype | None = None,
) -> list[Entity]:
    entities = []
    for match in pattern.finditer(ctx.text):
        start, end = match.span()
        if not ctx.ranges.claim(start, end):
            continue
        entities.append(Entity(
            text=match.group(),
            type=entity_type,
            subtype=subtype,
            start_pos=start,
            end_pos=end,
            confidence=confidence,
            language=ctx.language,
        ))
    return entities


# ---------------------------------------------------------------------------
# Extractors, highest priority first
# ---------------------------------------------------------------------------

def extract_contacts(ctx: ExtractionContext) -> list[Entity]:
    entities = _regex_entities(ctx, EMAIL_RE, EntityType.CONTACT, ctx.confidence.email, "email")
    for pattern in PHONE_PATTERNS:
        entities.extend(_regex_entities(ctx, pattern, EntityType.CONTACT, ctx.confidence.phone, "phone"))
    return entities


def extract_persons(ctx: ExtractionContext) -> list[Entity]:
    tokens, lex = ctx.tokens, ctx.lexicon
    entities = []
    i = 0
    while i < len(tokens):
        current = tokens[i]
        if not _free(ctx, current):
            i += 1
            continue

        matched: list[Token] = []
        confidence = 0.0
        nxt = tokens[i + 1] if i + 1 < len(tokens) else None

        # Title + Name [+ Surname]
        if _key(current) in lex.titles and nxt is not None and is_name_like(nxt.text) and _free(ctx, nxt):
            matched = [current, nxt]
            if i + 2 < len(tokens):
                third = tokens[i + 2]
                if _key(third) in lex.surnames and _free(ctx, third):
                    matched.append(third)
            confidence = ctx.confidence.person_title
        # Name + Surname
        elif (
            is_name_like(current.text)
            and _key(current) not in lex.titles
            and nxt is not None
            and _key(nxt) in lex.surnames
            and _free(ctx, nxt)
        ):
            matched = [current, nxt]
            confidence = ctx.confidence.person_surname

        entity = _token_entity(ctx, matched, EntityType.PERSON, confidence) if matched else None
        if entity is not None:
            entities.append(entity)
            i += len(matched)
        else:
            i += 1
    return entities


def extract_organizations(ctx: ExtractionContext) -> list[Entity]:
    lex = ctx.lexicon
    entities = []
    for i, token in enumerate(ctx.tokens):
        if not _free(ctx, token):
            continue
        key = _key(token)
        entity = None
        if key in lex.companies:
            entity = _token_entity(ctx, [token], EntityType.ORGANIZATION, ctx.confidence.company)
        elif key in lex.organizations:
            prev = ctx.tokens[i - 1] if i > 0 else None
            # "<Name> University", "<Name> Ltd": take the name with the suffix
            if prev is not None and is_name_like(prev.text) and _free(ctx, prev):
                entity = _token_entity(
                    ctx, [prev, token], EntityType.ORGANIZATION, ctx.confidence.organization_suffix
                )
            if entity is None:
                entity = _token_entity(ctx, [token], EntityType.ORGANIZATION, ctx.confidence.organization)
        if entity is not None:
            entities.append(entity)
    return entities


def extract_locations(ctx: ExtractionContext) -> list[Entity]:
    lex, tokens = ctx.lexicon, ctx.tokens
    entities = []

    for token in tokens:
        if not _free(ctx, token):
            continue
        key = _key(token)
        if key in lex.cities:
            confidence = ctx.confidence.city
        elif key in lex.states:
            confidence = ctx.confidence.state
        else:
            continue
        entity = _token_entity(ctx, [token], EntityType.LOCATION, confidence)
        if entity is not None:
            entities.append(entity)

    # Contextual fallback around locative markers
    markers = LOCATIVE_MARKERS.get(ctx.language, frozenset())
    prepositions = LOCATIVE_PREPOSITIONS.get(ctx.language, frozenset())
    for i, token in enumerate(tokens):
        key = _key(token)
        if key not in markers:
            continue
        candidates = [tokens[i - 1]] if i > 0 else []
        if key in prepositions and i + 1 < len(tokens) and tokens[i + 1].text[0].isupper():
            candidates.append(tokens[i + 1])
        for candidate in candidates:
            # Words known to any category are left to that category's extractor
            if lex.contains(_key(candidate)) or _key(candidate) in markers:
                continue
            if is_name_like(candidate.text) and _free(ctx, candidate):
                entity = _token_entity(ctx, [candidate], EntityType.LOCATION, ctx.confidence.location_context)
                if entity is not None:
                    entities.append(entity)
    return entities


def extract_skills(ctx: ExtractionContext) -> list[Entity]:
    entities = []
    for token in ctx.tokens:
        if _key(token) in ctx.lexicon.skills and _free(ctx, token):
            entity = _token_entity(ctx, [token], EntityType.SKILL, ctx.confidence.skill)
            if entity is not None:
                entities.append(entity)
    return entities


def extract_education(ctx: ExtractionContext) -> list[Entity]:
    entities = []
    for token in ctx.tokens:
        if _key(token) in ctx.lexicon.education and _free(ctx, token):
            entity = _token_entity(ctx, [token], EntityType.EDUCATION, ctx.confidence.education, "degree")
            if entity is not None:
                entities.append(entity)
    return entities


def extract_dates(ctx: ExtractionContext) -> list[Entity]:
    entities = []
    for pattern in date_patterns(ctx.language):
        entities.extend(_regex_entities(ctx, pattern, EntityType.DATE, ctx.confidence.date_pattern))
    for token in ctx.tokens:
        if _key(token) in ctx.lexicon.date_words and _free(ctx, token):
            entity = _token_entity(ctx, [token], EntityType.DATE, ctx.confidence.date_word)
            if entity is not None:
                entities.append(entity)
    return entities


Extractor = Callable[[ExtractionContext], list[Entity]]

EXTRACTORS: tuple[tuple[str, Extractor], ...] = (
    ("contact", extract_contacts),
    ("person", extract_persons),
    ("organization", extract_organizations),
    ("location", extract_locations),
    ("skill", extract_skills),
    ("education", extract_education),
    ("date", extract_dates),
)
