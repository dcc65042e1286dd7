"""Map a resolved entity list plus the raw transcript onto a CVDocument.

Entities give positions and confidences; the raw text is re-scanned with
regexes to recover fields the entity pass missed (contact details, company
and institution names, common skills).
"""

import logging
import re
from collections import Counter
from datetime import datetime, timezone

from models.cv_document import Contact, CVDocument, CVMetadata, Education, Experience, Skills
from models.entities import Entity, EntityType
from services.errors import CVMappingError
from services.ner.patterns import EMAIL_RE, GITHUB_RE, LINKEDIN_RE, RECALL_PHONE_RE
from services.ner.scripts import strip_unsupported

logger = logging.getLogger(__name__)

# Distances in characters
EDUCATION_PROXIMITY = 200
POSITION_WINDOW = 100
NEARBY_WINDOW = 150

DEFAULT_EXPERIENCE_CONFIDENCE = 0.7
LOW_CONFIDENCE = 0.7
LOW_CONFIDENCE_RATIO = 0.3

INSTITUTION_KEYWORDS: tuple[str, ...] = (
    "university", "college", "institute", "school",
    "विश्वविद्यालय", "कॉलेज", "संस्थान", "विद्यालय",
)

SUMMARY_CUES: frozenset[str] = frozenset({
    "i", "am", "experience", "expert", "passionate", "skilled",
    "मैं", "हूं", "हूँ", "अनुभव", "विशेषज्ञ",
    "मी", "আমি", "নিজে", "நான்", "అనుభవం", "నేను", "ನಾನು", "ഞാൻ", "હું", "ਮੈਂ",
})

POSITION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "engineer": ("engineer", "इंजीनियर", "अभियंता"),
    "manager": ("manager", "मैनेजर", "प्रबंधक"),
    "developer": ("developer", "डेवलपर", "विकासकर्ता"),
    "analyst": ("analyst", "विश्लेषक"),
    "consultant": ("consultant", "सलाहकार"),
}

FIELD_KEYWORDS: dict[str, tuple[str, ...]] = {
    "engineering": ("engineering", "btech", "mtech", "इंजीनियरिंग", "बीटेक"),
    "computer_science": ("computer", "cs", "it", "mca", "bca", "कंप्यूटर"),
    "management": ("mba", "management", "प्रबंधन", "एमबीए"),
    "science": ("science", "bsc", "msc", "विज्ञान"),
}

COMMON_TECH_SKILLS: tuple[str, ...] = (
    "JavaScript", "Python", "Java", "C++", "React", "Node.js", "HTML", "CSS", "SQL",
)
SOFT_SKILLS: tuple[str, ...] = (
    "leadership", "communication", "teamwork", "problem solving", "critical thinking",
    "creativity", "adaptability", "time management", "project management",
)
LANGUAGE_NAMES: tuple[str, ...] = (
    "English", "Hindi", "Tamil", "Telugu", "Kannada", "Malayalam", "Bengali",
    "Marathi", "Gujarati", "Punjabi", "Urdu", "Odia", "Assamese",
    "हिंदी", "हिन्दी", "अंग्रेजी", "अंग्रेज़ी",
)
_LANGUAGE_KEYS = frozenset(strip_unsupported(n).casefold() for n in LANGUAGE_NAMES)

_SENTENCE_SPLIT_RE = re.compile(r"[।!?]+|\.(?=\s|$)")

_NAME_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"(?i:my name is|i am|i'm)\s+([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+){0,2})"),
    re.compile(r"मेरा नाम\s+(\S+(?:\s+\S+)?)\s+है"),
)

_CAPS_NAME = r"[A-Z][\w&]*(?:\s+[A-Z][\w&]*){0,3}"
_COMPANY_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(rf"(?i:worked|working|work)\s+(?i:at|for)\s+({_CAPS_NAME})"),
    re.compile(r"(?i:company|कंपनी|organization|संगठन)\s*[:\-]\s*([^.,।\n]+?)\s*(?=[.,।\n]|$)"),
    re.compile(
        r"\b((?:[A-Z][\w&]*\s+){1,4}"
        r"(?:Ltd|Limited|Inc|Corporation|Pvt|Private|Company|Technologies|Solutions|Services)\b)"
    ),
    re.compile(r"(\S+)\s+(?:कंपनी\s+)?में\s+(?:काम|कार्य|नौकरी)"),
)

_INSTITUTION_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(
        r"(?:\b(?i:studied at|from|at)\s+)?"
        r"((?:[A-Z][\w&]*\s+){1,4}(?:University|College|Institute|School)\b(?:\s+of(?:\s+[A-Z][\w&]*)+)?)"
    ),
    re.compile(r"(\S+\s+(?:विश्वविद्यालय|कॉलेज|संस्थान|विद्यालय))"),
)

_GPA_RE = re.compile(
    r"(?i:c?gpa|percentage|grade)\s*(?:of|:|-|was|is)?\s*(\d{1,2}(?:\.\d{1,2})?\s*%?)"
    r"|(\d{1,2}(?:\.\d{1,2})?)\s*(?:(?i:c?gpa)\b|%)"
)


def _term_re(term: str) -> re.Pattern:
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


_TECH_SKILL_RES = [(s, _term_re(s)) for s in COMMON_TECH_SKILLS]
_SOFT_SKILL_RES = [(s, _term_re(s)) for s in SOFT_SKILLS]
_LANGUAGE_RES = [(s, _term_re(s)) for s in LANGUAGE_NAMES]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def group_by_proximity(entities: list[Entity], max_distance: int = 200) -> list[list[Entity]]:
    """Group position-sorted entities whose gap to the previous one is at most ``max_distance``."""
    if not entities:
        return []
    ordered = sorted(entities, key=lambda e: e.start_pos)
    groups = [[ordered[0]]]
    for prev, current in zip(ordered, ordered[1:]):
        if current.start_pos - prev.end_pos <= max_distance:
            groups[-1].append(current)
        else:
            groups.append([current])
    return groups


def _best(entities: list[Entity], entity_type: EntityType, subtype: str | None = None) -> Entity | None:
    candidates = [
        e for e in entities
        if e.type == entity_type and (subtype is None or e.subtype == subtype)
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda e: e.confidence)


def _of_type(entities: list[Entity], entity_type: EntityType) -> list[Entity]:
    return [e for e in entities if e.type == entity_type]


def _sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]


def _is_institution(name: str) -> bool:
    folded = name.casefold()
    return any(k in folded for k in INSTITUTION_KEYWORDS)


def is_language_name(name: str) -> bool:
    return strip_unsupported(name).casefold() in _LANGUAGE_KEYS


def _add_unique(names: list[str], candidate: str) -> None:
    """Append unless an existing name equals or contains it (case-insensitive)."""
    folded = candidate.casefold()
    for existing in names:
        if folded in existing.casefold() or existing.casefold() in folded:
            return
    names.append(candidate)


def _within(entities: list[Entity], anchor: int, distance: int) -> list[Entity]:
    return [e for e in entities if abs(e.start_pos - anchor) <= distance]


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

def _recover_name(text: str) -> str:
    for pattern in _NAME_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1).strip()
    return ""


def _contact(entities: list[Entity], text: str) -> Contact:
    person = _best(entities, EntityType.PERSON)
    email = _best(entities, EntityType.CONTACT, "email")
    phone = _best(entities, EntityType.CONTACT, "phone")
    location = _best(entities, EntityType.LOCATION)

    def recover(pattern: re.Pattern) -> str:
        match = pattern.search(text)
        return match.group() if match else ""

    return Contact(
        name=person.text if person else _recover_name(text),
        email=email.text if email else recover(EMAIL_RE),
        phone=phone.text if phone else recover(RECALL_PHONE_RE),
        location=location.text if location else "",
        linkedin=recover(LINKEDIN_RE),
        github=recover(GITHUB_RE),
    )


def _summary(text: str) -> str:
    sentences = _sentences(text)
    cued = [
        s for s in sentences
        if any(strip_unsupported(w).casefold() in SUMMARY_CUES for w in s.split())
    ]
    if cued:
        return ". ".join(cued)

    substantial = [s for s in sentences if len(s) > 10]
    summary = ". ".join(substantial[:2])
    if len(substantial) > 2:
        summary += "."
    return summary


def _infer_position(text: str, start: int, end: int) -> str:
    window = text[max(0, start - POSITION_WINDOW):end + POSITION_WINDOW].casefold()
    for position, keywords in POSITION_KEYWORDS.items():
        if any(k in window for k in keywords):
            return position
    return ""


def _sentence_with(text: str, name: str) -> str:
    for sentence in _sentences(text):
        if name in sentence:
            return sentence
    return ""


def _experience(entities: list[Entity], text: str) -> list[Experience]:
    organizations = _of_type(entities, EntityType.ORGANIZATION)
    degrees = _of_type(entities, EntityType.EDUCATION)
    dates = _of_type(entities, EntityType.DATE)
    locations = _of_type(entities, EntityType.LOCATION)

    work_orgs = [
        org for org in organizations
        if not _is_institution(org.text)
        and not any(abs(d.start_pos - org.start_pos) < EDUCATION_PROXIMITY for d in degrees)
    ]

    # Adjacent mentions ("Infosys" "Technologies") name one employer
    names: list[str] = []
    sources: dict[str, tuple[int, int, float]] = {}
    for group in group_by_proximity(work_orgs, max_distance=1):
        name = " ".join(e.text for e in group)
        _add_unique(names, name)
        sources.setdefault(name, (group[0].start_pos, group[-1].end_pos, max(e.confidence for e in group)))

    skills = {s.text.casefold() for s in _of_type(entities, EntityType.SKILL)}
    for pattern in _COMPANY_PATTERNS:
        for match in pattern.finditer(text):
            company = match.group(1).strip()
            if len(company) > 2 and not _is_institution(company) and company.casefold() not in skills:
                _add_unique(names, company)

    experience = []
    for name in names:
        if name in sources:
            start, end, confidence = sources[name]
        else:
            start = max(text.find(name), 0)
            end, confidence = start + len(name), DEFAULT_EXPERIENCE_CONFIDENCE

        nearby_dates = sorted(_within(dates, start, NEARBY_WINDOW), key=lambda e: e.start_pos)
        nearby_locations = sorted(
            _within(locations, start, NEARBY_WINDOW), key=lambda e: abs(e.start_pos - start)
        )
        experience.append(Experience(
            company=name,
            position=_infer_position(text, start, end),
            location=nearby_locations[0].text if nearby_locations else "",
            start_date=nearby_dates[0].text if nearby_dates else "",
            end_date=nearby_dates[1].text if len(nearby_dates) > 1 else "",
            description=_sentence_with(text, name),
            confidence=confidence,
        ))

    experience.sort(key=lambda x: x.confidence, reverse=True)
    return experience


def _infer_field(degree: str) -> str:
    key = strip_unsupported(degree).casefold()
    words = set(degree.casefold().split())
    for field, keywords in FIELD_KEYWORDS.items():
        # Short codes ("cs", "it") must match a whole word
        if any((k in words) if len(k) <= 2 else (k in key) for k in keywords):
            return field
    return "general"


def _gpa_near(text: str, anchor: int) -> str:
    window = text[max(0, anchor - EDUCATION_PROXIMITY):anchor + EDUCATION_PROXIMITY]
    match = _GPA_RE.search(window)
    if not match:
        return ""
    return (match.group(1) or match.group(2)).strip()


def _education(entities: list[Entity], text: str) -> list[Education]:
    degrees = _of_type(entities, EntityType.EDUCATION)
    dates = _of_type(entities, EntityType.DATE)

    names: list[str] = []
    positions: dict[str, int] = {}
    for org in _of_type(entities, EntityType.ORGANIZATION):
        if _is_institution(org.text):
            _add_unique(names, org.text)
            positions.setdefault(org.text, org.start_pos)
    for pattern in _INSTITUTION_PATTERNS:
        for match in pattern.finditer(text):
            institution = match.group(1).strip()
            if len(institution) > 3:
                _add_unique(names, institution)
                positions.setdefault(institution, match.start(1))

    if not degrees:
        return [Education(institution=name) for name in names]

    education = []
    for degree in degrees:
        nearby = [
            (abs(positions[name] - degree.start_pos), name)
            for name in names
            if abs(positions[name] - degree.start_pos) < EDUCATION_PROXIMITY
        ]
        nearby_dates = sorted(_within(dates, degree.start_pos, NEARBY_WINDOW), key=lambda e: e.start_pos)
        education.append(Education(
            degree=degree.text,
            institution=min(nearby)[1] if nearby else "",
            field=_infer_field(degree.text),
            start_date=nearby_dates[0].text if nearby_dates else "",
            end_date=nearby_dates[1].text if len(nearby_dates) > 1 else "",
            gpa=_gpa_near(text, degree.start_pos),
        ))
    return education


def _skills(entities: list[Entity], text: str) -> Skills:
    technical: list[str] = []
    languages: list[str] = []
    for skill in _of_type(entities, EntityType.SKILL):
        target = languages if is_language_name(skill.text) else technical
        if skill.text.casefold() not in (s.casefold() for s in target):
            target.append(skill.text)

    for name, pattern in _TECH_SKILL_RES:
        if pattern.search(text) and name.casefold() not in (s.casefold() for s in technical):
            technical.append(name)
    for name, pattern in _LANGUAGE_RES:
        if pattern.search(text) and name.casefold() not in (s.casefold() for s in languages):
            languages.append(name)
    soft = [name for name, pattern in _SOFT_SKILL_RES if pattern.search(text)]

    return Skills(technical=technical, soft=soft, languages=languages)


def needs_review(entities: list[Entity]) -> bool:
    low = sum(1 for e in entities if e.confidence < LOW_CONFIDENCE)
    has_contact = any(e.type == EntityType.CONTACT for e in entities)
    has_person = any(e.type == EntityType.PERSON for e in entities)
    return low > len(entities) * LOW_CONFIDENCE_RATIO or not has_contact or not has_person


def _metadata(entities: list[Entity], text: str, timestamp: str | None) -> CVMetadata:
    confidence = sum(e.confidence for e in entities) / len(entities) if entities else 0.0
    counts = Counter(e.language or "unknown" for e in entities)
    return CVMetadata(
        confidence=confidence,
        language=counts.most_common(1)[0][0] if counts else "unknown",
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
        needs_review=needs_review(entities),
        extraction_method="ner",
        text_length=len(text),
    )


def create_cv_structure(
    entities: list[Entity],
    raw_text: str,
    *,
    timestamp: str | None = None,
) -> CVDocument:
    """Build a CVDocument from ``entities`` found in ``raw_text``.

    Apart from ``metadata.timestamp`` (fixed by passing ``timestamp``), the
    result depends only on the arguments. Raises CVMappingError when an
    entity span falls outside ``raw_text``.
    """
    for entity in entities:
        if entity.end_pos > len(raw_text):
            raise CVMappingError(
                f"Entity '{entity.text}' [{entity.start_pos}, {entity.end_pos}) "
                f"is outside the text (length {len(raw_text)})"
            )

    cv = CVDocument(
        contact=_contact(entities, raw_text),
        summary=_summary(raw_text),
        experience=_experience(entities, raw_text),
        education=_education(entities, raw_text),
        skills=_skills(entities, raw_text),
        certifications=[],
        metadata=_metadata(entities, raw_text, timestamp),
    )
    logger.debug(
        "Mapped %d entities to CV (%d experience, %d education)",
        len(entities), len(cv.experience), len(cv.education),
    )
    return cv
