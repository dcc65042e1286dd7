"""Per-language lexicons for dictionary-based entity matching.

The gazetteer JSON is parsed once into immutable ``Lexicon`` objects whose
term sets are shared by reference across every extraction call. Terms are
normalized the same way token text is (unsupported characters stripped, then
case-folded) so membership is a single set lookup.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from services.errors import GazetteerMissing
from services.ner.scripts import strip_unsupported

logger = logging.getLogger(__name__)

LEXICON_FIELDS: tuple[str, ...] = (
    "titles",
    "surnames",
    "organizations",
    "companies",
    "cities",
    "states",
    "skills",
    "education",
    "date_words",
)

# JSON keys that differ from the Python attribute names
_JSON_KEYS: dict[str, str] = {"date_words": "dateWords"}


def normalize_term(term: str) -> str:
    return strip_unsupported(term).casefold()


@dataclass(frozen=True)
class Lexicon:
    code: str
    name: str = ""
    titles: frozenset[str] = field(default_factory=frozenset)
    surnames: frozenset[str] = field(default_factory=frozenset)
    organizations: frozenset[str] = field(default_factory=frozenset)
    companies: frozenset[str] = field(default_factory=frozenset)
    cities: frozenset[str] = field(default_factory=frozenset)
    states: frozenset[str] = field(default_factory=frozenset)
    skills: frozenset[str] = field(default_factory=frozenset)
    education: frozenset[str] = field(default_factory=frozenset)
    date_words: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, code: str, data: dict) -> "Lexicon":
        sets: dict[str, frozenset[str]] = {}
        for attr in LEXICON_FIELDS:
            raw = data.get(_JSON_KEYS.get(attr, attr)) or []
            if not isinstance(raw, list):
                raise ValueError(f"'{attr}' for language '{code}' must be a list")
            terms = (normalize_term(str(t)) for t in raw)
            sets[attr] = frozenset(t for t in terms if t)
        return cls(code=code, name=str(data.get("name", code)), **sets)

    def contains(self, term: str) -> bool:
        """True if the normalized ``term`` is in any category."""
        return any(term in getattr(self, attr) for attr in LEXICON_FIELDS)

    def merged_with(self, other: "Lexicon", code: str) -> "Lexicon":
        sets = {attr: getattr(self, attr) | getattr(other, attr) for attr in LEXICON_FIELDS}
        return Lexicon(code=code, name=f"{self.name}+{other.name}", **sets)


# ---------------------------------------------------------------------------
# Built-in minimal lexicon, used when the gazetteer file is unavailable
# ---------------------------------------------------------------------------

_MINIMAL_DATA: dict[str, dict] = {
    "hi": {
        "name": "Hindi",
        "titles": ["श्री", "श्रीमती", "डॉ", "कुमारी"],
        "surnames": ["सिंह", "कुमार", "शर्मा", "वर्मा", "गुप्ता"],
        "organizations": ["कंपनी", "विश्वविद्यालय", "कॉलेज", "संस्थान"],
        "companies": ["इंफोसिस", "विप्रो", "टीसीएस"],
        "cities": ["दिल्ली", "मुंबई", "बेंगलुरु", "पुणे"],
        "states": ["महाराष्ट्र", "कर्नाटक"],
        "skills": ["प्रोग्रामिंग", "कंप्यूटर"],
        "education": ["स्नातक", "बीटेक", "एमबीए"],
        "dateWords": ["जनवरी", "फरवरी", "मार्च", "अप्रैल", "मई", "जून", "जुलाई",
                      "अगस्त", "सितंबर", "अक्टूबर", "नवंबर", "दिसंबर"],
    },
    "en": {
        "name": "English",
        "titles": ["Mr", "Mrs", "Ms", "Dr"],
        "surnames": ["Singh", "Kumar", "Sharma", "Verma", "Gupta"],
        "organizations": ["University", "College", "Institute", "Ltd", "Limited"],
        "companies": ["Infosys", "Wipro", "TCS", "Google"],
        "cities": ["Delhi", "Mumbai", "Bangalore", "Pune"],
        "states": ["Maharashtra", "Karnataka"],
        "skills": ["Programming", "Computer", "Python", "Java"],
        "education": ["BTech", "MTech", "MBA", "Bachelor", "Master"],
        "dateWords": ["January", "February", "March", "April", "June", "July",
                      "August", "September", "October", "November", "December"],
    },
}

MINIMAL_GAZETTEER: dict[str, Lexicon] = {
    code: Lexicon.from_dict(code, data) for code, data in _MINIMAL_DATA.items()
}
FALLBACK_LEXICON: Lexicon = MINIMAL_GAZETTEER["hi"].merged_with(MINIMAL_GAZETTEER["en"], "fallback")


# ---------------------------------------------------------------------------
# Locative markers and month names per language
# ---------------------------------------------------------------------------

# The token before any marker is a place candidate ("दिल्ली में", "Ramesh in").
LOCATIVE_MARKERS: dict[str, frozenset[str]] = {
    "en": frozenset({"in", "at", "from"}),
    "hi": frozenset({"में", "से", "को"}),
    "mr": frozenset({"मध्ये", "येथे", "पासून"}),
    "bn": frozenset({"তে", "থেকে", "এ"}),
    "as": frozenset({"ত", "পৰা"}),
    "pa": frozenset({"ਵਿੱਚ", "ਤੋਂ"}),
    "gu": frozenset({"માં", "થી"}),
    "or": frozenset({"ରେ", "ରୁ"}),
    "ta": frozenset({"இல்", "லிருந்து"}),
    "te": frozenset({"లో", "నుండి"}),
    "kn": frozenset({"ನಲ್ಲಿ", "ದಿಂದ"}),
    "ml": frozenset({"ൽ", "നിന്ന്"}),
    "ur": frozenset({"میں", "سے"}),
}
# Prepositions also tag the capitalized token after them ("in Delhi").
LOCATIVE_PREPOSITIONS: dict[str, frozenset[str]] = {
    "en": frozenset({"in", "at", "from"}),
}

MONTH_NAMES: dict[str, tuple[str, ...]] = {
    "en": ("January", "February", "March", "April", "May", "June", "July", "August",
           "September", "October", "November", "December",
           "Jan", "Feb", "Mar", "Apr", "Jun", "Jul", "Aug", "Sep", "Sept", "Oct", "Nov", "Dec"),
    "hi": ("जनवरी", "फरवरी", "मार्च", "अप्रैल", "मई", "जून", "जुलाई", "अगस्त",
           "सितंबर", "अक्टूबर", "नवंबर", "दिसंबर"),
    "mr": ("जानेवारी", "फेब्रुवारी", "मार्च", "एप्रिल", "मे", "जून", "जुलै", "ऑगस्ट",
           "सप्टेंबर", "ऑक्टोबर", "नोव्हेंबर", "डिसेंबर"),
    "bn": ("জানুয়ারি", "ফেব্রুয়ারি", "মার্চ", "এপ্রিল", "মে", "জুন", "জুলাই", "আগস্ট",
           "সেপ্টেম্বর", "অক্টোবর", "নভেম্বর", "ডিসেম্বর"),
    "ta": ("ஜனவரி", "பிப்ரவரி", "மார்ச்", "ஏப்ரல்", "மே", "ஜூன்", "ஜூலை", "ஆகஸ்ட்",
           "செப்டம்பர்", "அக்டோபர்", "நவம்பர்", "டிசம்பர்"),
    "te": ("జనవరి", "ఫిబ్రవరి", "మార్చి", "ఏప్రిల్", "మే", "జూన్", "జూలై", "ఆగస్టు",
           "సెప్టెంబర్", "అక్టోబర్", "నవంబర్", "డిసెంబర్"),
    "gu": ("જાન્યુઆરી", "ફેબ્રુઆરી", "માર્ચ", "એપ્રિલ", "મે", "જૂન", "જુલાઈ", "ઓગસ્ટ",
           "સપ્ટેમ્બર", "ઓક્ટોબર", "નવેમ્બર", "ડિસેમ્બર"),
    "pa": ("ਜਨਵਰੀ", "ਫ਼ਰਵਰੀ", "ਮਾਰਚ", "ਅਪ੍ਰੈਲ", "ਮਈ", "ਜੂਨ", "ਜੁਲਾਈ", "ਅਗਸਤ",
           "ਸਤੰਬਰ", "ਅਕਤੂਬਰ", "ਨਵੰਬਰ", "ਦਸੰਬਰ"),
    "kn": ("ಜನವರಿ", "ಫೆಬ್ರವರಿ", "ಮಾರ್ಚ್", "ಏಪ್ರಿಲ್", "ಮೇ", "ಜೂನ್", "ಜುಲೈ", "ಆಗಸ್ಟ್",
           "ಸೆಪ್ಟೆಂಬರ್", "ಅಕ್ಟೋಬರ್", "ನವೆಂಬರ್", "ಡಿಸೆಂಬರ್"),
    "ml": ("ജനുവരി", "ഫെബ്രുവരി", "മാർച്ച്", "ഏപ്രിൽ", "മേയ്", "ജൂൺ", "ജൂലൈ", "ഓഗസ്റ്റ്",
           "സെപ്റ്റംബർ", "ഒക്ടോബർ", "നവംബർ", "ഡിസംബർ"),
    "ur": ("جنوری", "فروری", "مارچ", "اپریل", "مئی", "جون", "جولائی", "اگست",
           "ستمبر", "اکتوبر", "نومبر", "دسمبر"),
}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_gazetteer(path: str | Path) -> dict[str, Lexicon]:
    """Parse the gazetteer JSON at ``path`` into per-language lexicons.

    Raises GazetteerMissing if the file is absent, unreadable or malformed.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        languages = raw["languages"]
        if not isinstance(languages, dict) or not languages:
            raise ValueError("'languages' must be a non-empty object")
        return {code: Lexicon.from_dict(code, data) for code, data in languages.items()}
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise GazetteerMissing(f"Could not load gazetteer from {path}: {e}") from e


def load_gazetteer_or_fallback(path: str | Path) -> dict[str, Lexicon]:
    """Load the gazetteer, degrading to the built-in minimal lexicon."""
    try:
        gazetteer = load_gazetteer(path)
        logger.info("Gazetteer loaded from %s (%d languages)", path, len(gazetteer))
        return gazetteer
    except GazetteerMissing as e:
        logger.warning("%s - using built-in minimal lexicon", e)
        return dict(MINIMAL_GAZETTEER)


# Loaded once on first use, read-only afterwards
_gazetteer: dict[str, Lexicon] | None = None


def get_gazetteer() -> dict[str, Lexicon]:
    global _gazetteer
    if _gazetteer is None:
        from config import settings

        _gazetteer = load_gazetteer_or_fallback(settings.gazetteer_path)
    return _gazetteer


def set_gazetteer(gazetteer: dict[str, Lexicon] | None) -> None:
    """Replace the shared gazetteer (None forces a reload on next use)."""
    global _gazetteer
    _gazetteer = gazetteer


def get_lexicon(language: str, gazetteer: dict[str, Lexicon] | None = None) -> Lexicon:
    """Return the lexicon for ``language``, or the merged fallback lexicon."""
    gazetteer = gazetteer if gazetteer is not None else get_gazetteer()
    lexicon = gazetteer.get(language)
    if lexicon is None:
        logger.warning("No lexicon for language '%s', using fallback lexicon", language)
        return FALLBACK_LEXICON
    return lexicon
