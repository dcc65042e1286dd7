"""Tests for mapping entities and raw text onto a CVDocument."""

import pytest

from models.entities import Entity, EntityType
from services.cv_mapper import create_cv_structure, group_by_proximity, needs_review
from services.errors import CVMappingError
from services.ner.engine import extract_entities

TEXT = (
    "Hello, I am Mr Rajesh Kumar from Pune. Email: rajesh.kumar@example.com, phone +91 9876543210. "
    "I worked at Infosys as a software engineer from 01/07/2015 to 2019-12-31. "
    "My skills are Python, Java and SQL. I have good communication and leadership. "
    "I speak Hindi and English. Profile: linkedin.com/in/rajeshk and github.com/rajeshk. "
    "I completed my BTech at Pune University in 2015 with CGPA 8.5."
)


def ent(text, entity_type, start, end, confidence=0.9, subtype=None, language="en"):
    return Entity(
        text=text, type=entity_type, subtype=subtype,
        start_pos=start, end_pos=end, confidence=confidence, language=language,
    )


@pytest.fixture
def cv(gazetteer, fixed_timestamp):
    entities = extract_entities(TEXT, "en", gazetteer)
    return create_cv_structure(entities, TEXT, timestamp=fixed_timestamp)


# ---------------------------------------------------------------------------
# Full mapping
# ---------------------------------------------------------------------------

class TestCreateCVStructure:
    def test_contact(self, cv):
        assert cv.contact.name == "Mr Rajesh Kumar"
        assert cv.contact.email == "rajesh.kumar@example.com"
        assert cv.contact.phone == "+91 9876543210"
        assert cv.contact.location == "Pune"
        assert cv.contact.linkedin == "linkedin.com/in/rajeshk"
        assert cv.contact.github == "github.com/rajeshk"

    def test_experience(self, cv):
        companies = [e.company for e in cv.experience]
        assert "Infosys" in companies
        assert not any("University" in c for c in companies)
        infosys = next(e for e in cv.experience if e.company == "Infosys")
        assert infosys.position == "engineer"
        assert infosys.confidence == 0.95
        assert infosys.start_date == "01/07/2015"
        assert infosys.end_date == "2019-12-31"
        assert "Infosys" in infosys.description

    def test_experience_sorted_by_confidence(self, cv):
        confidences = [e.confidence for e in cv.experience]
        assert confidences == sorted(confidences, reverse=True)

    def test_education(self, cv):
        assert len(cv.education) == 1
        edu = cv.education[0]
        assert edu.degree == "BTech"
        assert edu.institution == "Pune University"
        assert edu.field == "engineering"
        assert edu.gpa == "8.5"

    def test_skills(self, cv):
        assert {"Python", "Java", "SQL"} <= set(cv.skills.technical)
        assert "communication" in cv.skills.soft
        assert "leadership" in cv.skills.soft
        assert {"Hindi", "English"} <= set(cv.skills.languages)
        assert "Hindi" not in cv.skills.technical

    def test_summary_uses_first_person_sentences(self, cv):
        assert "I completed my BTech" in cv.summary

    def test_metadata(self, cv, fixed_timestamp):
        assert cv.metadata.timestamp == fixed_timestamp
        assert cv.metadata.language == "en"
        assert 0.0 < cv.metadata.confidence <= 1.0
        assert cv.metadata.needs_review is False
        assert cv.metadata.extraction_method == "ner"

    def test_pure(self, gazetteer, fixed_timestamp):
        entities = extract_entities(TEXT, "en", gazetteer)
        first = create_cv_structure(entities, TEXT, timestamp=fixed_timestamp)
        second = create_cv_structure(entities, TEXT, timestamp=fixed_timestamp)
        assert first == second
        assert first.model_dump() == second.model_dump()


# ---------------------------------------------------------------------------
# Recall recovery
# ---------------------------------------------------------------------------

class TestRecallRecovery:
    def test_contact_recovered_from_raw_text(self):
        text = "My name is Test User. Email: test@example.com. Phone: 987-654-3210."
        cv = create_cv_structure([], text, timestamp="t")
        assert cv.contact.name == "Test User"
        assert cv.contact.email == "test@example.com"
        assert cv.contact.phone == "987-654-3210"

    def test_hindi_name_recovered(self):
        cv = create_cv_structure([], "मेरा नाम अगम है।", timestamp="t")
        assert cv.contact.name == "अगम"

    def test_companies_recovered_from_patterns(self):
        text = "I worked at Acme Robotics for two years. Later I joined Bright Future Technologies."
        cv = create_cv_structure([], text, timestamp="t")
        companies = [e.company for e in cv.experience]
        assert "Acme Robotics" in companies
        assert "Bright Future Technologies" in companies
        assert all(e.confidence == 0.7 for e in cv.experience)

    def test_work_with_skill_is_not_an_employer(self, gazetteer):
        text = "My name is Asha Verma. I work with Python and React every day."
        cv = create_cv_structure(extract_entities(text, "en", gazetteer), text, timestamp="t")
        assert cv.experience == []
        assert {"Python", "React"} <= set(cv.skills.technical)

    def test_recovered_name_matching_a_skill_is_skipped(self):
        text = "I worked at Python for years"
        skill = ent("Python", EntityType.SKILL, 12, 18, 0.8)
        cv = create_cv_structure([skill], text, timestamp="t")
        assert cv.experience == []

    def test_company_colon_pattern(self):
        cv = create_cv_structure([], "Company: Nova Labs. Role: developer.", timestamp="t")
        assert cv.experience[0].company == "Nova Labs"
        assert cv.experience[0].position == "developer"

    def test_institution_only_education(self):
        text = "I studied at Delhi Public School and later at Stanford University."
        cv = create_cv_structure([], text, timestamp="t")
        institutions = [e.institution for e in cv.education]
        assert institutions == ["Delhi Public School", "Stanford University"]
        assert all(e.degree == "" for e in cv.education)

    def test_educational_orgs_excluded_from_experience(self):
        text = "I studied at Stanford University."
        org = ent("Stanford University", EntityType.ORGANIZATION, 13, 32, 0.75)
        cv = create_cv_structure([org], text, timestamp="t")
        assert cv.experience == []
        assert cv.education[0].institution == "Stanford University"

    def test_org_near_degree_is_not_work(self):
        text = "MBA from Acme"
        entities = [
            ent("MBA", EntityType.EDUCATION, 0, 3, 0.75, subtype="degree"),
            ent("Acme", EntityType.ORGANIZATION, 9, 13, 0.8),
        ]
        cv = create_cv_structure(entities, text, timestamp="t")
        assert cv.experience == []
        assert cv.education[0].field == "management"

    def test_adjacent_org_mentions_merge(self):
        text = "Infosys Technologies hired me"
        entities = [
            ent("Infosys", EntityType.ORGANIZATION, 0, 7, 0.95),
            ent("Technologies", EntityType.ORGANIZATION, 8, 20, 0.8),
        ]
        cv = create_cv_structure(entities, text, timestamp="t")
        assert [e.company for e in cv.experience] == ["Infosys Technologies"]
        assert cv.experience[0].confidence == 0.95

    def test_summary_fallback_first_sentences(self):
        text = "Rahul here from the team. Works on billing systems daily. Likes cricket a lot."
        cv = create_cv_structure([], text, timestamp="t")
        assert cv.summary == "Rahul here from the team. Works on billing systems daily."


# ---------------------------------------------------------------------------
# Review flag and errors
# ---------------------------------------------------------------------------

class TestReviewFlag:
    def test_no_entities_needs_review(self):
        assert needs_review([]) is True
        cv = create_cv_structure([], "nothing useful here", timestamp="t")
        assert cv.metadata.needs_review is True
        assert cv.metadata.confidence == 0.0
        assert cv.metadata.language == "unknown"

    def test_missing_person_needs_review(self):
        entities = [ent("a@b.co", EntityType.CONTACT, 0, 6, 0.98, subtype="email")]
        assert needs_review(entities) is True

    def test_many_low_confidence_needs_review(self):
        entities = [
            ent("Mr A B", EntityType.PERSON, 0, 6, 0.95),
            ent("a@b.co", EntityType.CONTACT, 7, 13, 0.98, subtype="email"),
            ent("X", EntityType.LOCATION, 14, 15, 0.6),
            ent("Y", EntityType.LOCATION, 16, 17, 0.6),
        ]
        assert needs_review(entities) is True

    def test_few_low_confidence_is_fine(self):
        entities = [
            ent("Mr A B", EntityType.PERSON, 0, 6, 0.95),
            ent("a@b.co", EntityType.CONTACT, 7, 13, 0.98, subtype="email"),
            ent("X", EntityType.LOCATION, 14, 15, 0.6),
            ent("Python", EntityType.SKILL, 16, 22, 0.8),
        ]
        assert needs_review(entities) is False


def test_entity_outside_text_raises():
    entity = ent("Pune", EntityType.LOCATION, 10, 14)
    with pytest.raises(CVMappingError):
        create_cv_structure([entity], "short", timestamp="t")


def test_group_by_proximity():
    a = ent("a", EntityType.ORGANIZATION, 0, 5)
    b = ent("b", EntityType.ORGANIZATION, 10, 15)
    c = ent("c", EntityType.ORGANIZATION, 300, 305)
    assert group_by_proximity([c, a, b], max_distance=200) == [[a, b], [c]]
    assert group_by_proximity([a, b], max_distance=4) == [[a], [b]]
    assert group_by_proximity([]) == []
