from models.entities import Entity, EntityType
from services.ner.resolver import resolve_overlaps


def ent(text, start, end, confidence, entity_type=EntityType.ORGANIZATION):
    return Entity(text=text, type=entity_type, start_pos=start, end_pos=end, confidence=confidence)


def test_disjoint_entities_kept_sorted():
    a = ent("a", 10, 12, 0.8)
    b = ent("b", 0, 3, 0.9)
    assert resolve_overlaps([a, b]) == [b, a]


def test_higher_confidence_replaces_accepted():
    weak = ent("Delhi University", 0, 16, 0.75)
    strong = ent("Delhi", 0, 5, 0.9, EntityType.LOCATION)
    assert resolve_overlaps([weak, strong]) == [strong]


def test_equal_confidence_keeps_first():
    first = ent("x", 0, 5, 0.8)
    second = ent("y", 3, 8, 0.8)
    assert resolve_overlaps([first, second]) == [first]


def test_lower_confidence_dropped():
    first = ent("x", 0, 5, 0.9)
    second = ent("y", 4, 9, 0.6)
    assert resolve_overlaps([first, second]) == [first]


def test_replacement_is_greedy_in_position_order():
    left = ent("l", 0, 5, 0.7)
    spanning = ent("s", 2, 8, 0.9)
    right = ent("r", 6, 10, 0.95)
    # "s" evicts "l", then "r" evicts "s"
    assert resolve_overlaps([right, left, spanning]) == [right]


def test_candidate_replaces_several_weaker():
    left = ent("l", 0, 5, 0.6)
    right = ent("r", 6, 10, 0.6)
    spanning = ent("s", 2, 8, 0.9)
    assert resolve_overlaps([left, right, spanning]) == [spanning]


def test_output_never_overlaps():
    candidates = [
        ent("a", 0, 10, 0.5),
        ent("b", 5, 15, 0.6),
        ent("c", 12, 20, 0.7),
        ent("d", 18, 25, 0.4),
        ent("e", 30, 31, 0.2),
    ]
    resolved = resolve_overlaps(candidates)
    for i, a in enumerate(resolved):
        for b in resolved[i + 1:]:
            assert not a.overlaps(b)
    assert [e.start_pos for e in resolved] == sorted(e.start_pos for e in resolved)


def test_empty():
    assert resolve_overlaps([]) == []
