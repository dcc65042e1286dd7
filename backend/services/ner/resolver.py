"""Merge candidate entities into a non-overlapping, position-sorted list."""

from models.entities import Entity


def resolve_overlaps(candidates: list[Entity]) -> list[Entity]:
    """Resolve overlapping candidates by confidence.

    Candidates are visited in ``start_pos`` order (stable, so ties keep the
    extractor priority order). A candidate that overlaps accepted entities
    replaces them only when its confidence is strictly higher than every one
    of them; otherwise it is dropped.
    """
    accepted: list[Entity] = []
    for candidate in sorted(candidates, key=lambda e: e.start_pos):
        clashes = [e for e in accepted if e.overlaps(candidate)]
        if not clashes:
            accepted.append(candidate)
        elif all(candidate.confidence > e.confidence for e in clashes):
            accepted = [e for e in accepted if not e.overlaps(candidate)]
            accepted.append(candidate)
    accepted.sort(key=lambda e: e.start_pos)
    return accepted
