"""Graders for pair-matching questions.

Two answer shapes reach these graders:

- a list of matched pair IDs (current clients), e.g. ``[1, 3, 4]``
- a legacy mapping of slot -> ``{"pair_id": ..., "<partner field>": ...}``

normalize_matching_answer() converts either shape into a list of pair IDs so
the graders only ever deal with one shape.
"""

from typing import Any, Mapping

from models import GradeResult, SynonymsMatchingQuestion, WordMatchingQuestion
from grading.base import AnswerGrader, fraction

# Legacy clients used camelCase keys
_PAIR_ID_KEYS = ("pair_id", "pairId")


def _is_pair_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _legacy_pair_id(match: Mapping[str, Any]) -> Any:
    for key in _PAIR_ID_KEYS:
        if key in match:
            return match[key]
    return None


def normalize_matching_answer(
    answer: Any,
    partners: Mapping[int, str],
    partner_field: str,
) -> list[Any]:
    """Convert a matching answer to a list of matched pair IDs.

    Args:
        answer: The submitted value, in list or legacy mapping shape.
        partners: Canonical pairs as pair_id -> expected partner word.
        partner_field: Key holding the partner word in legacy matches.

    Returns:
        Matched pair IDs. For the legacy shape only matches whose pair ID and
        partner word both agree with a canonical pair are kept. Any other
        shape yields an empty list.
    """
    if isinstance(answer, (list, tuple)):
        return list(answer)

    if isinstance(answer, Mapping):
        matched = []
        for match in answer.values():
            if not isinstance(match, Mapping):
                continue
            pair_id = _legacy_pair_id(match)
            if not _is_pair_id(pair_id) or pair_id not in partners:
                continue
            if match.get(partner_field) == partners[pair_id]:
                matched.append(pair_id)
        return matched

    return []


def grade_matches(
    matched_ids: list[Any],
    canonical_ids: set[int],
    perfect_feedback: str,
) -> GradeResult:
    """Grade a list of matched pair IDs against the canonical pairing.

    The score is the share of canonical pairs matched. The answer is fully
    correct only when every pair is matched and exactly as many matches as
    pairs were submitted.
    """
    total = len(canonical_ids)
    correct_ids = {
        pair_id
        for pair_id in matched_ids
        if _is_pair_id(pair_id) and pair_id in canonical_ids
    }
    correct = len(correct_ids)
    score = fraction(correct, total)
    is_correct = total > 0 and correct == total and len(matched_ids) == total
    return GradeResult(
        is_correct=is_correct,
        score=score,
        feedback=perfect_feedback if is_correct else f"{correct}/{total} pairs correct",
    )


class WordMatchingGrader(AnswerGrader[WordMatchingQuestion]):
    """Grader for Vietnamese-English word matching."""

    def grade(self, answer: Any) -> GradeResult:
        partners = {pair.id: pair.vietnamese for pair in self.question.pairs}
        matched = normalize_matching_answer(answer, partners, "vietnamese")
        return grade_matches(matched, set(partners), "Perfect matching!")


class SynonymsMatchingGrader(AnswerGrader[SynonymsMatchingQuestion]):
    """Grader for synonym matching."""

    def grade(self, answer: Any) -> GradeResult:
        partners = {pair.id: pair.word2 for pair in self.question.pairs}
        matched = normalize_matching_answer(answer, partners, "word2")
        return grade_matches(matched, set(partners), "All synonyms matched correctly!")
