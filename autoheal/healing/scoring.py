from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Iterable

from autoheal.healing.document import DocumentNode
from autoheal.healing.expression import ExtractedSignals
from autoheal.healing.search import Candidate

SIGNAL_WEIGHTS: dict[str, int] = {
    "id": 10,
    "name": 8,
    "class": 6,
    "text": 5,
    "tag": 3,
}


@dataclass(frozen=True, slots=True)
class ScoredCandidate:
    candidate: Candidate
    score: int

    @property
    def node(self) -> DocumentNode:
        return self.candidate.node


def score_node(node: DocumentNode, signals: ExtractedSignals) -> int:
    score = 0
    if signals.id and node.id == signals.id:
        score += SIGNAL_WEIGHTS["id"]
    if signals.name and node.attributes.get("name") == signals.name:
        score += SIGNAL_WEIGHTS["name"]
    if signals.class_name and node.has_class(signals.class_name):
        score += SIGNAL_WEIGHTS["class"]
    if signals.text and signals.text in node.text:
        score += SIGNAL_WEIGHTS["text"]
    if signals.tag_name and node.tag == signals.tag_name:
        score += SIGNAL_WEIGHTS["tag"]
    return score


def select_best(candidates: Iterable[Candidate], signals: ExtractedSignals) -> ScoredCandidate | None:
    """Returns the highest scoring candidate, or None when nothing scores.

    Only a strictly greater score replaces the running best, so among equal
    scores the candidate found first wins.
    """

    def keep_better(best: ScoredCandidate | None, candidate: Candidate) -> ScoredCandidate | None:
        score = score_node(candidate.node, signals)
        best_score = best.score if best is not None else 0
        if score > best_score:
            return ScoredCandidate(candidate, score)
        return best

    return reduce(keep_better, candidates, None)
