from __future__ import annotations

from dataclasses import dataclass

from autoheal.healing.document import DocumentNode, DocumentTree
from autoheal.healing.expression import ExtractedSignals

STRATEGY_ORDER = ("id", "text", "class", "name", "tag")


@dataclass(frozen=True, slots=True)
class Candidate:
    node: DocumentNode
    strategy: str


def find_candidates(tree: DocumentTree, signals: ExtractedSignals) -> list[Candidate]:
    """Runs every applicable strategy and concatenates the hits.

    A node found by several strategies appears once per strategy; the
    scorer is attribute based so repeats do not change its score.
    """

    candidates: list[Candidate] = []
    if signals.id:
        node = tree.by_id(signals.id)
        if node is not None:
            candidates.append(Candidate(node, "id"))
    if signals.text:
        candidates.extend(Candidate(node, "text") for node in tree.containing_text(signals.text))
    if signals.class_name:
        candidates.extend(Candidate(node, "class") for node in tree.with_class(signals.class_name))
    if signals.name:
        candidates.extend(Candidate(node, "name") for node in tree.with_attribute("name", signals.name))
    if signals.tag_name:
        candidates.extend(Candidate(node, "tag") for node in tree.with_tag(signals.tag_name))
    return candidates
