from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from autoheal.core.metadata import HealAttempt
from autoheal.healing.cache import HealCache
from autoheal.healing.collaborators import MarkupSource, Resolver
from autoheal.healing.document import TEXT_MODES, DocumentTree
from autoheal.healing.expression import ExtractedSignals, extract_signals, is_path_expression
from autoheal.healing.scoring import select_best
from autoheal.healing.search import find_candidates
from autoheal.healing.synthesis import synthesize_path

logger = logging.getLogger(__name__)


class HealOutcome(str, Enum):
    HEALED = "healed"
    CACHED = "cached"
    UNSUPPORTED = "unsupported"
    NO_SIGNALS = "no_signals"
    NO_CANDIDATE = "no_candidate"
    VALIDATION_FAILED = "validation_failed"


@dataclass(slots=True)
class HealResult:
    original: str
    outcome: HealOutcome
    expression: str | None = None
    signals: ExtractedSignals = field(default_factory=ExtractedSignals)
    candidate_count: int = 0
    score: int = 0
    strategy: str = ""

    @property
    def healed(self) -> bool:
        return self.expression is not None


class XPathHealer:
    """Finds a working replacement for an XPath that stopped matching.

    The live page is reached only through two collaborators: a markup
    source used to rebuild the document on a cache miss, and a resolver
    that tells whether an expression currently matches anything. "Could
    not heal" is an ordinary result (None), never an exception.
    """

    def __init__(
        self,
        markup_source: MarkupSource,
        resolver: Resolver,
        *,
        text_mode: str = "aggregated",
        audit_logger=None,
    ) -> None:
        if text_mode not in TEXT_MODES:
            raise ValueError(f"Unsupported text mode: {text_mode}")
        self.markup_source = markup_source
        self.resolver = resolver
        self.text_mode = text_mode
        self.audit_logger = audit_logger
        self.cache = HealCache()

    def heal(self, original: str) -> str | None:
        return self.attempt(original).expression

    def attempt(self, original: str) -> HealResult:
        if not is_path_expression(original):
            logger.debug("Skipping non-path locator %r", original)
            return HealResult(original=str(original), outcome=HealOutcome.UNSUPPORTED)

        with self.cache.transaction(original):
            result = self._cached(original) or self._heal_fresh(original)
        self._record(result)
        return result

    def clear_cache(self) -> None:
        self.cache.clear()

    def _cached(self, original: str) -> HealResult | None:
        cached = self.cache.lookup(original)
        if cached is None:
            return None
        if self.resolver.resolve(cached):
            logger.debug("Reusing cached heal %s -> %s", original, cached)
            return HealResult(original=original, outcome=HealOutcome.CACHED, expression=cached)
        logger.info("Cached heal for %s no longer resolves, evicting %s", original, cached)
        self.cache.evict(original)
        return None

    def _heal_fresh(self, original: str) -> HealResult:
        signals = extract_signals(original)
        if signals.is_empty:
            logger.info("No usable signals in %s", original)
            return HealResult(original=original, outcome=HealOutcome.NO_SIGNALS, signals=signals)

        tree = DocumentTree.from_markup(self.markup_source.current_markup(), text_mode=self.text_mode)
        candidates = find_candidates(tree, signals)
        winner = select_best(candidates, signals)
        if winner is None:
            logger.info("No positively scored candidate for %s (%d found)", original, len(candidates))
            return HealResult(
                original=original,
                outcome=HealOutcome.NO_CANDIDATE,
                signals=signals,
                candidate_count=len(candidates),
            )

        replacement = synthesize_path(tree, winner.node)
        if replacement is None:
            logger.info("Best candidate for %s is the document root, not healing", original)
            return HealResult(
                original=original,
                outcome=HealOutcome.NO_CANDIDATE,
                signals=signals,
                candidate_count=len(candidates),
            )

        result = HealResult(
            original=original,
            outcome=HealOutcome.VALIDATION_FAILED,
            signals=signals,
            candidate_count=len(candidates),
            score=winner.score,
            strategy=winner.candidate.strategy,
        )
        if not self.resolver.resolve(replacement):
            logger.warning("Synthesized locator %s did not resolve, discarding", replacement)
            return result

        self.cache.put(original, replacement)
        result.outcome = HealOutcome.HEALED
        result.expression = replacement
        logger.info("Healed %s -> %s (score %d via %s)", original, replacement, winner.score, result.strategy)
        return result

    def _record(self, result: HealResult) -> None:
        if self.audit_logger is None:
            return
        self.audit_logger.write(
            HealAttempt(
                original_locator=result.original,
                outcome=result.outcome.value,
                healed_locator=result.expression or "",
                signals=result.signals.as_dict(),
                candidate_count=result.candidate_count,
                score=result.score,
                strategy=result.strategy,
                timestamp=datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ"),
            )
        )
