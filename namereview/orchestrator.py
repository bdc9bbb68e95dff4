"""Pipeline orchestration for review and autofix runs."""

from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .config import NameReviewConfig, load_config
from .context import build_contexts
from .git.changes import ChangeSource
from .llm.client import SuggestionClient
from .llm.runner import LLMRunner
from .llm.schema import NamingSuggestion
from .logging import get_logger
from .models import RenameOutcome, RenameRequest, SymbolContext
from .prompting import DEFAULT_EXAMPLES, PromptBuilder
from .rename.orchestrator import RenameOrchestrator
from .safety import is_collectable, should_auto_apply
from .stores import CostStats, CostTracker, SuggestionCache


@dataclass(frozen=True)
class ReviewItem:
    """A collected suggestion and where it applies."""

    file: str
    language: str
    line_number: int
    suggestion: NamingSuggestion
    auto_apply: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "language": self.language,
            "line": self.line_number,
            "autoApply": self.auto_apply,
            **self.suggestion.to_wire(),
        }


@dataclass
class ReviewReport:
    """Result of a review or autofix run."""

    items: List[ReviewItem] = field(default_factory=list)
    symbols_reviewed: int = 0
    stats: CostStats = field(default_factory=CostStats)
    renames: List[RenameOutcome] = field(default_factory=list)

    @property
    def auto_apply_items(self) -> List[ReviewItem]:
        return [item for item in self.items if item.auto_apply]

    @property
    def manual_items(self) -> List[ReviewItem]:
        return [item for item in self.items if not item.auto_apply]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbolsReviewed": self.symbols_reviewed,
            "suggestions": [item.to_dict() for item in self.items],
            "renames": [asdict(outcome) for outcome in self.renames],
            "stats": asdict(self.stats),
        }


class Orchestrator:
    """Coordinates context extraction, suggestions, the safety gate and renames."""

    def __init__(
        self,
        config: NameReviewConfig | None = None,
        *,
        client: SuggestionClient | None = None,
        renamer: RenameOrchestrator | None = None,
    ) -> None:
        self.config = config or NameReviewConfig(root=Path.cwd())
        self._client = client
        self._renamer = renamer
        self.logger = get_logger("orchestrator")

    @classmethod
    def for_repository(cls, path: str | Path) -> "Orchestrator":
        """Build an orchestrator from the repository's configuration file."""
        repo_path = Path(path).expanduser().resolve()
        return cls(load_config(repo_path))

    @property
    def client(self) -> SuggestionClient:
        if self._client is None:
            self._client = self._build_client(self.config)
        return self._client

    @staticmethod
    def _build_client(config: NameReviewConfig) -> SuggestionClient:
        config.llm.require_api_key()
        return SuggestionClient(
            LLMRunner(config.llm),
            cache=SuggestionCache(config.cache_ttl_seconds),
            tracker=CostTracker(),
            max_retries=config.llm.max_retries,
            prompt_builder=PromptBuilder(
                min_confidence=config.autofix.min_confidence,
                examples=DEFAULT_EXAMPLES if config.few_shot_examples else (),
            ),
        )

    async def review(self, source: ChangeSource) -> ReviewReport:
        """Ask for suggestions on every reviewable symbol in the change."""
        client = self.client
        contexts = build_contexts(
            source, modification_window=self.config.modification_window
        )
        self.logger.info("Reviewing %d symbols", len(contexts))

        items: List[ReviewItem] = []
        for context in contexts:
            suggestion = await client.ask(context)
            if suggestion is None:
                continue
            if not is_collectable(suggestion, threshold=self.config.autofix.collect_threshold):
                self.logger.debug(
                    "Dropping low-confidence suggestion for %s (%.2f)",
                    context.old_name,
                    suggestion.confidence,
                )
                continue
            items.append(self._review_item(context, suggestion))

        report = ReviewReport(
            items=items,
            symbols_reviewed=len(contexts),
            stats=client.stats(),
        )
        self.logger.info(
            "Collected %d suggestions (%d auto-apply)",
            len(report.items),
            len(report.auto_apply_items),
        )
        return report

    async def autofix(self, source: ChangeSource, project_root: str | Path) -> ReviewReport:
        """Review the change and apply every gate-approved rename."""
        report = await self.review(source)
        if not self.config.autofix.enabled:
            self.logger.info("Autofix disabled; skipping %d renames", len(report.auto_apply_items))
            return report

        requests = [
            RenameRequest(
                file_path=item.file,
                suggestion=item.suggestion,
                language=item.language,
                line_number=item.line_number,
            )
            for item in report.auto_apply_items
        ]
        if not requests:
            return report

        renamer = self._renamer or RenameOrchestrator(project_root, tools=self.config.tools)
        report.renames = await renamer.perform_batch(requests)
        applied = sum(1 for outcome in report.renames if outcome.success)
        self.logger.info("Applied %d of %d renames", applied, len(requests))
        return report

    def run_review(self, source: ChangeSource) -> ReviewReport:
        return asyncio.run(self.review(source))

    def run_autofix(self, source: ChangeSource, project_root: str | Path) -> ReviewReport:
        return asyncio.run(self.autofix(source, project_root))

    def _review_item(self, context: SymbolContext, suggestion: NamingSuggestion) -> ReviewItem:
        return ReviewItem(
            file=context.file,
            language=context.language,
            line_number=context.declaration_line,
            suggestion=suggestion,
            auto_apply=should_auto_apply(
                suggestion, min_confidence=self.config.autofix.min_confidence
            ),
        )


__all__ = [
    "Orchestrator",
    "ReviewItem",
    "ReviewReport",
]
