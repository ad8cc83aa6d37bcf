"""Completion sources, one per trigger, and the engine that dispatches to them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Union

import structlog
from jinja2 import Environment

from .context import CompletionContext, ContextAnalyzer, DocumentMode, Trigger
from .domain import DomainSnapshot
from .icons import Icon

logger = structlog.get_logger(__name__)

CODE_FENCE_TEMPLATE = "```sql type='grid' server='{{ server }}' \n{{ query }}\n```\n"

_template_env = Environment(keep_trailing_newline=True)


@dataclass(frozen=True)
class CompletionCandidate:
    """One proposed insertion.

    ``insertion_text`` is what gets spliced at the caret; any trigger text the
    user already typed has been stripped from it.
    """

    insertion_text: str
    display_label: str
    icon: Optional[Icon] = None


class CompletionSource(ABC):
    """Produces candidates for a single trigger kind."""

    trigger: Trigger = Trigger.NONE

    @abstractmethod
    def provide(self, context: CompletionContext, domain: DomainSnapshot) -> List[CompletionCandidate]:
        """Return candidates in the snapshot's natural order."""


def strip_prefix(prefix: str, code: str) -> str:
    """Drop the characters of ``code`` the user has already typed."""
    return code[len(prefix):]


class CodeFenceSource(CompletionSource):
    """Fenced query blocks built from each table's first example query."""

    trigger = Trigger.CODE_FENCE

    def __init__(self, template: str = CODE_FENCE_TEMPLATE):
        self._template = _template_env.from_string(template)

    def provide(self, context: CompletionContext, domain: DomainSnapshot) -> List[CompletionCandidate]:
        candidates: List[CompletionCandidate] = []
        for table in domain.tables:
            query = table.first_query
            if query is None:
                continue
            code = self._template.render(server=domain.selected_server, query=query)
            candidates.append(
                CompletionCandidate(
                    insertion_text=strip_prefix(context.prefix, code),
                    display_label=f"```sql {table.full_name}",
                    icon=Icon.MARKDOWN,
                )
            )
        return candidates


class ChartTypeSource(CompletionSource):
    trigger = Trigger.CHART_TYPE_ATTRIBUTE

    def provide(self, context: CompletionContext, domain: DomainSnapshot) -> List[CompletionCandidate]:
        return [
            CompletionCandidate(
                insertion_text=strip_prefix(context.prefix, context.prefix + chart.token),
                display_label=chart.token,
                icon=chart.icon,
            )
            for chart in domain.chart_types
        ]


class ServerSource(CompletionSource):
    trigger = Trigger.SERVER_ATTRIBUTE

    def provide(self, context: CompletionContext, domain: DomainSnapshot) -> List[CompletionCandidate]:
        return [
            CompletionCandidate(
                insertion_text=strip_prefix(context.prefix, context.prefix + server.name),
                display_label=server.name,
                icon=server.icon,
            )
            for server in domain.servers
        ]


class TableSource(CompletionSource):
    trigger = Trigger.TABLE_AFTER_FROM

    def provide(self, context: CompletionContext, domain: DomainSnapshot) -> List[CompletionCandidate]:
        return [
            CompletionCandidate(
                insertion_text=table.full_name,
                display_label=table.full_name,
                icon=Icon.TABLE,
            )
            for table in domain.tables
        ]


def default_sources() -> List[CompletionSource]:
    return [CodeFenceSource(), ChartTypeSource(), ServerSource(), TableSource()]


class CompletionEngine:
    """Routes a classified context to the source registered for its trigger."""

    def __init__(
        self,
        sources: Optional[Iterable[CompletionSource]] = None,
        analyzer: Optional[ContextAnalyzer] = None,
    ):
        self.analyzer = analyzer or ContextAnalyzer()
        self._sources: Dict[Trigger, CompletionSource] = {}
        for source in default_sources() if sources is None else sources:
            self.register(source)

    def register(self, source: CompletionSource) -> None:
        """Register a source, replacing any previous one for the same trigger."""
        self._sources[source.trigger] = source

    def source_for(self, trigger: Trigger) -> Optional[CompletionSource]:
        return self._sources.get(trigger)

    def complete(self, context: CompletionContext, domain: Optional[DomainSnapshot]) -> List[CompletionCandidate]:
        """Candidates for an already classified context, never raising."""
        if domain is None or context.is_none:
            return []
        source = self._sources.get(context.trigger)
        if source is None:
            return []
        try:
            return list(source.provide(context, domain))
        except Exception:
            logger.exception(
                "completion.source.failed",
                source=type(source).__name__,
                trigger=context.trigger.value,
            )
            return []

    def complete_at(
        self,
        text: str,
        caret_offset: int,
        mode: Union[DocumentMode, str],
        domain: Optional[DomainSnapshot],
    ) -> List[CompletionCandidate]:
        """Classify the caret and return candidates for the governing context."""
        context = self.analyzer.classify(text, caret_offset, mode)
        logger.debug("completion.classified", trigger=context.trigger.value, prefix=context.prefix)
        return self.complete(context, domain)

    def complete_all_at(
        self,
        text: str,
        caret_offset: int,
        mode: Union[DocumentMode, str],
        domain: Optional[DomainSnapshot],
    ) -> List[CompletionCandidate]:
        """Like :meth:`complete_at` but stacks every context that fires."""
        candidates: List[CompletionCandidate] = []
        for context in self.analyzer.classify_all(text, caret_offset, mode):
            candidates.extend(self.complete(context, domain))
        return candidates
