from typing import List

from querypad.engine.completions import (
    CODE_FENCE_TEMPLATE,
    ChartTypeSource,
    CodeFenceSource,
    CompletionCandidate,
    CompletionEngine,
    CompletionSource,
    ServerSource,
    TableSource,
)
from querypad.engine.context import CompletionContext, DocumentMode, Trigger
from querypad.engine.domain import CHART_TYPES, DomainSnapshot, ServerInfo, TableInfo
from querypad.engine.icons import Icon


def make_domain() -> DomainSnapshot:
    return DomainSnapshot(
        tables=[
            TableInfo(full_name="trades", queries=["select from trades", "select count i from trades"]),
            TableInfo(full_name="quotes"),
            TableInfo(full_name=".hdb.daily", queries=["select from .hdb.daily"]),
        ],
        servers=[ServerInfo(name="prod", driver="kdb"), ServerInfo(name="warehouse", driver="postgres")],
        selected_server="prod",
    )


def test_tables_after_from_end_to_end() -> None:
    engine = CompletionEngine()
    domain = DomainSnapshot.from_names(["trades", "quotes"])
    text = "SELECT * FROM "

    candidates = engine.complete_at(text, len(text), DocumentMode.SQL, domain)

    assert [c.insertion_text for c in candidates] == ["trades", "quotes"]
    assert all(c.icon is Icon.TABLE for c in candidates)


def test_table_source_uses_full_names_in_order() -> None:
    candidates = TableSource().provide(CompletionContext(Trigger.TABLE_AFTER_FROM), make_domain())

    assert [c.insertion_text for c in candidates] == ["trades", "quotes", ".hdb.daily"]


def test_chart_type_candidates_are_bare_tokens() -> None:
    engine = CompletionEngine()
    text = "```sql type='"

    candidates = engine.complete_at(text, len(text), DocumentMode.MARKDOWN, make_domain())

    assert len(candidates) == 24
    assert [c.insertion_text for c in candidates] == [chart.token for chart in CHART_TYPES]
    assert candidates[0].insertion_text == "grid"
    assert candidates[0].icon is Icon.TABLE
    assert candidates[-1].insertion_text == "sankey"
    assert candidates[-1].icon is None


def test_chart_type_with_double_quote_prefix() -> None:
    context = CompletionContext(Trigger.CHART_TYPE_ATTRIBUTE, 'type="')

    candidates = ChartTypeSource().provide(context, make_domain())

    assert candidates[1].insertion_text == "timeseries"


def test_server_candidates_carry_driver_icons() -> None:
    context = CompletionContext(Trigger.SERVER_ATTRIBUTE, "server='")

    candidates = ServerSource().provide(context, make_domain())

    assert [c.insertion_text for c in candidates] == ["prod", "warehouse"]
    assert [c.icon for c in candidates] == [Icon.KDB, Icon.POSTGRES]


def test_unknown_driver_gets_generic_server_icon() -> None:
    assert Icon.for_driver("teradata") is Icon.SERVER
    assert Icon.for_driver(None) is Icon.SERVER
    assert Icon.for_driver(" PostgreSQL ") is Icon.POSTGRES


def test_code_fence_strips_typed_backticks() -> None:
    context = CompletionContext(Trigger.CODE_FENCE, "```")

    candidates = CodeFenceSource().provide(context, make_domain())

    assert len(candidates) == 2
    assert candidates[0].insertion_text == "sql type='grid' server='prod' \nselect from trades\n```\n"
    assert candidates[0].icon is Icon.MARKDOWN
    assert candidates[1].insertion_text.endswith("select from .hdb.daily\n```\n")


def test_code_fence_single_backtick_keeps_rest_of_fence() -> None:
    context = CompletionContext(Trigger.CODE_FENCE, "`")

    candidates = CodeFenceSource().provide(context, make_domain())

    assert candidates[0].insertion_text.startswith("``sql type='grid' server='prod' \n")


def test_code_fence_template_matches_fenced_block_layout() -> None:
    assert CODE_FENCE_TEMPLATE.startswith("```sql type='grid' server='")
    assert CODE_FENCE_TEMPLATE.endswith("\n```\n")


def test_code_fence_skips_tables_without_queries() -> None:
    domain = DomainSnapshot.from_names(["trades", "quotes"])

    assert CodeFenceSource().provide(CompletionContext(Trigger.CODE_FENCE, "```"), domain) == []


def test_empty_or_missing_domain_yields_nothing() -> None:
    engine = CompletionEngine()
    text = "SELECT * FROM "

    assert engine.complete_at(text, len(text), DocumentMode.SQL, DomainSnapshot()) == []
    assert engine.complete_at(text, len(text), DocumentMode.SQL, None) == []


def test_no_context_yields_nothing() -> None:
    engine = CompletionEngine()

    assert engine.complete(CompletionContext(Trigger.NONE), make_domain()) == []


class ExplodingSource(CompletionSource):
    trigger = Trigger.TABLE_AFTER_FROM

    def provide(self, context, domain) -> List[CompletionCandidate]:
        raise RuntimeError("catalog offline")


def test_failing_source_contributes_empty_result() -> None:
    engine = CompletionEngine()
    engine.register(ExplodingSource())
    text = "select * from "

    assert engine.complete_at(text, len(text), DocumentMode.SQL, make_domain()) == []
    # other triggers still served by their own sources
    chart_text = "type='"
    assert engine.complete_at(chart_text, len(chart_text), DocumentMode.MARKDOWN, make_domain())


def test_engine_with_explicit_sources_only_serves_those() -> None:
    engine = CompletionEngine(sources=[TableSource()])

    assert engine.source_for(Trigger.TABLE_AFTER_FROM) is not None
    assert engine.source_for(Trigger.CODE_FENCE) is None
    assert engine.complete(CompletionContext(Trigger.CODE_FENCE, "```"), make_domain()) == []


def test_complete_all_at_matches_single_context_results() -> None:
    engine = CompletionEngine()
    text = "select * from "

    stacked = engine.complete_all_at(text, len(text), DocumentMode.MARKDOWN, make_domain())

    assert [c.insertion_text for c in stacked] == ["trades", "quotes", ".hdb.daily"]
