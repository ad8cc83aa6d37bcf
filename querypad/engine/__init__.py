"""Completion and command palette core."""

from .commands import (
    Action,
    ActionCommandSource,
    CommandAggregator,
    CommandDescriptor,
    CommandSource,
    FileOpenCommandSource,
    RecentDocumentsCommandSource,
    StaticCommandSource,
    filter_by_title,
    to_command,
)
from .completions import (
    ChartTypeSource,
    CodeFenceSource,
    CompletionCandidate,
    CompletionEngine,
    CompletionSource,
    ServerSource,
    TableSource,
)
from .context import CompletionContext, ContextAnalyzer, DocumentMode, Trigger
from .dispatch import RequestGate, TaskDispatcher
from .domain import CHART_TYPES, ChartType, DomainSnapshot, ServerInfo, TableInfo
from .icons import Icon
from .selection import SelectionController, SelectionState
from .snippets import CodeSnippet, SnippetCommandSource, SnippetLoadError, load_snippets

__all__ = [
    "Action",
    "ActionCommandSource",
    "CommandAggregator",
    "CommandDescriptor",
    "CommandSource",
    "FileOpenCommandSource",
    "RecentDocumentsCommandSource",
    "StaticCommandSource",
    "filter_by_title",
    "to_command",
    "ChartTypeSource",
    "CodeFenceSource",
    "CompletionCandidate",
    "CompletionEngine",
    "CompletionSource",
    "ServerSource",
    "TableSource",
    "CompletionContext",
    "ContextAnalyzer",
    "DocumentMode",
    "Trigger",
    "RequestGate",
    "TaskDispatcher",
    "CHART_TYPES",
    "ChartType",
    "DomainSnapshot",
    "ServerInfo",
    "TableInfo",
    "Icon",
    "SelectionController",
    "SelectionState",
    "CodeSnippet",
    "SnippetCommandSource",
    "SnippetLoadError",
    "load_snippets",
]
