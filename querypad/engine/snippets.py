"""Reusable code snippets and the commands that paste or run them."""

from pathlib import Path
from typing import Callable, Iterable, List, Optional

import yaml
from pydantic import BaseModel, ValidationError

from .commands import CommandDescriptor, CommandSource
from .icons import Icon


class SnippetLoadError(Exception):
    """Raised when a snippets file exists but cannot be read."""


class CodeSnippet(BaseModel):
    """A named piece of code that can be pasted into the editor or run."""
    name: str
    code: str
    runnable: bool = True
    pasteable: bool = True


GET_PROCESS_DETAILS = (
    "{ t:(update d:`port`console`errorTrap`GC`precision`slaves`timer`Timeout`GMToffset`weekOffset`dateMode,"
    "v:system each s from ([] s:\"pcegPstToWz\"));\n"
    "    u:( [] s:`.z.a`.z.h`.z.i`.z.k`.z.K`.z.l`.z.o`.z.u`.z.x`.z.X);\n"
    "    u:update d:`ip`hostname`PID`releaseDate`releaseVersion`license`os`username`cmd`cmdLine,"
    "v:value each s from u;\n"
    "    u:update {\".\" sv string `int$0x00 vs x} each v from u where d=`ip;\n"
    "    `s xkey `s xasc t uj u}[]"
)

GET_HDB_COUNTS = (
    "(uj/) {(.Q.pf,x) xcol ?[x;enlist (in;.Q.pf;-20 sublist value .Q.pf);{x!x}(),.Q.pf;"
    "enlist[`cn]!enlist (count;(cols x) 1)]} each .Q.pt"
)

GET_TABLE_COUNTS = (
    "// Get overview of all tables\n"
    "{ [] \n"
    "    gett:{\n"
    "        formatVals:{@[{$[0=count x;\"\";$[(11h=type x) and 1=count x;\"`\",string first x;"
    "80 sublist trim -3!`#x]]};x;\"  \"]};\n"
    "        safeCount: {$[.Q.qp x; $[`pn in key `.Q; {$[count x;sum x;0N]} .Q.pn y; -1]; count x]};\n"
    "        getFmt:{((0;0b;1b)!`memory`splayed`partitioned) .Q.qp[value x]};\n"
    "        cnames:`table`count`format`columns`keys;\n"
    "        cnames!(x; safeCount[value x;x]; getFmt x;formatVals asc cols x; k:asc keys x)};\n"
    "    `table xkey gett each asc system \"a\"}[]"
)

GET_COUNT_BY_FOR_ONE_TABLE = (
    "// Get count by date and column for one table\n"
    "{ t:?[x;();`date`s!`date,y;enlist[`cn]!enlist (count;`i)];\n"
    " P:`$string asc distinct (0!t)`s;\n"
    " exec P!((`$string s)!cn)P by date:date from t}[quote;`cond]"
)


def builtin_snippets() -> List[CodeSnippet]:
    return [
        CodeSnippet(name="getProcessDetails", code=GET_PROCESS_DETAILS, runnable=True, pasteable=False),
        CodeSnippet(name="getHDBcounts", code=GET_HDB_COUNTS, runnable=True, pasteable=False),
        CodeSnippet(name="getTableCounts", code=GET_TABLE_COUNTS, runnable=True, pasteable=False),
        CodeSnippet(name="getCountByForOneTable", code=GET_COUNT_BY_FOR_ONE_TABLE, runnable=False, pasteable=True),
    ]


def load_snippets(path: Optional[Path], include_builtin: bool = True) -> List[CodeSnippet]:
    """Load user snippets from a YAML file.

    The file holds either a list of snippets or a mapping with a ``snippets``
    list. A missing file yields just the built-in snippets.
    """
    snippets = builtin_snippets() if include_builtin else []
    if path is None:
        return snippets
    path = Path(path).expanduser()
    if not path.exists():
        return snippets

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise SnippetLoadError(f"Invalid snippets YAML in {path}: {exc}") from exc

    if data is None:
        return snippets
    if isinstance(data, dict):
        data = data.get("snippets", [])
    if not isinstance(data, list):
        raise SnippetLoadError(f"Snippets file {path} must contain a list of snippets")

    try:
        snippets.extend(CodeSnippet(**entry) for entry in data)
    except (TypeError, ValidationError) as exc:
        raise SnippetLoadError(f"Invalid snippet in {path}: {exc}") from exc
    return snippets


InsertTextFn = Callable[[str], None]
RunQueryFn = Callable[[str, str], None]


class SnippetCommandSource(CommandSource):
    """Turns snippets into "Paste Snip" and "Run Snip" commands."""

    def __init__(
        self,
        snippets: Iterable[CodeSnippet],
        insert_text: InsertTextFn,
        run_query: RunQueryFn,
        messages,
    ):
        self._snippets = list(snippets)
        self._insert_text = insert_text
        self._run_query = run_query
        self._messages = messages

    @property
    def snippets(self) -> List[CodeSnippet]:
        return list(self._snippets)

    def get_commands(self) -> List[CommandDescriptor]:
        from ..runtime.messages import MsgKey

        paste_label = self._messages.get(MsgKey.PASTE_SNIPPET)
        run_label = self._messages.get(MsgKey.RUN_SNIPPET)
        commands: List[CommandDescriptor] = []
        for snippet in self._snippets:
            if snippet.pasteable:
                commands.append(
                    CommandDescriptor(
                        title=f"{paste_label}: {snippet.name}",
                        perform=lambda code=snippet.code: self._insert_text(code),
                        detail=snippet.name,
                        icon=Icon.PASTE,
                    )
                )
            if snippet.runnable:
                title = f"{run_label}: {snippet.name}"
                commands.append(
                    CommandDescriptor(
                        title=title,
                        perform=lambda code=snippet.code, title=title: self._run_query(code, title),
                        detail=snippet.name,
                        icon=Icon.RUN,
                    )
                )
        return commands
