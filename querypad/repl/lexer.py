"""Pygments lexer for query buffers with markdown chart fences."""

from pygments.lexer import RegexLexer, bygroups
from pygments.token import Comment, Keyword, Name, Number, Operator, Punctuation, String, Text


class QueryPadLexer(RegexLexer):
    """Lightweight lexer to highlight SQL and markdown chart fences in the REPL."""

    name = "querypad"
    aliases = ["querypad"]
    filenames = ["*.sql", "*.md"]

    KEYWORDS = (
        "SELECT",
        "FROM",
        "WHERE",
        "GROUP",
        "ORDER",
        "BY",
        "HAVING",
        "LIMIT",
        "JOIN",
        "LEFT",
        "RIGHT",
        "INNER",
        "OUTER",
        "ON",
        "AS",
        "AND",
        "OR",
        "NOT",
        "IN",
        "IS",
        "NULL",
        "INSERT",
        "INTO",
        "VALUES",
        "UPDATE",
        "SET",
        "DELETE",
        "WITH",
        "DISTINCT",
        "UNION",
        "CASE",
        "WHEN",
        "THEN",
        "ELSE",
        "END",
    )

    tokens = {
        "root": [
            (r"^```[A-Za-z0-9_]*", String.Backtick),
            (r"(type|server)(=)('[^']*'|\"[^\"]*\")", bygroups(Name.Attribute, Operator, String)),
            (r"--.*$", Comment.Single),
            (r"//.*$", Comment.Single),
            (r"^#+ .*$", Comment.Preproc),
            (r"\s+", Text),
            (r"(?i)(" + "|".join(KEYWORDS) + r")\b", Keyword),
            (r"`[A-Za-z_][A-Za-z0-9_.]*", Name.Constant),
            (r"[A-Za-z_][A-Za-z0-9_.]*", Name),
            (r"[{}()\[\],;]", Punctuation),
            (r"[=<>!*/+-]+", Operator),
            (r'"([^"\\]|\\.)*"', String.Double),
            (r"'(?:[^'\\]|\\.)*'", String.Single),
            (r"-?\d+\.\d+", Number.Float),
            (r"-?\d+", Number.Integer),
            (r".", Text),
        ]
    }
