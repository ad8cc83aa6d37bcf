"""When Enter runs the buffer and when it just starts a new line."""

from typing import List

from ..engine.context import DocumentMode

_OPENERS = {")": "(", "]": "[", "}": "{"}


def open_brackets(text: str) -> int:
    """Number of brackets or quotes still open at the end of ``text``.

    Quoted text is skipped, backslash escapes included. A closing bracket
    that does not match returns -1.
    """
    stack: List[str] = []
    quote = ""
    chars = iter(text)
    for ch in chars:
        if quote:
            if ch == "\\":
                next(chars, None)
            elif ch == quote:
                quote = ""
            continue
        if ch in "'\"":
            quote = ch
        elif ch in "([{":
            stack.append(ch)
        elif ch in _OPENERS:
            if not stack or stack.pop() != _OPENERS[ch]:
                return -1
    return len(stack) + (1 if quote else 0)


def ready_to_submit(text: str, mode: DocumentMode, forced: bool = False) -> bool:
    """Decide whether Enter hands ``text`` to the REPL loop.

    Meta commands always submit. SQL waits for a closing ``;``, q submits
    once brackets balance, and markdown or plain text only on Ctrl-R.
    """
    stripped = text.strip()
    if not stripped:
        return False
    if stripped.startswith(":") or forced:
        return True
    if mode is DocumentMode.SQL:
        return stripped.endswith(";") and open_brackets(stripped) == 0
    if mode is DocumentMode.Q:
        return open_brackets(stripped) == 0
    return False
