"""Heuristic signal classifier.

Rules are tried in precedence order and the first match wins:

1. ``show hn:`` prefix  -> ``launch``
2. ``ask hn:`` prefix   -> ``request``
3. pain language        -> ``pain``
4. workaround language  -> ``workaround``
5. request language     -> ``request``

Anything else is ``unknown``.
"""

import re

from ..models import SignalType

SHOW_PREFIX = "show hn:"
ASK_PREFIX = "ask hn:"

PAIN_RE = re.compile(r"pain|stuck|frustrat|hate|broken|can't|cannot|problem|issue")
WORKAROUND_RE = re.compile(r"workaround|hack|duct tape|script|automate|i built|we built|solution")
REQUEST_RE = re.compile(
    r"looking for|anyone know|recommend|need a tool|wish there was|does anyone"
)


def classify_signal(text: str) -> SignalType:
    """Return the signal type for *text* (a title, optionally with excerpt)."""
    t = (text or "").casefold()
    if t.startswith(SHOW_PREFIX):
        return "launch"
    if t.startswith(ASK_PREFIX):
        return "request"
    if PAIN_RE.search(t):
        return "pain"
    if WORKAROUND_RE.search(t):
        return "workaround"
    if REQUEST_RE.search(t):
        return "request"
    return "unknown"
