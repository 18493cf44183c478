"""Plain-text excerpts from comment markup."""

import re

TAG_RE = re.compile(r"<[^>]*>")
ENTITY_RE = re.compile(r"&(amp|lt|gt|quot|#39|apos|nbsp);")
WHITESPACE_RE = re.compile(r"\s+")

# Only the named entities the content source actually emits in comment
# bodies. Numeric entities such as ``&#x2F;`` are left as-is.
ENTITIES = {
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "#39": "'",
    "apos": "'",
    "nbsp": " ",
}


def _decode_entities(text: str) -> str:
    # Repeat until stable so ``&amp;lt;`` cannot survive as ``&lt;``.
    while True:
        decoded = ENTITY_RE.sub(lambda m: ENTITIES[m.group(1)], text)
        if decoded == text:
            return decoded
        text = decoded


def sanitize_html(markup: str) -> str:
    """Strip tags, decode a few named entities and collapse whitespace.

    Angle brackets produced by decoding ``&lt;``/``&gt;`` are dropped while
    the text between them is kept, so the result never contains ``<`` or
    ``>``.
    """
    text = TAG_RE.sub(" ", markup or "")
    text = _decode_entities(text)
    text = text.replace("<", " ").replace(">", " ")
    return WHITESPACE_RE.sub(" ", text).strip()
