from __future__ import annotations

import re

ATTR_BLOCK_RE = re.compile(r"^\{(?P<body>[^{}\n]*)\}")
ATTR_TOKEN_RE = re.compile(
    r"""
    \#(?P<id>[^\s#.=]+)
    |\.(?P<cls>[^\s#.=]+)
    |(?P<key>[^\s#.='"]+)=(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s'"]+))
    """,
    re.VERBOSE,
)


def parse_attributes(body: str) -> dict[str, str]:
    """Parse ``#id .class key=value key="value"`` into an attribute mapping.

    Repeated ``.class`` tokens are joined into a single ``class`` value.
    Unrecognised text between tokens is ignored.
    """
    attrs: dict[str, str] = {}
    classes: list[str] = []
    for match in ATTR_TOKEN_RE.finditer(body):
        if match.group("id"):
            attrs["id"] = match.group("id")
        elif match.group("cls"):
            classes.append(match.group("cls"))
        else:
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare")
            attrs[match.group("key")] = value
    if classes:
        attrs["class"] = " ".join(classes)
    return attrs


def split_attribute_block(text: str) -> tuple[dict[str, str], str] | None:
    """Strip a leading ``{...}`` block from ``text``.

    Returns the parsed attributes and the remaining text, or ``None`` when
    ``text`` does not start with a block.
    """
    match = ATTR_BLOCK_RE.match(text or "")
    if not match:
        return None
    return parse_attributes(match.group("body")), text[match.end() :]
