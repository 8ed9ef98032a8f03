# converter/markdown/directives.py
"""
Directive lexicon and directive string builders.

Directives are handlebars-style template tokens that must pass through the
conversion untouched:

    {{name key="value"}}                 inline directive
    {{#name key="value"}} ... {{/name}}  block directive

The functions here are pure: they recognise tokens and build new ones, they
never hold state.
"""

import re
from typing import Optional, Tuple

# Any single directive token. Braces cannot nest inside a token.
DIRECTIVE_PATTERN = re.compile(r"\{\{[^{}]*\}\}")

# A string that is nothing but one block (open or close) token
BLOCK_TOKEN_PATTERN = re.compile(r"^\{\{[#/][^}]+\}\}$")

OPEN_PATTERN = re.compile(r"^\{\{#(?P<name>[^\s{}]+)(?P<params>[^{}]*)\}\}$")
CLOSE_PATTERN = re.compile(r"^\{\{/(?P<name>[^\s{}]+)\}\}$")
INLINE_PATTERN = re.compile(r"^\{\{(?![#/])(?P<name>[^\s{}]+)(?P<params>[^{}]*)\}\}$")


def find_directives(text: str):
    """Iterate over the directive tokens in text as re.Match objects."""
    return DIRECTIVE_PATTERN.finditer(text)


def is_block_token(text: str) -> bool:
    """True if the whole (stripped) text is a single open or close token."""
    return bool(BLOCK_TOKEN_PATTERN.match(text.strip()))


def parse_open(text: str) -> Optional[str]:
    """
    Return the directive name if text is exactly one open token.

    The name is the first whitespace-delimited word after '#':

        >>> parse_open('{{#confluence-info title="Heads up"}}')
        'confluence-info'
    """
    match = OPEN_PATTERN.match(text.strip())
    return match.group("name") if match else None


def parse_close(text: str) -> Optional[str]:
    """Return the directive name if text is exactly one close token."""
    match = CLOSE_PATTERN.match(text.strip())
    return match.group("name") if match else None


def parse_inline(text: str) -> Optional[str]:
    match = INLINE_PATTERN.match(text.strip())
    return match.group("name") if match else None


def close_token(name: str) -> str:
    return "{{/" + name + "}}"


def close_pattern(name: str):
    """Pattern matching the close token for name. Names are case-sensitive."""
    return re.compile(re.escape(close_token(name)))


def find_close(text: str, name: str) -> Optional[Tuple[int, int]]:
    """Return the (start, end) span of the first close token for name in text."""
    match = close_pattern(name).search(text)
    return match.span() if match else None


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def quote_param(value: str) -> str:
    """Make value safe to place inside a double-quoted directive parameter."""
    return str(value).replace('"', "&quot;")


def format_params(params) -> str:
    """
    Render directive parameters in the order given.

    String values are quoted, True renders as a bare ``key=true``, False and
    None are skipped.
    """
    parts = []
    for key, value in params:
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f"{key}=true")
        else:
            parts.append(f'{key}="{quote_param(value)}"')
    return " ".join(parts)


def inline_directive(name: str, *params) -> str:
    """
    Build an inline directive.

        >>> inline_directive("confluence-anchor", ("name", "footnote-1"))
        '{{confluence-anchor name="footnote-1"}}'
    """
    rendered = format_params(params)
    return "{{" + name + (f" {rendered}" if rendered else "") + "}}"


def open_directive(name: str, *params) -> str:
    rendered = format_params(params)
    return "{{#" + name + (f" {rendered}" if rendered else "") + "}}"


def block_directive(name: str, body: str, *params) -> str:
    """Wrap body in an open/close directive pair, one token per line."""
    return f"{open_directive(name, *params)}\n{body}\n{close_token(name)}"


def image_directive(src: str, alt: str, width=None, height=None, **extra) -> str:
    # Markdown sources sometimes leave URL-encoded quotes around paths
    clean_src = src.replace("%22", "")
    params = [("src", clean_src), ("alt", alt)]
    if width:
        params.append(("width", str(width)))
    if height:
        params.append(("height", str(height)))
    params.extend((key, str(value)) for key, value in extra.items())
    return inline_directive("confluence-image", *params)


def code_directive(code: str, language: str, line_numbers: bool = True) -> str:
    return block_directive(
        "confluence-code",
        code.rstrip(),
        ("language", language),
        ("linenumbers", line_numbers),
    )


def expand_directive(title: str, body: str) -> str:
    return block_directive("confluence-expand", body, ("title", title))


def anchor_directive(name: str) -> str:
    return inline_directive("confluence-anchor", ("name", name))


def anchor_link_directive(text: str, anchor: str, tooltip: Optional[str] = None) -> str:
    return inline_directive(
        "confluence-link",
        ("type", "anchor"),
        ("text", text),
        ("anchor", anchor),
        ("tooltip", tooltip),
    )
