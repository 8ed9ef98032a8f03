# converter/markdown/preprocessors/verbatim_regions.py
"""
Preprocessor that keeps whole directive regions away from the markdown parser.

Some block directives carry a body that is not markdown (source code for the
code macro, for instance). Parsing it would turn indentation into code blocks,
underscores into emphasis and so on. A region such as

    {{#confluence-code language="bash"}}
    echo "*not emphasis*"
    {{/confluence-code}}

is stashed in the placeholder vault as a single token that sits in its own
paragraph. treeprocessors/isolator.py lifts that paragraph out again and the
restore postprocessor writes the region back exactly as authored.
"""

import logging

from ..config import get_storage_config
from ..directives import close_token, parse_open
from .utils import iter_lines_with_fence_state, leading_whitespace

logger = logging.getLogger(__name__)


def stash_verbatim_regions(text: str, context: dict) -> str:
    """
    Replace each verbatim directive region with a placeholder token.

    Args:
        text: Markdown source
        context: Conversion context; must hold the document's "vault"

    Returns:
        Markdown with verbatim regions replaced by tokens
    """
    names = set(get_storage_config(context)["verbatim_directives"])
    if not names or "{{#" not in text:
        return text

    vault = context["vault"]
    lines = text.split("\n")
    fenced = {index for index, _, in_fence in iter_lines_with_fence_state(lines) if in_fence}

    out = []
    index = 0
    stashed = 0
    while index < len(lines):
        line = lines[index]
        name = None if index in fenced else parse_open(line)
        if name not in names:
            out.append(line)
            index += 1
            continue

        closing = close_token(name)
        end = next(
            (j for j in range(index + 1, len(lines)) if lines[j].strip() == closing),
            None,
        )
        if end is None:
            logger.debug(f"Verbatim region '{name}' has no closing line, leaving it to the parser")
            out.append(line)
            index += 1
            continue

        region = "\n".join(lines[index : end + 1])
        token = vault.stash(region)
        out.extend(["", leading_whitespace(line) + token, ""])
        stashed += 1
        index = end + 1

    if stashed:
        logger.debug(f"Stashed {stashed} verbatim directive region(s)")
    return "\n".join(out)


def stash_verbatim_regions_default(text: str, context: dict) -> str:
    """
    Default configuration for stash_verbatim_regions.

    Register this in PREPROCESSORS.
    """
    return stash_verbatim_regions(text, context)
