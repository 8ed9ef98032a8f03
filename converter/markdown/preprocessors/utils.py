"""Line helpers shared by the source preprocessors."""

import re
from typing import Iterator, List, Tuple

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")


def iter_lines_with_fence_state(lines: List[str]) -> Iterator[Tuple[int, str, bool]]:
    """
    Yield (index, line, in_fence) for each line.

    in_fence is True for the fence markers themselves and every line between
    them, so callers can leave fenced code alone.
    """
    fence = None
    for index, line in enumerate(lines):
        match = _FENCE_RE.match(line)
        if fence is None:
            if match:
                fence = match.group(1)
                yield index, line, True
                continue
            yield index, line, False
        else:
            # A closing fence uses the same character, at least as many times,
            # and nothing else on the line
            if match and match.group(1)[0] == fence[0] and len(match.group(1)) >= len(fence) \
                    and not line.strip()[len(match.group(1)):].strip():
                fence = None
            yield index, line, True


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip())]
