# converter/markdown/placeholders.py
"""
Placeholder vault: keeps directive text away from passes that would mangle it.

protect() swaps every directive token in a string for a generated placeholder
and remembers the original. restore() puts the originals back once all
structural work is done.

Placeholders are built from a reserved prefix and a counter owned by the
vault instance. A vault is created per document (see renderer), never shared,
so two documents converted at the same time cannot hand out the same token.
The delimiters are private-use code points that neither pandoc nor
BeautifulSoup produce or escape.
"""

import itertools
import re
from typing import Dict, Optional

from .directives import DIRECTIVE_PATTERN

TOKEN_START = "\ue000"
TOKEN_END = "\ue001"
TOKEN_PREFIX = TOKEN_START + "hbs"

TOKEN_PATTERN = re.compile(re.escape(TOKEN_PREFIX) + r"(\d+)" + re.escape(TOKEN_END))


class PlaceholderVault:
    """Per-document map of placeholder tokens to original directive text."""

    def __init__(self):
        self._originals: Dict[str, str] = {}
        self._counter = itertools.count()

    def __len__(self):
        return len(self._originals)

    def __contains__(self, token):
        return token in self._originals

    def stash(self, original: str) -> str:
        """Record original text and return the token that stands for it."""
        token = f"{TOKEN_PREFIX}{next(self._counter)}{TOKEN_END}"
        self._originals[token] = original
        return token

    def protect(self, text: str) -> str:
        """Replace each directive in text with a fresh token."""
        if not text or "{{" not in text:
            return text
        return DIRECTIVE_PATTERN.sub(lambda match: self.stash(match.group(0)), text)

    def original(self, token: str) -> Optional[str]:
        return self._originals.get(token)

    def restore(self, text: str) -> str:
        """
        Replace every known token in text with its original.

        Unknown tokens are left alone, so restoring twice is a no-op.
        Stashed text may itself contain tokens (a stashed region can wrap
        already-protected directives), so substitution repeats until stable.
        """
        if not text or TOKEN_START not in text:
            return text

        def substitute(match):
            return self._originals.get(match.group(0), match.group(0))

        previous = None
        while previous != text:
            previous = text
            text = TOKEN_PATTERN.sub(substitute, text)
        return text

    def tokens_in(self, text: str):
        """Iterate over (match, original) for each known token in text."""
        for match in TOKEN_PATTERN.finditer(text):
            original = self._originals.get(match.group(0))
            if original is not None:
                yield match, original
