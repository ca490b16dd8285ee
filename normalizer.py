# normalizer.py
import re

from config import ANTIBIOTIC_SYNONYMS

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_NON_ALPHA = re.compile(r"[^a-z]")


def normalize(text):
    """Lower-case and drop every character outside [a-z0-9].

    ASCII semantics only: accented letters are dropped, not folded.
    """
    if not text:
        return ""
    return _NON_ALNUM.sub("", text.lower())


def letters_only(text):
    """Lower-case and keep only [a-z]."""
    if not text:
        return ""
    return _NON_ALPHA.sub("", text.lower())


def text_matches(text, term):
    """True when the normalized term occurs inside the normalized text."""
    normalized_term = normalize(term)
    if not normalized_term:
        return False
    return normalized_term in normalize(text)


class SynonymTable:
    """Immutable canonical id -> aliases lookup.

    Lookups go through an index of normalized names built once. When two
    entries share a normalized alias the earlier entry wins.
    """

    def __init__(self, mapping):
        self._entries = tuple(
            (canonical, tuple(aliases)) for canonical, aliases in mapping.items()
        )
        index = {}
        for position, (canonical, aliases) in enumerate(self._entries):
            for name in (canonical,) + aliases:
                index.setdefault(normalize(name), position)
        self._index = index

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def _entry_for(self, token):
        position = self._index.get(normalize(token))
        if position is None:
            return None
        return self._entries[position]

    def closure(self, token):
        """Canonical id plus every alias for a token naming any of them."""
        entry = self._entry_for(token)
        if entry is None:
            return ()
        canonical, aliases = entry
        return (canonical,) + aliases

    def canonical_name(self, token):
        entry = self._entry_for(token)
        return entry[0] if entry else None

    def aliases(self, canonical):
        for name, aliases in self._entries:
            if name == canonical:
                return aliases
        return ()


SYNONYMS = SynonymTable(ANTIBIOTIC_SYNONYMS)
