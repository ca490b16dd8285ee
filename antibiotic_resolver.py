# antibiotic_resolver.py
import re

from normalizer import SYNONYMS, letters_only, normalize

_WHITESPACE = re.compile(r"\s+")
_FILE_ID_INVALID = re.compile(r"[^a-z0-9-]")


def name_variations(raw_token, synonyms=SYNONYMS):
    """
    Every spelling tried for an exact catalog hit.

    Parameters:
    - raw_token: Antibiotic name as written in a regimen
    - synonyms: SynonymTable used for the alias closure

    Returns:
    - Set of lower-case variations (raw, normalized, hyphenated, aliases)
    """
    lowered = raw_token.lower()
    variations = {lowered, normalize(raw_token), _WHITESPACE.sub("-", lowered.strip())}
    variations.update(name.lower() for name in synonyms.closure(raw_token))
    variations.discard("")
    return variations


def resolve(raw_token, catalog, synonyms=SYNONYMS):
    """
    Find the catalog record for an antibiotic token.

    A '+'-joined combination resolves to its first listed agent. Matching then
    falls through exact variation match, bidirectional containment of the
    normalized forms and finally a letters-only comparison. Ties go to the
    first qualifying entry in catalog order.

    Returns the record, or None when nothing matches.
    """
    if raw_token is None:
        return None

    if "+" in raw_token:
        first_agent = raw_token.split("+")[0].strip()
        return resolve(first_agent, catalog, synonyms)

    normalized_token = normalize(raw_token)
    if not normalized_token:
        return None

    # Exact match on any variation
    variations = name_variations(raw_token, synonyms)
    for key, record in catalog.items():
        if key.lower() in variations:
            return record

    # Containment either way
    for key, record in catalog.items():
        normalized_key = normalize(key)
        if not normalized_key:
            continue
        if normalized_key in normalized_token or normalized_token in normalized_key:
            return record

    # Letters only
    stripped_token = letters_only(raw_token)
    if stripped_token:
        for key, record in catalog.items():
            if letters_only(key) == stripped_token:
                return record

    return None


def resolve_regimen(regimen_text, catalog, synonyms=SYNONYMS):
    """Resolve each '+'-separated component of a regimen string.

    Returns a list of (token, record or None) in listed order.
    """
    components = [part.strip() for part in regimen_text.split("+") if part.strip()]
    return [(token, resolve(token, catalog, synonyms)) for token in components]


def catalog_file_id(name, synonyms=SYNONYMS):
    """Data file id for an antibiotic token (canonical id when it is a known alias)."""
    canonical = synonyms.canonical_name(name)
    if canonical:
        return canonical
    file_id = _WHITESPACE.sub("-", name.lower().strip())
    return _FILE_ID_INVALID.sub("", file_id)
