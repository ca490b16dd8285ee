# search.py
import logging
from dataclasses import dataclass
from typing import Optional

from data_loader import iter_documents
from normalizer import SYNONYMS, text_matches

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchResult:
    type: str
    id: str
    name: str
    description: str = ""
    category: Optional[str] = None


def _any_match(texts, term):
    return any(isinstance(text, str) and text_matches(text, term) for text in texts)


def search(term, data_dir=None):
    """
    Linear scan of antibiotic and condition documents for a free-text term.

    Antibiotics match on name, class and spectrum organisms, or when the term
    is an alias of the antibiotic's canonical id. Conditions match on name,
    description, tags and common pathogens.
    """
    if not term or not term.strip():
        return []

    canonical = SYNONYMS.canonical_name(term)
    results = []
    for kind, category, doc in iter_documents(data_dir):
        if kind == "antibiotic":
            spectrum = doc.get("spectrum") or {}
            texts = [doc.get("name"), doc.get("class")]
            texts += spectrum.get("plus") or []
            texts += spectrum.get("minus") or []
            if _any_match(texts, term) or (canonical and canonical == doc.get("id")):
                tier = doc.get("stewardshipTier") or "No tier"
                results.append(SearchResult(
                    type="antibiotic",
                    id=str(doc.get("id", "")),
                    name=str(doc.get("name", "")),
                    description=f"{doc.get('class', 'Unknown class')} - {tier}",
                ))
        else:
            epidemiology = doc.get("epidemiology") or {}
            texts = [doc.get("name"), doc.get("description")]
            texts += doc.get("tags") or []
            texts += epidemiology.get("commonPathogens") or []
            if _any_match(texts, term):
                results.append(SearchResult(
                    type="condition",
                    id=str(doc.get("id", "")),
                    name=str(doc.get("name", "")),
                    description=doc.get("description") or "",
                    category=category,
                ))

    logger.debug("Search for '%s' returned %d results", term, len(results))
    return results
