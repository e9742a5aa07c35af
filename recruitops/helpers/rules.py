"""
Tiny rule engine used by every extractor.

Business rules are ordered ``(predicate, result)`` pairs evaluated top to
bottom; the first predicate that holds decides the outcome. Rule order is
load-bearing (e.g. "Art Director" must be tested before "Graphic Designer"),
so tables are kept as lists, never dicts that get re-sorted.
"""
import re
from functools import lru_cache
from typing import Any, Callable, Iterable, List, NamedTuple, Optional, Sequence

Predicate = Callable[[str], bool]


class Rule(NamedTuple):
    predicate: Predicate
    result: Any


@lru_cache(maxsize=1024)
def literal_pattern(term: str) -> "re.Pattern[str]":
    """Compile ``term`` as a case-insensitive literal.

    Every character is escaped, so ``C#``, ``C++``, ``Node.js`` or
    ``Cinema 4D (C4D)`` match themselves and nothing else. Edges that are
    word characters get a word-boundary guard, so ``Java`` does not fire
    inside ``JavaScript`` while ``C#`` still matches right before a comma.
    """
    escaped = re.escape(term.strip())
    prefix = r"(?<!\w)" if re.match(r"\w", term.strip()[:1]) else ""
    suffix = r"(?!\w)" if re.match(r"\w", term.strip()[-1:]) else ""
    return re.compile(prefix + escaped + suffix, re.IGNORECASE)


def mentions(term: str) -> Predicate:
    pattern = literal_pattern(term)
    return lambda text: bool(pattern.search(text))


def mentions_any(terms: Iterable[str]) -> Predicate:
    predicates = [mentions(t) for t in terms]
    return lambda text: any(p(text) for p in predicates)


def contains_any(phrases: Iterable[str]) -> Predicate:
    """Plain lower-case substring containment, no boundaries."""
    lowered = [p.lower() for p in phrases]
    return lambda text: any(p in text.lower() for p in lowered)


def first_match(rules: Sequence[Rule], text: str, default: Any = None) -> Any:
    for rule in rules:
        if rule.predicate(text):
            return rule.result
    return default


def all_matches(rules: Sequence[Rule], text: str, limit: Optional[int] = None) -> List[Any]:
    out = []
    for rule in rules:
        if limit is not None and len(out) >= limit:
            break
        if rule.predicate(text):
            out.append(rule.result)
    return out


def literal_rules(terms: Iterable[str]) -> List[Rule]:
    """One rule per term, yielding the term itself on a literal hit."""
    return [Rule(mentions(t), t) for t in terms]


def leftmost(terms: Sequence[str], text: str) -> Optional[str]:
    """Return the listed term whose literal occurrence starts earliest in ``text``.

    Ties at the same offset go to the longer term ("New Cairo" over "Cairo").
    """
    best = None
    best_key = None
    for term in terms:
        m = literal_pattern(term).search(text)
        if not m:
            continue
        key = (m.start(), -len(term))
        if best_key is None or key < best_key:
            best, best_key = term, key
    return best


def first_non_empty(*generators: Callable[[], Optional[List[str]]]) -> List[str]:
    """Evaluate fallback tiers in order and return the first non-empty result."""
    for gen in generators:
        result = gen()
        if result:
            return result
    return []
