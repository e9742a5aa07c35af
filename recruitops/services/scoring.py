from typing import Iterable, List, Sequence

from recruitops.helpers import constants as C


def matched_keywords(text: str, keywords: Iterable[str]) -> List[str]:
    lowered = text.lower()
    return [kw for kw in keywords if kw and kw.lower() in lowered]


def score_candidate(text: str, keywords: Sequence[str], skills: Sequence[str]) -> int:
    """Additive match score in [0, 99] for a search hit.

    ``skills`` earn their bonus even when they are also among ``keywords``;
    the two terms are deliberately not merged.
    """
    lowered = (text or "").lower()
    score = C.BASE_SCORE
    score += C.KEYWORD_BONUS * len(matched_keywords(lowered, keywords))
    score += C.SKILL_BONUS * len(skills)
    if any(term in lowered for term in C.PRIMARY_MARKET_TERMS):
        score += C.PRIMARY_MARKET_BONUS
    if any(term in lowered for term in C.BLOC_TERMS):
        score += C.BLOC_BONUS
    if any(alias in lowered for alias in C.STRONG_EMPLOYER_ALIASES):
        score += C.EMPLOYER_BONUS
    # 100 is reserved for a manual perfect match
    return max(0, min(C.SCORE_CEILING, score))


def mock_score(profile_text: str, keywords: Sequence[str], lead: bool = False) -> int:
    matched = matched_keywords(profile_text, dict.fromkeys(keywords))
    score = C.MOCK_BASE_SCORE + C.MOCK_KEYWORD_BONUS * len(matched)
    if lead:
        score += C.MOCK_LEAD_BONUS
    return min(C.MOCK_SCORE_CEILING, score)


def build_match_reason(matched: Sequence[str], platform: str) -> str:
    if matched:
        return f"Matched keywords: {', '.join(matched)}. Found via {platform} search."
    return f"Found via {platform} sourcing search."
