"""
Job-description analysis: infer role, skills, employers and markets, then
compose the keyword combinations used as literal search queries.
"""
from typing import Callable, List, Optional

from recruitops.helpers.constants import (
    ANCHOR_REGIONS, COMPANIES, DEFAULT_ROLE, GENERIC_QUALIFIERS, JD_SKILLS,
    MARKETS, MAX_JD_SKILLS, ROLE_TRIGGERS, SKILL_ALIASES,
)
from recruitops.helpers.rules import (
    Rule, all_matches, contains_any, first_match, first_non_empty, literal_rules,
    mentions, mentions_any,
)
from recruitops.models.models import JDAnalysis
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)

ROLE_RULES = [Rule(contains_any(triggers), role) for role, triggers in ROLE_TRIGGERS]
SKILL_RULES = literal_rules(JD_SKILLS)
ALIAS_RULES = [Rule(mentions(phrase), implied) for phrase, implied in SKILL_ALIASES]
COMPANY_RULES = [Rule(mentions_any(aliases), name) for name, aliases in COMPANIES]
MARKET_RULES = [Rule(mentions_any(signals), name) for name, signals in MARKETS]

MAX_COMBINATIONS = 5


def detect_role(text: str) -> str:
    return first_match(ROLE_RULES, text.lower(), default=DEFAULT_ROLE)


def detect_skills(text: str, limit: int = MAX_JD_SKILLS) -> List[str]:
    skills = all_matches(SKILL_RULES, text)
    for implied in all_matches(ALIAS_RULES, text):
        skills.extend(s for s in implied if s not in skills)
    return skills[:limit]


def detect_companies(text: str) -> List[str]:
    return all_matches(COMPANY_RULES, text)


def detect_markets(text: str) -> List[str]:
    return all_matches(MARKET_RULES, text)


def _nth(items: List[str], n: int) -> Optional[str]:
    return items[n] if len(items) > n else None


def _terms(*terms: Optional[str]) -> Callable[[], Optional[List[str]]]:
    """A fallback tier: yields its terms only when every one is present."""
    def tier():
        if all(terms):
            return list(terms)
        return None
    return tier


def combination_slots(role: str, skills: List[str], companies: List[str], markets: List[str]):
    """Ordered fallback tiers for each of the five combination slots."""
    region1, region2 = ANCHOR_REGIONS
    qualifier1, qualifier2 = GENERIC_QUALIFIERS
    primary, secondary = _nth(companies, 0), _nth(companies, 1)
    market1, market2 = _nth(markets, 0), _nth(markets, 1)
    skill1, skill2 = _nth(skills, 0), _nth(skills, 1)

    return [
        [
            _terms(role, region1, primary),
            _terms(role, region1, market1),
            _terms(role, region1),
        ],
        [
            _terms(role, region1, secondary),
            _terms(role, region1, market2),
            _terms(role, region1, skill1),
            _terms(role, region1, qualifier1),
        ],
        [
            _terms(role, region2, primary),
            _terms(role, region2, market1),
            _terms(role, region2),
        ],
        [
            _terms(role, skill1, region1),
            _terms(role, primary, region1),
            _terms(role, region1, qualifier1),
        ],
        [
            _terms(primary, region1, market1),
            _terms(primary, region1),
            _terms(skill1, skill2, region1),
            _terms(role, region1, qualifier1, qualifier2),
        ],
    ]


def build_keyword_sets(role: str, skills: List[str], companies: List[str], markets: List[str]) -> List[List[str]]:
    sets: List[List[str]] = []
    for slot in combination_slots(role, skills, companies, markets):
        combo = first_non_empty(*slot)
        if combo and combo not in sets:
            sets.append(combo)
    return sets[:MAX_COMBINATIONS]


def analyze_job_description(jd: str) -> JDAnalysis:
    """Derive role, skills, employers, markets and keyword sets from a JD.

    Callers enforce the minimum description length; any text yields at least
    one combination because every slot bottoms out in role + anchor region.
    """
    role = detect_role(jd)
    skills = detect_skills(jd)
    companies = detect_companies(jd)
    markets = detect_markets(jd)
    keyword_sets = build_keyword_sets(role, skills, companies, markets)

    logger.debug(
        f"JD analysed: role={role}, skills={skills}, companies={companies}, "
        f"markets={markets}, {len(keyword_sets)} keyword sets"
    )
    return JDAnalysis(
        role=role,
        skills=skills,
        companies=companies,
        markets=markets,
        keyword_sets=keyword_sets,
    )
