"""
Turn one raw search hit into a candidate draft for a given platform.

A hit that belongs to another site, or whose extracted name looks like
boilerplate, is rejected by returning ``None``; rejections are routine and
never raise.
"""
import re
from typing import Dict, List, Optional, Sequence, Tuple

from recruitops.helpers.constants import (
    DEFAULT_ROLE, KNOWN_LOCATIONS, MAX_SKILLS, PRIMARY_ANCHOR, RESULT_NAME_MAX, STATUS_NEW,
)
from recruitops.helpers.parsing import normalize_snippet
from recruitops.helpers.rules import leftmost, mentions_any
from recruitops.models.models import CandidateDraft, Platform, SearchResult
from recruitops.services.extraction import detect_technologies
from recruitops.services.scoring import build_match_reason, matched_keywords, score_candidate

PROFILE = "profile"
PORTFOLIO = "portfolio"
JOB_BOARD = "job_board"

PLATFORMS: Dict[str, Platform] = {
    "LinkedIn": Platform(
        name="LinkedIn", kind=PROFILE, site="linkedin.com/in",
        url_pattern=r"linkedin\.com/in/([\w%-]+)",
        canonical_url="https://www.linkedin.com/in/{slug}",
    ),
    "Behance": Platform(
        name="Behance", kind=PORTFOLIO, site="behance.net",
        url_pattern=r"behance\.net/([\w-]+)",
        canonical_url="https://www.behance.net/{slug}",
    ),
    "Dribbble": Platform(
        name="Dribbble", kind=PORTFOLIO, site="dribbble.com",
        url_pattern=r"dribbble\.com/([\w-]+)",
        canonical_url="https://dribbble.com/{slug}",
    ),
    "Wuzzuf": Platform(
        name="Wuzzuf", kind=JOB_BOARD, site="wuzzuf.net/jobs",
        url_pattern=r"wuzzuf\.net/",
    ),
}
DEFAULT_PLATFORMS: List[str] = list(PLATFORMS)

# Portfolio sites reserve some first-level paths for their own pages.
RESERVED_SLUGS = {
    "search", "galleries", "gallery", "projects", "collection", "moodboard", "assets",
    "shots", "jobs", "about", "pro", "signup", "login", "joblist",
}

_SITE_SUFFIX = re.compile(r"\s*(?:\||-|::|–)\s*(?:LinkedIn|Behance|Dribbble|Wuzzuf(?:\.net)?)\s*$", re.IGNORECASE)
_PORTFOLIO_MARKER = re.compile(
    r"\s*(?:(?:\||-|::|–)\s*|\bon\s+)(?:Behance|Dribbble|Portfolio)\b.*$|^\s*(?:Behance|Dribbble)\s*(?:\||::|-)\s*",
    re.IGNORECASE,
)
_NAME_HEADLINE = re.compile(r"\s+(?:-|\|)\s+")
_BOILERPLATE = mentions_any(["jobs", "hiring", "vacancies", "profiles", "linkedin", "sign up", "log in"])


def _clean_title(raw: str) -> str:
    return _SITE_SUFFIX.sub("", normalize_snippet(raw)).strip()


def first_sentence(description: str, min_len: int = 5, max_len: int = 80) -> Optional[str]:
    sentence = description.split(".")[0].strip()
    if min_len < len(sentence) < max_len:
        return sentence
    return None


def looks_like_garbage(name: str) -> bool:
    """Names that are really company banners, shouting headlines or page furniture."""
    if not name or len(name) > RESULT_NAME_MAX:
        return True
    letters = [ch for ch in name if ch.isalpha()]
    if not letters:
        return True
    if len(letters) > 1 and name.upper() == name:
        return True
    return _BOILERPLATE(name)


def _profile_fields(title: str, description: str) -> Tuple[str, str]:
    if " - " in title:
        name, rest = title.split(" - ", 1)
        role = rest.split(" at ")[0].split(" | ")[0].strip()
        return name.strip(), role if len(role) > 2 else DEFAULT_ROLE
    return title[:RESULT_NAME_MAX].strip(), first_sentence(description) or DEFAULT_ROLE


def _portfolio_fields(title: str, description: str) -> Tuple[str, str]:
    name = _PORTFOLIO_MARKER.sub("", title).strip()
    headline = ""
    parts = _NAME_HEADLINE.split(name, 1)
    if len(parts) == 2:
        name, headline = (p.strip() for p in parts)
    return name[:RESULT_NAME_MAX].strip(), first_sentence(description) or headline or DEFAULT_ROLE


def _job_board_fields(title: str, description: str) -> Tuple[str, str]:
    parts = [p.strip() for p in title.split(" - ") if p.strip()]
    if len(parts) >= 2:
        return parts[0], parts[1]
    name = parts[0] if parts else ""
    return name, first_sentence(description) or name or DEFAULT_ROLE


def identity_key_for(linkedin_url: str, portfolio_url: str, raw_url: str) -> str:
    return linkedin_url or portfolio_url or raw_url or ""


def parse_result(result: SearchResult, platform: Platform, keywords: Sequence[str]) -> Optional[CandidateDraft]:
    url = (result.url or "").strip()
    match = re.search(platform.url_pattern, url, re.IGNORECASE)
    if not match:
        return None

    title = _clean_title(result.title)
    description = normalize_snippet(result.description)

    linkedin_url = portfolio_url = ""
    if platform.kind == PROFILE:
        linkedin_url = platform.canonical_url.format(slug=match.group(1))
        full_name, role = _profile_fields(title, description)
    elif platform.kind == PORTFOLIO:
        slug = match.group(1)
        if slug.lower() in RESERVED_SLUGS:
            return None
        portfolio_url = platform.canonical_url.format(slug=slug)
        full_name, role = _portfolio_fields(title, description)
    else:
        full_name, role = _job_board_fields(title, description)

    if looks_like_garbage(full_name):
        return None
    if not identity_key_for(linkedin_url, portfolio_url, url):
        return None

    combined = f"{title} {description}"
    skills = detect_technologies(combined, limit=MAX_SKILLS)
    skill_names = [s.name for s in skills]
    matched = matched_keywords(combined, keywords)

    return CandidateDraft(
        full_name=full_name,
        title=role,
        location=leftmost(KNOWN_LOCATIONS, combined) or PRIMARY_ANCHOR,
        linkedin_url=linkedin_url,
        portfolio_url=portfolio_url,
        source_url=url,
        technologies=skills,
        source=platform.name,
        match_score=score_candidate(combined, keywords, skill_names),
        match_reason=build_match_reason(matched, platform.name),
        status=STATUS_NEW,
    )
