"""
Field extraction from normalised résumé text.

Each rule reads the text independently and falls back to its own default on
a miss, so the rules can run in any order and a miss is never an error.
"""
import re
from typing import List, Sequence

from recruitops.helpers.constants import (
    KNOWN_LOCATIONS, MAX_SKILLS, MAX_WORK_HISTORY, MAX_YEARS_EXPERIENCE, PORTFOLIO_DOMAINS,
    TECH_KEYWORDS, TITLE_KEYWORDS, TOOL_KEYWORDS, UPLOAD_DEFAULT_LOCATION,
    UPLOAD_NAME_MAX, DEFAULT_TITLE,
)
from recruitops.helpers.rules import leftmost, literal_rules, all_matches
from recruitops.models.models import ExtractedFields, SkillEntry, WorkHistoryEntry

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"\+?\d[\d -]{7,14}\d")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/([\w-]+)", re.IGNORECASE)
YEARS_RE = re.compile(r"(\d+)\+?\s*(?:years?|yrs?)\b", re.IGNORECASE)

_MONTH = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?"
DATE_RANGE_RE = re.compile(
    rf"(?:{_MONTH}\s*)?\d{{4}}\s*(?:-|–|—|to)\s*(?:Present|Now|Current|(?:{_MONTH}\s*)?\d{{4}})",
    re.IGNORECASE,
)
CONTEXT_BEFORE = 50
CONTEXT_AFTER = 100

_PORTFOLIO_RES = [(domain, re.compile(pattern, re.IGNORECASE)) for domain, pattern in PORTFOLIO_DOMAINS]
_TECH_RULES = literal_rules(TECH_KEYWORDS)
_TOOL_RULES = literal_rules(TOOL_KEYWORDS)


def extract_email(text: str) -> str:
    m = EMAIL_RE.search(text)
    return m.group(0) if m else ""


def extract_phone(text: str) -> str:
    m = PHONE_RE.search(text)
    return m.group(0).strip() if m else ""


def extract_linkedin_url(text: str) -> str:
    m = LINKEDIN_RE.search(text)
    return f"https://www.linkedin.com/in/{m.group(1)}" if m else ""


def extract_portfolio_url(text: str) -> str:
    for _, pattern in _PORTFOLIO_RES:
        m = pattern.search(text)
        if m:
            return f"https://{m.group(0)}"
    return ""


def extract_location(text: str, default: str = UPLOAD_DEFAULT_LOCATION) -> str:
    return leftmost(KNOWN_LOCATIONS, text) or default


def extract_years_experience(text: str) -> int:
    m = YEARS_RE.search(text)
    if not m:
        return 0
    years = int(m.group(1))
    # a phone fragment or a year is not a career length
    return years if years <= MAX_YEARS_EXPERIENCE else 0


def guess_title(text: str) -> str:
    return leftmost(TITLE_KEYWORDS, text) or DEFAULT_TITLE


def guess_name(text: str, default: str = "", max_length: int = UPLOAD_NAME_MAX) -> str:
    for line in text.splitlines():
        line = line.strip()
        if line:
            return line[:max_length]
    return default


def detect_keywords(text: str, keywords: Sequence[str] = TECH_KEYWORDS, limit: int = None) -> List[SkillEntry]:
    rules = _TECH_RULES if keywords is TECH_KEYWORDS else (
        _TOOL_RULES if keywords is TOOL_KEYWORDS else literal_rules(keywords))
    return [SkillEntry(name=name, years=1) for name in all_matches(rules, text, limit=limit)]


def detect_technologies(text: str, limit: int = None) -> List[SkillEntry]:
    return detect_keywords(text, TECH_KEYWORDS, limit=limit)


def detect_tools(text: str, limit: int = None) -> List[SkillEntry]:
    return detect_keywords(text, TOOL_KEYWORDS, limit=limit)


def extract_work_history(text: str, limit: int = MAX_WORK_HISTORY) -> List[WorkHistoryEntry]:
    entries = []
    for m in DATE_RANGE_RE.finditer(text):
        start = max(0, m.start() - CONTEXT_BEFORE)
        end = min(len(text), m.start() + CONTEXT_AFTER)
        context = re.sub(r"\s+", " ", text[start:end]).strip()
        entries.append(WorkHistoryEntry(company="Unknown", title=context, years=1))
        if len(entries) >= limit:
            break
    return entries


def extract_fields(
    text: str,
    default_name: str = "",
    default_location: str = UPLOAD_DEFAULT_LOCATION,
) -> ExtractedFields:
    """Run every rule over ``text``; empty text yields an all-defaults record."""
    text = text or ""
    return ExtractedFields(
        full_name=guess_name(text, default=default_name) or default_name or "Unknown Candidate",
        title=guess_title(text),
        email=extract_email(text),
        phone=extract_phone(text),
        location=extract_location(text, default=default_location),
        years_experience_total=extract_years_experience(text),
        linkedin_url=extract_linkedin_url(text),
        portfolio_url=extract_portfolio_url(text),
        technologies=detect_technologies(text, limit=MAX_SKILLS),
        tools=detect_tools(text, limit=MAX_SKILLS),
        work_history=extract_work_history(text),
    )
