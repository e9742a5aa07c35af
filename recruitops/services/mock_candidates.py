"""
Synthetic placeholder candidates used when real sourcing comes back thin.

Scores top out at 95 so a reviewer can tell these apart from real hits.
"""
import re
import time
from typing import List, NamedTuple, Optional, Sequence

from recruitops.helpers.constants import SOURCE_SYNTHETIC, STATUS_NEW
from recruitops.helpers.rules import Rule, contains_any, first_match
from recruitops.models.models import CandidateDraft, SkillEntry
from recruitops.services.scoring import matched_keywords, mock_score


class MockTemplate(NamedTuple):
    name: str
    title: str
    location: str
    skills: List[str]


FRONTEND = [
    MockTemplate("Ahmed Hassan", "Senior Frontend Developer", "Cairo, Egypt", ["React", "TypeScript", "Next.js", "Tailwind"]),
    MockTemplate("Sara El-Sayed", "Frontend Engineer", "Cairo, Egypt", ["React", "JavaScript", "CSS", "Figma"]),
    MockTemplate("Omar Khalil", "React Developer", "Alexandria, Egypt", ["React", "Redux", "Node.js", "GraphQL"]),
    MockTemplate("Nadia Mostafa", "Senior React Engineer", "Cairo, Egypt", ["React", "TypeScript", "AWS", "Docker"]),
    MockTemplate("Karim Adel", "Full Stack Developer", "Giza, Egypt", ["React", "Node.js", "MongoDB", "TypeScript"]),
]
BACKEND = [
    MockTemplate("Mohamed Farouk", "Senior Backend Engineer", "Cairo, Egypt", ["Python", "Django", "PostgreSQL", "Docker"]),
    MockTemplate("Yasmine Ibrahim", "Backend Developer", "Cairo, Egypt", ["Node.js", "TypeScript", "MongoDB", "Redis"]),
    MockTemplate("Hossam Nasser", "Python Developer", "Alexandria, Egypt", ["Python", "FastAPI", "PostgreSQL", "AWS"]),
    MockTemplate("Rania Saleh", "Software Engineer", "Cairo, Egypt", ["Java", "Spring", "MySQL", "Kubernetes"]),
    MockTemplate("Tarek Mansour", "Backend Engineer", "Cairo, Egypt", ["Node.js", "Express", "MongoDB", "Docker"]),
]
DESIGN = [
    MockTemplate("Dina Kamal", "Senior Graphic Designer", "Cairo, Egypt", ["Photoshop", "Illustrator", "InDesign", "Branding"]),
    MockTemplate("Hana Ali", "Product Designer", "Cairo, Egypt", ["Figma", "User Research", "Design Systems"]),
    MockTemplate("Sherif Gamal", "UI/UX Designer", "Giza, Egypt", ["Figma", "Photoshop", "Illustrator", "Framer"]),
    MockTemplate("Mariam Fouad", "Art Director", "Cairo, Egypt", ["Illustrator", "Photoshop", "Art Direction", "Campaigns"]),
    MockTemplate("Khaled Essam", "Motion Designer", "Cairo, Egypt", ["After Effects", "Premiere Pro", "Illustrator", "Cinema 4D"]),
]
DATA = [
    MockTemplate("Aya Sami", "Data Scientist", "Cairo, Egypt", ["Python", "TensorFlow", "Pandas", "scikit-learn"]),
    MockTemplate("Hassan Badr", "ML Engineer", "Cairo, Egypt", ["PyTorch", "Python", "AWS", "Docker"]),
    MockTemplate("Mona Taha", "Data Analyst", "Cairo, Egypt", ["Python", "SQL", "Tableau", "Pandas"]),
    MockTemplate("Amr Fathy", "Senior Data Scientist", "Alexandria, Egypt", ["TensorFlow", "Python", "GCP", "Spark"]),
    MockTemplate("Layla Mahmoud", "AI Engineer", "Cairo, Egypt", ["Python", "PyTorch", "FastAPI", "Docker"]),
]
GENERIC = [
    MockTemplate("Ahmed Naguib", "Software Engineer", "Cairo, Egypt", ["Python", "JavaScript", "Docker", "Git"]),
    MockTemplate("Sara Ashraf", "Full Stack Developer", "Cairo, Egypt", ["React", "Node.js", "PostgreSQL", "AWS"]),
    MockTemplate("Omar Samir", "Senior Developer", "Alexandria, Egypt", ["TypeScript", "React", "Node.js", "MongoDB"]),
    MockTemplate("Nour Hamdy", "Software Developer", "Cairo, Egypt", ["Java", "Spring", "MySQL", "Docker"]),
    MockTemplate("Youssef Adly", "Tech Lead", "Giza, Egypt", ["React", "Node.js", "AWS", "Kubernetes"]),
]

# First archetype whose trigger appears in the JD wins.
ARCHETYPE_RULES = [
    Rule(contains_any(["react", "frontend", "front-end"]), FRONTEND),
    Rule(contains_any(["backend", "node", "python"]), BACKEND),
    Rule(contains_any(["figma", "ux", "designer", "photoshop", "illustrator", "art director"]), DESIGN),
    Rule(contains_any(["data", "machine learning", "ml engineer"]), DATA),
]


def select_templates(jd: str) -> List[MockTemplate]:
    return first_match(ARCHETYPE_RULES, jd, default=GENERIC)


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def generate_mock_candidates(
    keyword_sets: Sequence[Sequence[str]],
    jd: str,
    stamp: Optional[int] = None,
) -> List[CandidateDraft]:
    """Placeholder candidates for ``jd`` with collision-free profile URLs."""
    stamp = stamp if stamp is not None else int(time.time() * 1000)
    keywords = [kw for combo in keyword_sets for kw in combo]
    out = []
    for i, t in enumerate(select_templates(jd)):
        profile_text = f"{t.title} {' '.join(t.skills)}"
        matched = list(dict.fromkeys(matched_keywords(profile_text, keywords)))
        reason = (
            f"Strong match on: {', '.join(matched[:3])}. Profile aligns with JD requirements."
            if matched else
            "Profile aligns with job requirements based on role and location."
        )
        out.append(CandidateDraft(
            full_name=t.name,
            title=t.title,
            location=t.location,
            linkedin_url=f"https://www.linkedin.com/in/{_slug(t.name)}-{stamp}-{i}",
            technologies=[SkillEntry(name=s, years=1) for s in t.skills],
            source=SOURCE_SYNTHETIC,
            match_score=mock_score(profile_text, keywords, lead=(i == 0)),
            match_reason=reason,
            status=STATUS_NEW,
        ))
    return out
