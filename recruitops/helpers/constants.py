"""
Closed vocabularies and fixed business constants.

Lists are ordered; where order changes the outcome (role triggers, company
priority, portfolio domains) the comment on the table says so.
"""
from typing import Dict, List, Tuple

# ---------------------------------------------------------------- regions
ANCHOR_REGIONS: Tuple[str, str] = ("Egypt", "Cairo")
PRIMARY_ANCHOR = ANCHOR_REGIONS[0]
UPLOAD_DEFAULT_LOCATION = "Remote"
GENERIC_QUALIFIERS: Tuple[str, str] = ("Senior", "Lead")

KNOWN_LOCATIONS: List[str] = [
    "New Cairo", "Cairo", "Alexandria", "Giza", "Maadi", "Heliopolis", "Dokki",
    "Nasr City", "6th of October", "October", "Sheikh Zayed", "Zayed",
    "Mansoura", "Tanta", "Egypt",
    "Dubai", "Abu Dhabi", "Sharjah", "UAE", "Riyadh", "Jeddah", "Saudi Arabia",
    "Doha", "Qatar", "Kuwait", "Remote",
]

# ---------------------------------------------------------------- résumé fields
# First hit in the text wins for the title guess.
TITLE_KEYWORDS: List[str] = [
    "Art Director", "Creative Director", "Senior Designer", "Junior Designer",
    "Graphic Designer", "Motion Designer", "UI/UX", "Product Designer",
    "Full Stack", "Frontend", "Backend", "Data Scientist", "DevOps",
    "Product Manager", "Marketing Specialist", "Content Writer",
]

# Checked in this order; the first matching portfolio domain wins.
PORTFOLIO_DOMAINS: List[Tuple[str, str]] = [
    ("behance.net", r"behance\.net/[\w-]+"),
    ("dribbble.com", r"dribbble\.com/[\w-]+"),
    ("github.com", r"github\.com/[\w-]+"),
    ("artstation.com", r"artstation\.com/[\w-]+"),
]

TECH_KEYWORDS: List[str] = [
    "React", "Next.js", "Node.js", "TypeScript", "JavaScript", "Python", "Django",
    "Flask", "FastAPI", "SQL", "PostgreSQL", "MongoDB", "AWS", "Docker",
    "Kubernetes", "Figma", "Adobe XD", "Photoshop", "Illustrator", "InDesign",
    "After Effects", "Premiere", "Blender", "Unity", "C#", "C++", "Java",
    "Spring", "Kotlin", "Swift", "Flutter", "Dart", "PHP", "Angular", "Vue",
]

TOOL_KEYWORDS: List[str] = [
    "Figma", "Sketch", "Adobe XD", "Photoshop", "Illustrator", "Jira", "Trello",
    "Slack", "Git", "GitHub", "GitLab", "Notion", "Canva", "HubSpot", "Linear",
]

MAX_SKILLS = 6
MAX_WORK_HISTORY = 3
MAX_YEARS_EXPERIENCE = 40
UPLOAD_NAME_MAX = 100
RESULT_NAME_MAX = 60

# ---------------------------------------------------------------- JD analysis
# Order is significant: specific roles sit above the generic ones they overlap.
ROLE_TRIGGERS: List[Tuple[str, List[str]]] = [
    ("Art Director", ["art director", "art direction"]),
    ("Creative Director", ["creative director"]),
    ("Motion Designer", ["motion designer", "motion graphics designer", "animator"]),
    ("UX Designer", ["ux designer", "ui/ux", "ui designer", "product designer"]),
    ("Graphic Designer", ["graphic designer", "graphic design", "visual designer"]),
    ("Full Stack Developer", ["full stack", "full-stack", "fullstack"]),
    ("Frontend Developer", ["frontend", "front-end", "front end", "react developer", "vue developer", "angular developer"]),
    ("Backend Developer", ["backend", "back-end", "back end", "node.js developer", "python developer", "django developer"]),
    ("Mobile Developer", ["mobile developer", "ios developer", "android developer", "react native", "flutter developer"]),
    ("Software Engineer", ["software engineer", "software developer"]),
    ("Data Scientist", ["data scientist", "data science", "ml engineer", "machine learning"]),
    ("DevOps Engineer", ["devops", "dev ops", "site reliability", "platform engineer"]),
    ("Product Manager", ["product manager", "product management", "product owner"]),
    ("CRM Specialist", ["crm specialist", "hubspot", "salesforce admin"]),
    ("Marketing Manager", ["marketing manager", "digital marketing", "growth manager", "marketing specialist"]),
    ("Sales Manager", ["sales manager", "account executive", "business development"]),
    ("Content Writer", ["content writer", "copywriter", "content creator"]),
    ("HR Manager", ["hr manager", "human resources", "talent acquisition", "recruiter"]),
]
DEFAULT_ROLE = "Professional"
DEFAULT_TITLE = "Candidate"

JD_SKILLS: List[str] = [
    "Photoshop", "Illustrator", "InDesign", "After Effects", "Premiere Pro",
    "Figma", "Adobe XD", "Sketch", "Canva", "Blender", "Cinema 4D",
    "React", "Next.js", "Vue", "Angular", "TypeScript", "JavaScript", "Node.js",
    "Python", "Django", "FastAPI", "Flask", "Java", "Spring", "Rust",
    "PostgreSQL", "MySQL", "MongoDB", "Redis", "AWS", "Azure", "GCP",
    "Docker", "Kubernetes", "Terraform", "GraphQL",
    "TensorFlow", "PyTorch", "scikit-learn", "Pandas", "NumPy",
    "React Native", "Flutter", "Swift", "Kotlin", "HubSpot", "Salesforce",
]

# Phrases that imply skills without naming them.
SKILL_ALIASES: List[Tuple[str, List[str]]] = [
    ("adobe creative suite", ["Photoshop", "Illustrator", "InDesign", "After Effects"]),
    ("adobe creative cloud", ["Photoshop", "Illustrator", "InDesign", "After Effects"]),
    ("adobe cc", ["Photoshop", "Illustrator", "InDesign"]),
    ("motion graphics", ["After Effects"]),
    ("video editing", ["Premiere Pro"]),
    ("3d modeling", ["Blender", "Cinema 4D"]),
    ("machine learning", ["Python", "scikit-learn"]),
    ("crm", ["HubSpot"]),
]
MAX_JD_SKILLS = 5
MIN_JD_LENGTH = 20

# Priority order: the earliest listed employer present becomes "primary".
COMPANIES: List[Tuple[str, List[str]]] = [
    ("Vodafone International Services", ["vodafone international services", "vodafone international", "_vois", "vois", "vodafone"]),
    ("Valeo", ["valeo"]),
    ("IBM", ["ibm"]),
    ("Microsoft", ["microsoft"]),
    ("Orange Business", ["orange business", "orange egypt"]),
    ("Etisalat", ["etisalat", "e& egypt"]),
    ("Dell Technologies", ["dell technologies", "dell"]),
    ("Instabug", ["instabug"]),
    ("Swvl", ["swvl"]),
    ("Fawry", ["fawry"]),
    ("Paymob", ["paymob"]),
    ("Careem", ["careem"]),
    ("Noon", ["noon.com", "noon academy"]),
    ("Talabat", ["talabat"]),
    ("Amazon", ["amazon"]),
]

MARKETS: List[Tuple[str, List[str]]] = [
    ("Saudi Arabia", ["saudi", "ksa", "riyadh", "jeddah"]),
    ("UAE", ["uae", "dubai", "abu dhabi", "emirates"]),
    ("Qatar", ["qatar", "doha"]),
    ("Kuwait", ["kuwait"]),
    ("Bahrain", ["bahrain"]),
    ("Oman", ["oman", "muscat"]),
    ("GCC", ["gcc", "gulf"]),
]

# ---------------------------------------------------------------- scoring
BASE_SCORE = 45
KEYWORD_BONUS = 12
SKILL_BONUS = 2
PRIMARY_MARKET_BONUS = 15
BLOC_BONUS = 10
EMPLOYER_BONUS = 20
SCORE_CEILING = 99
PRIMARY_MARKET_TERMS: List[str] = ["saudi", "ksa", "riyadh", "jeddah"]
BLOC_TERMS: List[str] = ["gcc", "gulf"]
STRONG_EMPLOYER_ALIASES: List[str] = ["vodafone international", "_vois", "vois"]

MOCK_BASE_SCORE = 55
MOCK_KEYWORD_BONUS = 8
MOCK_LEAD_BONUS = 5
MOCK_SCORE_CEILING = 95
MIN_REAL_RESULTS = 3

UPLOAD_SCORE = 10
UPLOAD_MATCH_REASON = "Parsed from PDF. Please review extracted fields."

# ---------------------------------------------------------------- provenance & lifecycle
SOURCE_PDF_UPLOAD = "PDF Upload"
SOURCE_JSON_IMPORT = "JSON Import"
SOURCE_SYNTHETIC = "Synthetic"

STATUS_NEW = "New"
STATUS_VETTED = "Vetted"
STATUS_UNVETTED = "Unvetted"

PIPELINE_STAGES: List[str] = [
    "Sourced",
    "Contacted/No Reply",
    "Lnkd Interview",
    "Shortlisted by Lnkd",
    "Client Interview",
    "Offer",
    "Hired",
    "Rejected",
]
TERMINAL_STAGES = ("Hired", "Rejected")

ACTIVITY_ACTIONS: Dict[str, str] = {
    "staged": "candidate_staged",
    "approved": "candidate_approved",
    "rejected": "candidate_rejected",
    "edited": "candidate_edited",
    "sourcing": "sourcing_triggered",
    "search": "search_performed",
}
