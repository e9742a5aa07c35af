ENRICH_PROMPT = """You are a recruitment parser. Extract structured data from the resume text below.
Return strict JSON with exactly these keys:
{{"technologies": [{{"name": "React", "years": 2}}],
 "tools": [{{"name": "Figma", "years": 3}}],
 "work_history": [{{"company": "Google", "title": "Senior Engineer", "years": 2}}]}}

- Use the skill's usual spelling (e.g. "Node.js", "C#").
- If a company is not stated, use "Unknown".
- If unknown, use an empty list.

RESUME TEXT:
{resume_text}
"""
