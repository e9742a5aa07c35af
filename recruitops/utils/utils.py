import os
import json
from dotenv import load_dotenv
import requests

from recruitops.utils.exceptions import ModelError

load_dotenv()

OLLAMA = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
LLM_MODEL = os.getenv("LLM_MODEL", "llama3.1:8b")
LLM_TIMEOUT = int(os.getenv("LLM_TIMEOUT", "120"))


def env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def ollama_generate(prompt: str, model: str = None, temperature: float = 0.1) -> str:
    model = model or LLM_MODEL
    url = f"{OLLAMA}/api/generate"
    try:
        resp = requests.post(
            url,
            json={
                "model": model,
                "prompt": prompt,
                "format": "json",
                "options": {"temperature": temperature},
                "stream": False  # one JSON body, not NDJSON chunks
            },
            timeout=LLM_TIMEOUT,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise ModelError(f"LLM request failed: {e}", model_name=model, cause=e) from e
    return resp.json().get("response", "") or ""


def safe_json(s: str, fallback: dict):
    try:
        # models sometimes wrap the object in prose
        start = s.find("{")
        end = s.rfind("}")
        if start >= 0 and end >= 0:
            return json.loads(s[start:end+1])
        return fallback
    except (TypeError, ValueError):
        return fallback
