import re

def slugify(name: str) -> str:
    """Create URL friendly string ("Cykelfesten Vasastan" -> "cykelfesten-vasastan")"""
    s = re.sub(r"[^a-zA-Z0-9]+", "-", name.strip().lower()).strip("-")
    return s or "event"
