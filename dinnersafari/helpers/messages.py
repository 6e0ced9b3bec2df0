# --- Filler copy shown when no real clue can be revealed ---
# Events may override any catalog; an empty/missing override falls back to these.

DEFAULT_HOST_SELF = [
    {"emoji": "👑", "text": "Psst... värden är faktiskt ganska fantastisk. (Det är du!)"},
    {"emoji": "🪞", "text": "Ledtråd: Värden tittar på dig i spegeln varje morgon."},
]

DEFAULT_LIPS_SEALED = [
    {"emoji": "🤫", "text": "Our lips are sealed — avslöjar vi en ledtråd kan ni gissa vem!"},
    {"emoji": "🤐", "text": "Tyst som en mus — vi kan inte säga mer utan att avslöja!"},
]

DEFAULT_MYSTERY_HOST = [
    {"emoji": "🎭", "text": "Dina värdar är ett mysterium! Vem kan det vara?"},
    {"emoji": "✨", "text": "Överraskning väntar — vi avslöjar inget!"},
]


def _clean_catalog(raw) -> list[dict]:
    if not isinstance(raw, list):
        return []

    cleaned = []
    for m in raw:
        if not isinstance(m, dict):
            continue
        text = (m.get("text") or "").strip()
        if not text:
            continue
        cleaned.append({"emoji": m.get("emoji") or "", "text": text})
    return cleaned


def message_catalogs(event) -> dict:
    """Per-event catalogs with defaults filled in. Built fresh per request."""
    return {
        "host_self": _clean_catalog(getattr(event, "host_self_messages", None)) or list(DEFAULT_HOST_SELF),
        "lips_sealed": _clean_catalog(getattr(event, "lips_sealed_messages", None)) or list(DEFAULT_LIPS_SEALED),
        "mystery_host": _clean_catalog(getattr(event, "mystery_host_messages", None)) or list(DEFAULT_MYSTERY_HOST),
    }


def pick_message(catalogs: dict, kind: str, index: int):
    messages = catalogs.get(kind) or []
    if not messages:
        return None
    m = messages[index % len(messages)]
    return {"kind": kind, "emoji": m["emoji"], "text": m["text"]}
