"""
Fun facts come in two shapes.

The current format is an object keyed by field ({"pet": "katt", ...}); older
signups stored a plain list of sentences. Everything that reads facts goes
through fun_facts_to_strings / count_fun_facts so both keep working.
"""

# Field order matters: it defines the combined index space used by course clues
FUN_FACT_RENDERERS = (
    ("musicDecade", lambda v: f"Tycker att {v}-talets musik var bäst"),
    ("pet", lambda v: f"Har husdjur: {v}"),
    ("talent", lambda v: f"Hemligt talent: {v}"),
    ("firstJob", lambda v: f"Första jobbet var {v}"),
    ("dreamDestination", lambda v: f"Drömresmål: {v}"),
    ("instruments", lambda v: f"Spelar {v}"),
    ("sport", lambda v: f"Sportar: {v}"),
    ("unknownFact", lambda v: v),  # already a full sentence
    ("importantYear", lambda v: f"Viktigt år: {v}"),
)


def fun_facts_to_strings(raw) -> list[str]:
    if not raw:
        return []

    if isinstance(raw, list):
        return [f for f in raw if isinstance(f, str)]

    if isinstance(raw, dict):
        out = []
        for key, render in FUN_FACT_RENDERERS:
            value = raw.get(key)
            if value and str(value).strip():
                out.append(render(str(value).strip()))
        return out

    return []


def count_fun_facts(raw) -> int:
    if not raw:
        return 0
    if isinstance(raw, list):
        return len(raw)
    if isinstance(raw, dict):
        return sum(1 for v in raw.values() if v and str(v).strip())
    return 0


def combined_fun_facts(couple) -> list[str]:
    """Invited person's facts followed by the partner's."""
    if couple is None:
        return []
    return fun_facts_to_strings(couple.invited_fun_facts) + fun_facts_to_strings(couple.partner_fun_facts)


def has_fun_facts(couple) -> bool:
    if couple is None:
        return False
    return count_fun_facts(couple.invited_fun_facts) > 0 or count_fun_facts(couple.partner_fun_facts) > 0
