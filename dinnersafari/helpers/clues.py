import random
from typing import Optional

from dinnersafari.helpers.envelope_state import state_at_least
from dinnersafari.helpers.fun_facts import combined_fun_facts
from dinnersafari.helpers.messages import pick_message
from dinnersafari.helpers.time import to_iso

# The last meal course gets no pool: by then everyone has met everyone
TERMINAL_COURSE = "dessert"

# Filler is only ever shown in these states; position doubles as catalog index
CLUE_STATES = ("CLUE_1", "CLUE_2")


def build_table_lookup(envelopes) -> dict:
    """
    host_couple_id -> course -> [guest couple ids] for every seated table.

    Expects only non-cancelled envelopes of the active plan.
    """
    lookup: dict = {}
    for e in envelopes:
        if not e.host_couple_id or not e.couple_id or not e.course:
            continue
        lookup.setdefault(e.host_couple_id, {}).setdefault(e.course, []).append(e.couple_id)
    return lookup


def table_guest_ids(table_lookup: dict, host_couple_id, course: str) -> list:
    return table_lookup.get(host_couple_id, {}).get(course, [])


def show_clue_pool(state: str, course: str, is_self_host: bool) -> bool:
    return (
        state == "CLUE_1"
        and course not in (TERMINAL_COURSE, "afterparty")
        and not is_self_host
    )


def build_clue_pool(host_couple_id, course: str, table_lookup: dict, couples_by_id: dict, rng=None) -> list[str]:
    """
    Every fun fact from the host and the guests at this host+course table, shuffled.

    Mixing in the other guests' facts is what makes it a guessing game. The
    order is random per request; only compare pools as sets.
    """
    facts = list(combined_fun_facts(couples_by_id.get(host_couple_id)))

    for guest_id in table_guest_ids(table_lookup, host_couple_id, course):
        if guest_id == host_couple_id:
            continue
        facts.extend(combined_fun_facts(couples_by_id.get(guest_id)))

    (rng or random).shuffle(facts)
    return facts


def host_clue_texts(host_couple, clue_indices) -> list[Optional[str]]:
    """
    [clue 1 text, clue 2 text], None where the index is missing or out of range.

    Hosts can delete facts after matching, so a stale index is normal.
    """
    facts = combined_fun_facts(host_couple)
    indices = list(clue_indices or [])

    texts = []
    for pos in range(2):
        text = None
        if pos < len(indices):
            idx = indices[pos]
            if isinstance(idx, int) and 0 <= idx < len(facts):
                text = facts[idx]
        texts.append(text)
    return texts


def reveal_host_clues(envelope, clue_texts: list, state: str) -> list[dict]:
    clues = []

    if not state_at_least(state, "CLUE_1"):
        return clues

    clue_1, clue_2 = clue_texts
    if clue_1 and envelope.clue_1_at:
        clues.append({"text": clue_1, "revealed_at": to_iso(envelope.clue_1_at)})

    if state_at_least(state, "CLUE_2") and clue_2 and envelope.clue_2_at:
        clues.append({"text": clue_2, "revealed_at": to_iso(envelope.clue_2_at)})

    return clues


def select_filler(state: str, catalogs: dict, is_self_host: bool, host_has_fun_facts: bool, revealed_clues: list):
    """
    Stand-in copy for the clue states, in priority order:
    self-host, host without facts, host whose facts yielded no clue at all.
    """
    if state not in CLUE_STATES:
        return None

    slot = CLUE_STATES.index(state)

    if is_self_host:
        return pick_message(catalogs, "host_self", slot)
    if not host_has_fun_facts:
        return pick_message(catalogs, "mystery_host", slot)
    if not revealed_clues:
        return pick_message(catalogs, "lips_sealed", slot)
    return None


def wants_street_hint(state: str, is_self_host: bool, host_has_fun_facts: bool, revealed_clues: list) -> bool:
    """At CLUE_2 with only one real clue to show, the street name stands in for the second."""
    return (
        state == "CLUE_2"
        and not is_self_host
        and host_has_fun_facts
        and len(revealed_clues) == 1
    )
