from typing import Optional

from dinnersafari.helpers.clues import table_guest_ids


def _normalize(item) -> str:
    if not isinstance(item, str):
        return ""
    return item.strip().lower()


def summarize_allergies(host_couple_id, course: str, table_lookup: dict, couples_by_id: dict) -> Optional[list[str]]:
    """
    Host-only allergy digest for one table.

    ["Gluten (1 pers)", "Nötter (2 pers)", "Anna: fiskallergi men ok med skaldjur"]

    Counts are per person: a partner's allergies only count when the couple
    actually has a partner. Returns None (not []) when there is nothing to say.
    """
    if not host_couple_id:
        return None

    # the host sits at their own table too
    guest_ids = [g for g in table_guest_ids(table_lookup, host_couple_id, course) if g != host_couple_id]
    if not guest_ids or not couples_by_id:
        return None

    counts: dict[str, int] = {}
    # dict as an ordered set
    notes: dict[str, None] = {}

    def add_allergies(items):
        if not isinstance(items, list):
            return
        for item in items:
            key = _normalize(item)
            if key:
                counts[key] = counts.get(key, 0) + 1

    def add_note(name, note):
        note = (note or "").strip()
        if not note:
            return
        prefix = f"{name}: " if name else ""
        notes[f"{prefix}{note}"] = None

    for guest_id in guest_ids:
        guest = couples_by_id.get(guest_id)
        if not guest:
            continue

        add_allergies(guest.invited_allergies)
        add_allergies(guest.replacement_allergies)
        add_note(guest.invited_name, guest.invited_allergy_notes)

        if guest.partner_name:
            add_allergies(guest.partner_allergies)
            add_note(guest.partner_name, guest.partner_allergy_notes)

    summary = []
    for allergy in sorted(counts):
        label = allergy[:1].upper() + allergy[1:]
        summary.append(f"{label} ({counts[allergy]} pers)")

    summary.extend(notes)

    return summary or None
