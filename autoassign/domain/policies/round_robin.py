"""RoundRobinPolicy — continue a rotation after the most recently assigned staff."""

from __future__ import annotations


def next_in_rotation(ordered_ids: list[str], last_id: str | None) -> str | None:
    """Pick the candidate that follows *last_id* in *ordered_ids*, wrapping around.

    1. startIndex is the position of last_id, or -1 on a cold start
       (no history, or last_id no longer in the list).
    2. Walk forward cyclically from startIndex + 1 for N steps and return
       the first non-empty ID.
    3. If nothing resolves, fall back to the first element.

    Args:
        ordered_ids: candidate IDs in sequence order.
        last_id: staff ID of the most recent assignment among the candidates.

    Returns:
        The next staff ID, or None when there are no candidates.
    """
    if not ordered_ids:
        return None

    total = len(ordered_ids)
    start_index = ordered_ids.index(last_id) if last_id in ordered_ids else -1

    for step in range(1, total + 1):
        candidate = ordered_ids[(start_index + step) % total]
        if candidate:
            return candidate

    return ordered_ids[0] or None
