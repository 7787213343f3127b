"""madOS WLAN - Collapse repeated ssids into one record each.

A network broadcast by several BSSIDs or on several channels appears once
per radio in the scan. Only one record per ssid survives, chosen by:

1. the first record seen for an ssid is kept,
2. a later active record always replaces the current choice,
3. otherwise a later record replaces an inactive choice only if its
   strength is strictly greater,
4. otherwise the current choice stays.

Two active records for one ssid should not happen; if it does, the last
active record in input order wins.
"""

from typing import Dict, Iterable

from .interfaces import ScanRecord


def _should_replace(current: ScanRecord, candidate: ScanRecord) -> bool:
    if candidate.active:
        return True
    return not current.active and candidate.strength > current.strength


def deduplicate(records: Iterable[ScanRecord]) -> Dict[str, ScanRecord]:
    """Return one record per ssid, iterating in first-seen order."""
    chosen: Dict[str, ScanRecord] = {}
    for record in records:
        current = chosen.get(record.ssid)
        if current is None or _should_replace(current, record):
            # Reassigning an existing key keeps its insertion position
            chosen[record.ssid] = record
    return chosen
