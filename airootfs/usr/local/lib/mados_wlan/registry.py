"""madOS WLAN - In-memory registry of visible access points.

The registry is the only owner of AccessPoint objects. It is mutated
solely by :meth:`Registry.reconcile`, which computes the whole diff first
and then applies it in one step on the main loop, so readers always see
either the previous pass or the new one.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Mapping, Optional

from .interfaces import AccessPoint, ScanRecord

log = logging.getLogger(__name__)


@dataclass
class RegistryDiff:
    """Operations applied by one reconciliation pass, by ssid."""
    removed: List[str] = field(default_factory=list)
    updated: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.removed or self.updated or self.added)


RegistryListener = Callable[['Registry', RegistryDiff], None]


class Registry:
    """Ordered, ssid-unique collection of AccessPoint objects."""

    def __init__(self):
        self._entries: Dict[str, AccessPoint] = {}
        self._listeners: List[RegistryListener] = []

    # -- Read access ---------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AccessPoint]:
        return iter(list(self._entries.values()))

    def __contains__(self, ssid) -> bool:
        return ssid in self._entries

    def get(self, ssid: str) -> Optional[AccessPoint]:
        return self._entries.get(ssid)

    def active(self) -> Optional[AccessPoint]:
        """Return the currently associated access point, if any."""
        for ap in self._entries.values():
            if ap.active:
                return ap
        return None

    def snapshot(self) -> List[AccessPoint]:
        return list(self._entries.values())

    def sorted_for_display(self) -> List[AccessPoint]:
        """Active network first, then strongest, then by name."""
        return sorted(self._entries.values(),
                      key=lambda ap: (not ap.active, -ap.strength, ap.ssid.lower()))

    # -- Observers -----------------------------------------------------------

    def add_listener(self, callback: RegistryListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: RegistryListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    # -- Mutation ------------------------------------------------------------

    def compute_diff(self, snapshot: Mapping[str, ScanRecord]) -> RegistryDiff:
        """Work out what :meth:`reconcile` would do, without mutating."""
        diff = RegistryDiff()
        for ssid in self._entries:
            if ssid not in snapshot:
                diff.removed.append(ssid)
        for ssid in snapshot:
            if ssid in self._entries:
                diff.updated.append(ssid)
            else:
                diff.added.append(ssid)
        return diff

    def reconcile(self, snapshot: Mapping[str, ScanRecord]) -> RegistryDiff:
        """Bring the registry in line with a deduplicated snapshot.

        Entries missing from *snapshot* are dropped, matching entries are
        updated in place (same object, new attribute values) and new ssids
        are appended in snapshot order.

        Args:
            snapshot: Mapping of ssid to the chosen ScanRecord, as returned
                by :func:`mados_wlan.dedup.deduplicate`.

        Returns:
            The RegistryDiff that was applied.
        """
        for ssid, record in snapshot.items():
            if ssid != record.ssid:
                raise ValueError(f'snapshot key {ssid!r} does not match record {record.ssid!r}')

        diff = self.compute_diff(snapshot)

        # Build the complete next state before publishing it
        entries: Dict[str, AccessPoint] = {
            ssid: ap for ssid, ap in self._entries.items() if ssid in snapshot
        }
        changed = False
        for ssid in diff.updated:
            changed |= entries[ssid].update_from(snapshot[ssid])
        for ssid in diff.added:
            entries[ssid] = AccessPoint.from_record(snapshot[ssid])
        self._entries = entries

        if diff.removed or diff.added or changed:
            log.debug('registry: -%d ~%d +%d', len(diff.removed),
                      len(diff.updated), len(diff.added))
            for listener in list(self._listeners):
                listener(self, diff)
        return diff

    def clear(self) -> RegistryDiff:
        """Drop every entry, as if an empty scan had been reconciled."""
        return self.reconcile({})
