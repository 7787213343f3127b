"""madOS WLAN - Scan output parsing.

The scan source prints one access point per line in terse mode: fields
separated by ``:``, with literal colons inside a value escaped as ``\\:``.
Field order is fixed: active flag, strength, frequency, ssid, bssid,
security.
"""

import logging
from typing import Iterable, List, Optional

from .interfaces import ScanRecord

log = logging.getLogger(__name__)

# Private-use code points, never present in tool output
_COLON_SENTINEL = '\ue000'
_BACKSLASH_SENTINEL = '\ue001'

MIN_FIELDS = 4
ACTIVE_TOKEN = 'yes'

# Field positions
F_ACTIVE, F_STRENGTH, F_FREQUENCY, F_SSID, F_BSSID, F_SECURITY = range(6)


def split_escaped_line(line: str) -> List[str]:
    """Split a terse-mode output line on unescaped colons.

    Literal ``\\:`` sequences are kept as ``:`` inside the field value and
    ``\\\\`` as a single backslash, so a value ending in a backslash does
    not swallow the separator after it.

    Args:
        line: A single line of terse tool output.

    Returns:
        A list of field values (always at least one element).
    """
    protected = line.replace('\\\\', _BACKSLASH_SENTINEL).replace('\\:', _COLON_SENTINEL)
    return [part.replace(_COLON_SENTINEL, ':').replace(_BACKSLASH_SENTINEL, '\\')
            for part in protected.split(':')]


def _parse_int(value: str) -> int:
    """Parse the leading integer token of *value*, 0 if there is none.

    Accepts unit-suffixed values such as ``'2412 MHz'``.
    """
    token = value.strip().split(' ', 1)[0]
    try:
        return int(token)
    except ValueError:
        return 0


def parse_scan_line(line: str) -> Optional[ScanRecord]:
    """Parse one scan line into a ScanRecord.

    Returns:
        The record, or None when the line must be skipped (fewer than
        four fields or an empty ssid).
    """
    fields = split_escaped_line(line.rstrip('\r\n'))
    if len(fields) < MIN_FIELDS:
        return None

    ssid = fields[F_SSID]
    if not ssid:
        return None

    if len(fields) > F_SECURITY + 1:
        # Unescaped BSSID: the octets spilled into extra fields
        bssid = ':'.join(fields[F_BSSID:-1])
        security = fields[-1]
    else:
        bssid = fields[F_BSSID] if len(fields) > F_BSSID else ''
        security = fields[F_SECURITY] if len(fields) > F_SECURITY else ''

    return ScanRecord(
        ssid=ssid,
        active=fields[F_ACTIVE] == ACTIVE_TOKEN,
        strength=max(_parse_int(fields[F_STRENGTH]), 0),
        frequency=_parse_int(fields[F_FREQUENCY]),
        bssid=bssid,
        security=security.strip(),
    )


def parse_scan_lines(lines: Iterable[str]) -> List[ScanRecord]:
    """Parse many scan lines, dropping the ones that must be skipped."""
    records: List[ScanRecord] = []
    skipped = 0
    for line in lines:
        if not line.strip():
            continue
        record = parse_scan_line(line)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    if skipped:
        log.debug('skipped %d malformed or unnamed scan line(s)', skipped)
    return records


def parse_scan_output(output: str) -> List[ScanRecord]:
    """Parse the complete stdout of a scan command."""
    return parse_scan_lines(output.splitlines())


def parse_radio_status(output: str) -> bool:
    """Return True only if the status output is exactly ``enabled``."""
    return output.strip() == 'enabled'
