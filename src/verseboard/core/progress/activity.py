"""
Activity ranking for the dashboard feed.

Turns raw audio asset records into display-ready ActivityEntry rows and
orders them most recent first. Each fallback used along the way is a named
function so it can be tested on its own:

- derive_reference: storage path -> display label
- resolve_status: check status -> display status
- resolve_timestamp: updated_at -> created_at -> now

A malformed record never aborts the batch; it only falls back.
"""

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from verseboard.core.progress.models import ActivityEntry, ActivityKind
from verseboard.core.store.models import AudioAssetRecord

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 10
AUDIO_REFERENCE_PLACEHOLDER = "Audio File"
DEFAULT_STATUS = "pending"
AUDIO_ID_PREFIX = "audio-"

# Final ".ext" of a file name
_EXTENSION_RE = re.compile(r"\.[^/.]+$")


def derive_reference(remote_path: str | None) -> str:
    """
    Derive a display label from a storage path.

    Takes the last path segment and strips its extension.

    Example:
        >>> derive_reference("uploads/gen/GEN_001.mp3")
        'GEN_001'
        >>> derive_reference(None)
        'Audio File'
        >>> derive_reference("uploads/")
        'Audio File'
    """
    if not remote_path:
        return AUDIO_REFERENCE_PLACEHOLDER

    last_segment = remote_path.rsplit("/", 1)[-1]
    stem = _EXTENSION_RE.sub("", last_segment)
    return stem or AUDIO_REFERENCE_PLACEHOLDER


def resolve_status(check_status: str | None) -> str:
    """Use the check status, or 'pending' if there is none."""
    return check_status or DEFAULT_STATUS


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """
    Parse a stored timestamp into an aware datetime.

    Naive values are taken to be UTC. Unparseable values return None.

    Example:
        >>> parse_timestamp("2024-03-01T10:00:00Z")
        datetime.datetime(2024, 3, 1, 10, 0, tzinfo=datetime.timezone.utc)
        >>> parse_timestamp("not a date") is None
        True
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_timestamp(
    updated_at: datetime | str | None,
    created_at: datetime | str | None,
    now: datetime,
) -> datetime:
    """
    Pick the time an asset last changed.

    Tries the update time, then the creation time, then `now`. A value that
    cannot be parsed counts as absent.

    Args:
        updated_at: Raw last-update time
        created_at: Raw creation time
        now: Fallback when neither can be used

    Returns:
        Aware datetime
    """
    for candidate in (updated_at, created_at):
        parsed = parse_timestamp(candidate)
        if parsed is not None:
            return parsed
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def to_activity_entry(record: AudioAssetRecord, now: datetime) -> ActivityEntry:
    """Transform one raw audio asset record into a feed entry."""
    timestamp = resolve_timestamp(record.updated_at, record.created_at, now)
    if record.updated_at is not None and parse_timestamp(record.updated_at) is None:
        logger.debug("Unparseable updated_at %r on audio asset %s", record.updated_at, record.id)

    return ActivityEntry(
        id=f"{AUDIO_ID_PREFIX}{record.id}",
        kind=ActivityKind.AUDIO,
        reference=derive_reference(record.remote_path),
        status=resolve_status(record.check_status),
        timestamp=timestamp,
    )


def rank(
    raw_assets: Iterable[AudioAssetRecord],
    limit: int = DEFAULT_FEED_LIMIT,
    now: datetime | None = None,
) -> list[ActivityEntry]:
    """
    Rank raw asset records into the activity feed.

    Entries are sorted by timestamp, most recent first. The sort is stable,
    so entries with equal timestamps keep their input order. Truncation to
    `limit` happens after sorting.

    Args:
        raw_assets: Raw audio asset records (already bounded by the caller)
        limit: Maximum feed length
        now: Fallback time for records with no usable timestamp
            (defaults to the current time)

    Returns:
        At most `limit` ActivityEntry rows

    Example:
        >>> feed = rank([AudioAssetRecord(id="1", remote_path="a/GEN_001.mp3")], limit=10)
        >>> feed[0].id, feed[0].reference, feed[0].status
        ('audio-1', 'GEN_001', 'pending')
    """
    if limit <= 0:
        return []

    if now is None:
        now = datetime.now(timezone.utc)

    entries = [to_activity_entry(record, now) for record in raw_assets]
    entries.sort(key=lambda entry: entry.timestamp, reverse=True)
    return entries[:limit]
