"""Most-recent image selection.

Images are compared by their RFC3339 creation timestamps. Selection is a single
pass over the candidates: a candidate replaces the running best only when it is
strictly newer, so the first image seen wins on equal timestamps.
"""
import re
from datetime import datetime
from typing import Sequence

from omega_deploy.domain.core.exceptions import EmptyInputError, TimestampParseError
from omega_deploy.domain.image.value_objects import ImageDescriptor

_RFC3339_PATTERN = re.compile(
    r'\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})'
)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware datetime.

    Args:
        value: Timestamp such as ``2016-06-01T00:00:00.000Z``

    Returns:
        Timezone-aware datetime

    Raises:
        TimestampParseError: If the value is not a valid RFC3339 timestamp
    """
    if not isinstance(value, str) or not _RFC3339_PATTERN.fullmatch(value):
        raise TimestampParseError(value)
    normalized = value.upper()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        # Pattern matched but the fields are out of range, e.g. month 13
        raise TimestampParseError(value)


def select_most_recent(images: Sequence[ImageDescriptor]) -> ImageDescriptor:
    """
    Return the most recently created image.

    Every creation date is parsed, so a single malformed timestamp fails the
    whole selection.

    Args:
        images: Candidate images, in catalog order

    Returns:
        The newest image; the earliest one in the sequence on ties

    Raises:
        EmptyInputError: If there are no candidates
        TimestampParseError: If any creation date is not RFC3339
    """
    if not images:
        raise EmptyInputError()

    most_recent = None
    most_recent_time = None
    for candidate in images:
        candidate_time = _creation_time(candidate)
        if most_recent is None or candidate_time > most_recent_time:
            most_recent = candidate
            most_recent_time = candidate_time
    return most_recent


def _creation_time(image: ImageDescriptor) -> datetime:
    try:
        return parse_rfc3339(image.creation_date)
    except TimestampParseError:
        raise TimestampParseError(image.creation_date, image.image_id) from None
