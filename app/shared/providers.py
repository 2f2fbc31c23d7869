"""
Default time and identifier providers.

Use cases take these as constructor arguments so tests can pin them.
"""

import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> str:
    return str(uuid.uuid4())
