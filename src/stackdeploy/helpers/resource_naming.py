"""Naming helpers for temporary resources."""
import secrets
import time


def time_ordered_uuid() -> str:
    """
    Return a UUID-formatted string whose leading bits are the current time.

    Values generated later sort after values generated earlier, and the
    random tail keeps concurrent runs from colliding.
    """
    raw = f"{time.time_ns():016x}{secrets.token_hex(8)}"
    return f"{raw[:8]}-{raw[8:12]}-{raw[12:16]}-{raw[16:20]}-{raw[20:]}"


def get_display_name(prefix: str = "packer") -> str:
    """Get a temporary display name for a new virtual machine."""
    return f"{prefix}-{time_ordered_uuid()}"
