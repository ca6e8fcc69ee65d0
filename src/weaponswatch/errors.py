"""Exception types shared across WeaponsWatch modules."""

from __future__ import annotations


class MonitorConfigError(ValueError):
    """Invalid monitor configuration.

    Raised synchronously when:
    - The monitored path is empty or whitespace
    - The poll interval is zero or negative
    """

    pass
