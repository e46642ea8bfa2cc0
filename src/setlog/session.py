"""Session state - the remembered exercise and collapsed groups.

Settings are treated as values: every setter returns an updated copy and the
caller decides when to persist it.
"""

from dataclasses import replace

from .config import Settings


def get_remembered_exercise(settings: Settings) -> str:
    return settings.remembered_exercise


def set_remembered_exercise(settings: Settings, exercise_name: str | None) -> Settings:
    return replace(settings, remembered_exercise=exercise_name or "")


def get_collapsed_groups(settings: Settings) -> set[str]:
    return set(settings.collapsed_groups)


def set_collapsed_groups(settings: Settings, groups) -> Settings:
    return replace(settings, collapsed_groups={g.lower() for g in groups})


def is_collapsed(settings: Settings, group_key: str) -> bool:
    return group_key.lower() in settings.collapsed_groups


def toggle_collapsed(settings: Settings, group_key: str) -> Settings:
    """Flip a group between collapsed and expanded."""
    groups = get_collapsed_groups(settings)
    key = group_key.lower()
    if key in groups:
        groups.discard(key)
    else:
        groups.add(key)
    return replace(settings, collapsed_groups=groups)
