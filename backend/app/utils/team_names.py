from typing import Optional


def normalize_team_name(name: Optional[str]) -> str:
    """Canonical lookup key for a team name: trimmed and lower-cased."""
    if name is None:
        return ""
    return name.strip().lower()
