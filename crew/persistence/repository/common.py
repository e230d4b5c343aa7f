"""Helpers shared by the PostgreSQL repositories."""


def like_pattern(search: str) -> str:
    """Build an ILIKE substring pattern, escaping wildcards in user input."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
