"""Track identifier scheme."""


def normalize_rel_path(rel_path: str) -> str:
    """Forward slashes only, no leading './' or '/' segments."""
    parts = [p for p in rel_path.replace("\\", "/").split("/") if p not in ("", ".")]
    return "/".join(parts)


def make_track_id(category: str, rel_path: str) -> str:
    """Pure function - stable id for a file within a category.

    The same logical file yields the same id whatever separator style the
    host used when enumerating it.
    """
    return f"{category}/{normalize_rel_path(rel_path)}"

