"""Path helpers for the storage layer."""

import re


def sanitize_path_component(component: str) -> str:
    """
    Make a string safe to use as a single file name.

    Replaces anything other than letters, digits, dot, dash and underscore
    with an underscore, and refuses names that are only dots.

    Args:
        component: Candidate file name

    Returns:
        Filesystem-safe name

    Raises:
        ValueError: If nothing usable remains

    Example:
        >>> sanitize_path_component("wxpaint_1700000000000_ab12cd.png")
        'wxpaint_1700000000000_ab12cd.png'
        >>> sanitize_path_component("../etc/passwd")
        '.._etc_passwd'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9._-]", "_", component)
    if not cleaned.strip("."):
        raise ValueError(f"Unusable file name: {component!r}")
    return cleaned
