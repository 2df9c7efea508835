"""Compose the human-facing short URL for a code."""

from urllib.parse import quote


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Join base URL, optional path prefix and short code.

    Slashes around the prefix are normalized, so ``/s``, ``s/`` and ``/s/``
    all give ``{base}/s/{code}``.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    segments = [base_url.rstrip("/")]
    segments.extend(part for part in path_prefix.split("/") if part)
    segments.append(quote(short_code, safe=""))
    return "/".join(segments)


def short_url_for_config(config, short_code: str) -> str:
    """Short URL using the configured ``base_url`` and ``path_prefix``."""
    return build_short_url(
        short_code=short_code,
        base_url=config.base_url,
        path_prefix=config.path_prefix or "",
    )
