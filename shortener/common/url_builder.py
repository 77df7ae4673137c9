"""Short URL construction."""


def build_short_url(short_code: str, base_url: str) -> str:
    """Join a base origin and a short code.

    An empty base yields a root-relative path, which is still a working link
    for clients talking to the same host.
    """
    if not base_url:
        return f"/{short_code}"
    return f"{base_url.rstrip('/')}/{short_code}"
