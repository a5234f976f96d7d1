from __future__ import annotations


class UpstreamError(RuntimeError):
    """An external lookup failed or returned something unusable."""
