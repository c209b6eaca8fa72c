"""Utility functions for API endpoints."""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import Request


def normalize_page(page: int) -> int:
    """Clamp page numbers below 1 to the first page."""
    return page if page > 0 else 1


def create_pagination_links(
    request: Request,
    current_page: int,
    has_next: bool,
    extra_params: Optional[Dict[str, Any]] = None,
) -> Dict[str, Optional[str]]:
    """
    Create pagination links for search responses.

    The total number of matches is never computed, so ``next`` is offered
    whenever the current page came back full.

    Args:
        request: FastAPI request object
        current_page: Current page number
        has_next: Whether a following page may hold results
        extra_params: Additional query parameters to include

    Returns:
        Dictionary containing pagination links
    """
    if extra_params is None:
        extra_params = {}

    # Remove None values from extra_params
    extra_params = {k: v for k, v in extra_params.items() if v is not None}

    # Base URL without query parameters
    base_url = str(request.url).split("?")[0]

    def create_link(page: int) -> str:
        """Create a pagination link for a specific page."""
        params = dict(extra_params)
        params["page"] = page
        return f"{base_url}?{urlencode(params)}"

    return {
        "self": create_link(current_page),
        "next": create_link(current_page + 1) if has_next else None,
        "prev": create_link(current_page - 1) if current_page > 1 else None,
    }
