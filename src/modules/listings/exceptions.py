"""Listing domain exceptions."""

from __future__ import annotations


class ListingNotFound(Exception):
    """The listing does not exist, was deleted or is not visible to the caller."""


class ListingNotAllowed(Exception):
    """The caller may not create or modify this listing."""
