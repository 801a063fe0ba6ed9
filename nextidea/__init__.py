"""
Top-level package for the Next Business Idea service.

This package contains the curated idea catalog and its loader, the
catalog filter that turns a user profile into candidate ideas, a
deterministic scoring engine, an in-memory favorites store and a
small FastAPI application tying them together.  There are no
side-effects on import; the catalog is loaded lazily on first use.
"""
from __future__ import annotations

__version__ = "0.1.0"
