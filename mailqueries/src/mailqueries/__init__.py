"""
Module: mailqueries.__init__

What:
  Aggregate package exports for mailqueries, which turns saved mail searches
  (bookmarks) and folder shortcuts (maildirs) into counters with changes
  since a baseline.

Why:
  Keeping the namespace explicit lets the CLI and embedding applications
  import the supported subpackages without depending on internal modules.

Interfaces:
  - config: Configuration schema, loader and definition providers.
  - core: Aggregation, baseline, cache and refresh coordination.
  - imap: IMAP-backed search execution service.
  - utils: Structured logging and identifiers.
"""

__all__ = [
    "config",
    "core",
    "imap",
    "utils",
]

__version__ = "0.3.0"
