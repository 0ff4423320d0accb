"""IMAP execution backend.

What:
  Surface the IMAP-backed query service together with its connection
  parameters.

Why:
  The CLI and embedding applications only need to build an
  :class:`ImapQueryService`; the session and translation helpers stay
  internal.

Interfaces:
  ``ImapConfig``, ``ImapSearchClient``, ``ImapQueryService``.
"""

from .client import ImapConfig, ImapSearchClient
from .service import ImapQueryService

__all__ = ["ImapConfig", "ImapQueryService", "ImapSearchClient"]
