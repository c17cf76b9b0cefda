"""KeyBastion - credential vault backend.

Stores encrypted credentials, gates their reveal behind a security PIN and
issues RS256 access tokens with rotating refresh tokens.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
