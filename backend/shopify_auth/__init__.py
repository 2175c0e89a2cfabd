"""
Shopify store authorization backend.

Manages per-store OAuth2 credentials: the authorization-code exchange
against each store's own token endpoint, encryption of access tokens at
rest, and the install/read/update/uninstall lifecycle of stored tokens.
"""

__version__ = "0.1.0"
