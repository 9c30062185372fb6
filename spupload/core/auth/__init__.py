"""Authentication: credential providers and the form digest gate."""
from .providers import (
    CredentialProvider,
    StaticHeadersProvider,
    AddinOnlyProvider,
    DefaultCredentialProvider
)
from .digest import (
    AuthContext,
    DigestGate,
    extract_form_digest,
    DIGEST_HEADER,
    FORMS_AUTH_HEADER
)

__all__ = [
    # Providers
    'CredentialProvider',
    'StaticHeadersProvider',
    'AddinOnlyProvider',
    'DefaultCredentialProvider',

    # Digest
    'AuthContext',
    'DigestGate',
    'extract_form_digest',
    'DIGEST_HEADER',
    'FORMS_AUTH_HEADER',
]
