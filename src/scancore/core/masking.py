"""Masking helpers for displaying sensitive values.

For logs and reports only. Fingerprints use an irreversible digest of the
secret, never these masked forms.
"""

MASK = "****"


def mask_secret(secret: str) -> str:
    """Mask a secret, keeping the first and last 3 characters.

    Secrets of 8 characters or fewer are fully replaced by ``****``.
    """
    if len(secret) <= 8:
        return MASK
    return secret[:3] + MASK + secret[-3:]


def mask_api_key(key: str) -> str:
    """Mask an API key, keeping the first and last 4 characters.

    Keys of 10 characters or fewer are fully replaced by ``****``.
    """
    if len(key) <= 10:
        return MASK
    return f"{key[:4]}...{key[-4:]}"
