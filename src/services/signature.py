"""Webhook signature verification.

Facebook signs every callback with the app secret and sends the result in
the ``X-Hub-Signature`` header as ``sha1=<hex digest>``. The digest must be
computed over the raw body bytes, before any JSON parsing.
"""

import hashlib
import hmac

import logfire


class SignatureVerificationError(Exception):
    """Signature header present but does not match the body."""

    pass


def compute_signature(body: bytes, app_secret: str) -> str:
    """Return the ``sha1=<hex>`` signature Facebook would send for body."""
    digest = hmac.new(app_secret.encode("utf-8"), body, hashlib.sha1).hexdigest()
    return f"sha1={digest}"


def verify_request_signature(
    body: bytes,
    signature: str | None,
    app_secret: str,
) -> bool:
    """Check that a webhook body was signed with our app secret.

    A missing header is only logged, so unsigned test traffic still gets
    through. Production deployments should treat that as a failure too.

    Args:
        body: Raw request body bytes
        signature: Value of the X-Hub-Signature header, if any
        app_secret: Facebook App secret

    Returns:
        True if the signature was checked and matched, False if absent

    Raises:
        SignatureVerificationError: If the header is malformed or mismatched
    """
    if not signature:
        logfire.warn("Couldn't validate the signature: header missing")
        return False

    method, sep, received_hash = signature.partition("=")
    if not sep or method.lower() != "sha1" or not received_hash:
        logfire.error("Malformed request signature", signature_method=method)
        raise SignatureVerificationError("Malformed request signature")

    expected_hash = compute_signature(body, app_secret).partition("=")[2]
    # Non-ASCII header text must compare unequal, not raise
    received = received_hash.lower().encode("utf-8", "replace")
    if not hmac.compare_digest(received, expected_hash.encode("ascii")):
        logfire.error("Request signature mismatch", body_length=len(body))
        raise SignatureVerificationError("Couldn't validate the request signature")

    return True
