"""Razorpay payment signature.

The gateway signs ``"{order_id}|{payment_id}"`` with the merchant's key
secret using HMAC-SHA256 and hands the lowercase hex digest to the checkout
callback. A callback is authentic iff recomputing the digest with our copy
of the secret yields exactly the same string.
"""

import hashlib
import hmac


def signature_payload(order_id: str | None, payment_id: str | None) -> str:
    return f"{order_id or ''}|{payment_id or ''}"


def compute_payment_signature(secret: str, order_id: str | None, payment_id: str | None) -> str:
    """Return the hex HMAC-SHA256 of ``order_id|payment_id`` under ``secret``."""
    return hmac.new(
        secret.encode("utf-8"),
        signature_payload(order_id, payment_id).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def verify_payment_signature(
    secret: str,
    order_id: str | None,
    payment_id: str | None,
    signature: str | None,
) -> bool:
    """Case-sensitive, full-string comparison against the expected signature."""
    if not signature:
        return False
    expected = compute_payment_signature(secret, order_id, payment_id)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
