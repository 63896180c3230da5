import logging
import re
import uuid

from django.conf import settings

from .exceptions import AllocationFailure

logger = logging.getLogger(__name__)

CERTIFICATE_ID_PATTERN = re.compile(r"^CERT-[A-Z0-9]{4}-[A-Z0-9]{4}$")


def generate_certificate_id():
    """Return a random candidate id in the form CERT-XXXX-XXXX."""
    token = uuid.uuid4().hex.upper()
    return f"CERT-{token[:4]}-{token[4:8]}"


def allocate_certificate_id(exists, max_attempts=None):
    """
    Return a certificate id for which `exists(candidate)` is False.

    `exists` is the persistence lookup, normally
    Certificate.objects.filter(certificate_id=...).exists(). Errors raised by it
    and running out of attempts are both reported as AllocationFailure.
    """
    if max_attempts is None:
        max_attempts = getattr(settings, "CERTIFICATE_ID_MAX_ATTEMPTS", 100)

    for attempt in range(1, max_attempts + 1):
        candidate = generate_certificate_id()
        try:
            taken = exists(candidate)
        except Exception as e:
            raise AllocationFailure(f"Existence check failed for {candidate}: {e}") from e

        if not taken:
            return candidate
        logger.warning("Certificate id collision on %s (attempt %d)", candidate, attempt)

    raise AllocationFailure(f"No unused certificate id after {max_attempts} attempts")


def build_verification_url(certificate_id):
    """URL encoded in the verification QR code."""
    base_url = settings.CERTIFICATE_VERIFICATION_BASE_URL.rstrip("/")
    return f"{base_url}/{certificate_id}"
