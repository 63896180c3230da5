import pytest

from certificates.schemas import CertificateRequest


@pytest.fixture(autouse=True)
def certificate_settings(settings, tmp_path):
    """Keep artifacts in a temp dir, capture mail and deliver it inline."""
    settings.CERTIFICATE_STORAGE_ROOT = str(tmp_path / "certificates")
    settings.CERTIFICATE_TEMPLATE_ROOT = str(tmp_path / "templates")
    settings.CERTIFICATE_VERIFICATION_BASE_URL = "https://certs.example.com/verify"
    settings.CERTIFICATE_EMAIL_ASYNC = False
    settings.CERTIFICATE_BATCH_REPORT_EMAIL = ""
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.DEFAULT_FROM_EMAIL = "certificates@example.com"
    return settings


@pytest.fixture
def certificate_request():
    def make_request(**overrides):
        data = {
            "recipient_name": "Alice Smith",
            "recipient_email": "alice@example.com",
            "course_name": "Intro to X",
            "issuer_name": "Example Academy",
            "send_email": False,
        }
        data.update(overrides)
        return CertificateRequest(**data)

    return make_request
