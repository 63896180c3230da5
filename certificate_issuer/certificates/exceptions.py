class CertificateError(Exception):
    """Base class for certificate issuance errors."""


class MalformedInput(CertificateError):
    """Raised when an uploaded tabular file is empty or cannot be parsed."""


class TemplateNotFound(CertificateError):
    """Raised when a template is addressed by an id that does not exist."""

    def __init__(self, template_id):
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class RenderingFailure(CertificateError):
    """Raised when the certificate document cannot be built or written."""


class DispatchFailure(CertificateError):
    """Raised when a certificate email cannot be sent."""


class AllocationFailure(CertificateError):
    """Raised when no unused certificate id could be allocated."""
