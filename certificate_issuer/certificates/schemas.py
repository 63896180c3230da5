from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass
class CertificateRequest:
    """
    Normalized input for issuing one certificate.

    Built from a single form submission or from one row of an imported
    CSV/Excel file.
    """
    recipient_name: Optional[str] = None
    recipient_email: Optional[str] = None
    course_name: Optional[str] = None
    achievement_title: Optional[str] = None
    completion_date: Optional[date] = field(default_factory=date.today)
    issuer_name: Optional[str] = None
    instructor_name: Optional[str] = None
    template_id: Optional[int] = None
    send_email: bool = False
