import logging
import os
import uuid

from django.db import transaction

from certificates.exceptions import TemplateNotFound
from certificates.storage import template_storage

from .models import CertificateTemplate

logger = logging.getLogger(__name__)

BACKGROUND_TYPES = {
    "pdf": "PDF",
    "svg": "SVG",
    "png": "PNG",
    "jpg": "JPEG",
    "jpeg": "JPEG",
}


def get_all_templates():
    return CertificateTemplate.objects.all()


def get_template(template_id):
    try:
        return CertificateTemplate.objects.get(pk=template_id)
    except CertificateTemplate.DoesNotExist:
        raise TemplateNotFound(template_id)


def get_default_template():
    return CertificateTemplate.objects.filter(is_default=True).first()


def create_template(name, description=None, is_default=False):
    template = CertificateTemplate(name=name, description=description, is_default=is_default)
    template.save()
    logger.info("Template created: %s (default=%s)", template.pk, is_default)
    return template


def upload_template_background(template_id, uploaded_file):
    """
    Store a background asset for a template.

    The file type is taken from the extension; unsupported types raise
    ValueError.
    """
    template = get_template(template_id)

    extension = os.path.splitext(uploaded_file.name)[1].lstrip(".").lower()
    try:
        background_type = BACKGROUND_TYPES[extension]
    except KeyError:
        raise ValueError(f"Unsupported file type: {extension}")

    filename = f"{uuid.uuid4()}.{extension}"
    background_path = template_storage().save(filename, uploaded_file)

    template.background_path = background_path
    template.background_type = background_type
    template.save()

    logger.info("Template background uploaded: %s", background_path)
    return template


def update_template_configuration(template_id, field_configuration):
    template = get_template(template_id)
    template.field_configuration = field_configuration
    template.save()
    return template


def delete_template(template_id):
    """
    Delete a template and its background file. Certificates issued with it
    keep their record with the template reference cleared.
    """
    template = get_template(template_id)

    if template.background_path:
        try:
            storage = template_storage()
            if storage.exists(template.background_path):
                storage.delete(template.background_path)
        except OSError:
            logger.exception("Failed to delete template background file")

    template.delete()
    logger.info("Template deleted: %s", template_id)


def set_default_template(template_id):
    with transaction.atomic():
        template = get_template(template_id)
        template.is_default = True
        template.save()
    logger.info("Template %s set as default", template_id)
    return template


def initialize_default_templates():
    """Create the stock template when there are none."""
    if CertificateTemplate.objects.exists():
        return None

    template = create_template(
        name="Classic Certificate",
        description="Professional classic certificate design",
        is_default=True,
    )
    logger.info("Default template initialized")
    return template
