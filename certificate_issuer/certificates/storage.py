from django.conf import settings
from django.core.files.storage import FileSystemStorage

QR_DIR = "qr"


def certificate_storage():
    """Storage for rendered documents and verification codes."""
    return FileSystemStorage(location=settings.CERTIFICATE_STORAGE_ROOT)


def template_storage():
    """Storage for template background assets."""
    return FileSystemStorage(location=settings.CERTIFICATE_TEMPLATE_ROOT)


def replace_file(storage, name, content):
    """
    Save content under exactly `name`, overwriting what was there.

    FileSystemStorage.save() picks a new name when the target exists, which
    would make artifact paths depend on history instead of the certificate id.
    """
    if storage.exists(name):
        storage.delete(name)
    return storage.save(name, content)
