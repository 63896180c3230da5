import uuid

import pytest

from certificates.exceptions import AllocationFailure
from certificates.identifiers import (
    CERTIFICATE_ID_PATTERN,
    allocate_certificate_id,
    build_verification_url,
    generate_certificate_id,
)


def test_generated_id_is_taken_from_uuid_hex(mocker):
    mocker.patch(
        "certificates.identifiers.uuid.uuid4",
        return_value=uuid.UUID("1a2b3c4d-0000-0000-0000-000000000000"),
    )

    assert generate_certificate_id() == "CERT-1A2B-3C4D"


def test_allocated_ids_match_format():
    for _ in range(50):
        assert CERTIFICATE_ID_PATTERN.match(allocate_certificate_id(lambda candidate: False))


def test_allocation_skips_ids_that_already_exist(mocker):
    mocker.patch(
        "certificates.identifiers.generate_certificate_id",
        side_effect=["CERT-AAAA-0001", "CERT-AAAA-0002", "CERT-AAAA-0003"],
    )
    taken = {"CERT-AAAA-0001", "CERT-AAAA-0002"}
    checked = []

    def exists(candidate):
        checked.append(candidate)
        return candidate in taken

    assert allocate_certificate_id(exists) == "CERT-AAAA-0003"
    assert checked == ["CERT-AAAA-0001", "CERT-AAAA-0002", "CERT-AAAA-0003"]


def test_existence_check_error_is_an_allocation_failure():
    def broken(candidate):
        raise RuntimeError("database unavailable")

    with pytest.raises(AllocationFailure, match="database unavailable"):
        allocate_certificate_id(broken)


def test_allocation_gives_up_after_max_attempts():
    calls = []

    def always_taken(candidate):
        calls.append(candidate)
        return True

    with pytest.raises(AllocationFailure):
        allocate_certificate_id(always_taken, max_attempts=5)
    assert len(calls) == 5


def test_default_attempt_limit_comes_from_settings(settings):
    settings.CERTIFICATE_ID_MAX_ATTEMPTS = 2
    calls = []

    with pytest.raises(AllocationFailure):
        allocate_certificate_id(lambda candidate: calls.append(candidate) or True)
    assert len(calls) == 2


def test_verification_url_joins_base_and_id(settings):
    settings.CERTIFICATE_VERIFICATION_BASE_URL = "https://certs.example.com/verify/"

    assert build_verification_url("CERT-1234-ABCD") == "https://certs.example.com/verify/CERT-1234-ABCD"
