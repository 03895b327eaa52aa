import pytest

from linkrelay.core.relay import payloads
from linkrelay.core.relay.errors import CredentialsUnavailableError
from linkrelay.core.relay.types import Credentials

CREDS = Credentials(token="tok", user_id="u1", version=3)


def test_variant_keys_are_fixed():
    assert payloads.VARIANT_KEYS == ("direct", "gdrive", "second", "pix", "nc")


def test_build_payload_merges_flags_last():
    body = payloads.build_payload(CREDS, "movie.mp4", {"gdrive": True, "second": True})
    assert body == {
        "v": 3,
        "u": "u1",
        "file": "movie.mp4",
        "token": "tok",
        "gdrive": True,
        "second": True,
    }
    assert list(body)[:4] == ["v", "u", "file", "token"]


def test_flags_may_overwrite_keys():
    body = payloads.build_payload(CREDS, "movie.mp4", {"file": "other.mp4"})
    assert body["file"] == "other.mp4"


def test_build_payloads_one_per_variant():
    bodies = payloads.build_payloads(CREDS, "f.zip")
    assert list(bodies) == list(payloads.VARIANT_KEYS)
    assert bodies["nc"]["pix"] is True and bodies["nc"]["nc"] is True
    assert bodies["direct"]["direct"] is True
    assert all(b["file"] == "f.zip" for b in bodies.values())


def test_build_payload_requires_credentials():
    with pytest.raises(CredentialsUnavailableError):
        payloads.build_payload(None, "movie.mp4", {"direct": True})
