"""Tests for charon.utils."""

import base64

import pytest

from charon.utils import basic_auth_header, is_success


class TestBasicAuthHeader:
    def test_encodes_credentials(self) -> None:
        header = basic_auth_header("alice", "s3cret")

        assert header.startswith("Basic ")
        assert base64.b64decode(header.removeprefix("Basic ")) == b"alice:s3cret"

    def test_known_value(self) -> None:
        assert basic_auth_header("user", "pass") == "Basic dXNlcjpwYXNz"


class TestIsSuccess:
    @pytest.mark.parametrize("status", [200, 201, 202])
    def test_success(self, status: int) -> None:
        assert is_success(status)

    @pytest.mark.parametrize("status", [204, 301, 400, 500])
    def test_not_success(self, status: int) -> None:
        assert not is_success(status)
