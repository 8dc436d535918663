"""
Unit tests for Ok/Err capture of remote calls.
"""

import pytest

from app.core.exceptions import IdentityProviderError
from app.core.result import Err, Ok, attempt


async def succeed():
    return 42


async def fail_with_message():
    raise IdentityProviderError("Email já cadastrado")


async def fail_bare():
    raise RuntimeError()


@pytest.mark.unit
class TestAttempt:

    async def test_ok(self):
        result = await attempt("op", succeed())

        assert isinstance(result, Ok)
        assert result.ok is True
        assert result.value == 42

    async def test_err_uses_exception_message(self):
        result = await attempt("create_auth_user", fail_with_message(), email="a@x.com")

        assert isinstance(result, Err)
        assert result.ok is False
        assert result.operation == "create_auth_user"
        assert result.message == "Email já cadastrado"
        assert isinstance(result.exception, IdentityProviderError)

    async def test_err_falls_back_to_exception_type(self):
        result = await attempt("op", fail_bare())

        assert result.message == "RuntimeError"
