"""Tests for cert_renewer.resolver."""

from unittest.mock import MagicMock, patch

import dns.exception
import dns.name
import dns.resolver
import pytest

from cert_renewer.resolver import PublicResolver, ResolverLookupError


def _rdata(*strings):
    return MagicMock(strings=tuple(strings))


def test_query_txt_joins_multi_string_records():
    mock_resolver = MagicMock()
    mock_resolver.resolve.return_value = [_rdata(b"abc", b"def"), _rdata(b"xyz")]
    resolver = PublicResolver(_resolver=mock_resolver)

    assert resolver.query_txt("_acme-challenge.example.com", 5) == ["abcdef", "xyz"]
    mock_resolver.resolve.assert_called_once_with(
        dns.name.from_text("_acme-challenge.example.com"), "TXT", lifetime=5, search=False
    )


@pytest.mark.parametrize(
    "exc",
    [dns.resolver.NXDOMAIN(), dns.resolver.NoAnswer(), dns.exception.Timeout()],
)
def test_lookup_failures_raise_resolver_lookup_error(exc):
    mock_resolver = MagicMock()
    mock_resolver.resolve.side_effect = exc
    resolver = PublicResolver(_resolver=mock_resolver)

    with pytest.raises(ResolverLookupError):
        resolver.query_txt("_acme-challenge.example.com", 5)


@patch("cert_renewer.resolver.dns.resolver.Resolver")
def test_explicit_nameservers_replace_system_config(mock_resolver_cls):
    PublicResolver(nameservers=("8.8.8.8", "1.1.1.1"))

    mock_resolver_cls.assert_called_once_with(configure=False)
    assert mock_resolver_cls.return_value.nameservers == ["8.8.8.8", "1.1.1.1"]


@patch("cert_renewer.resolver.dns.resolver.Resolver")
def test_default_uses_system_resolver(mock_resolver_cls):
    PublicResolver()

    mock_resolver_cls.assert_called_once_with(configure=True)
