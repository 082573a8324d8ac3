from datetime import datetime, timedelta, timezone
from ipaddress import IPv4Address, IPv6Address

import pytest

from cryptography import x509

from certgen.errors import ConfigurationError
from certgen.util import (
    SANs, NameAttributes, ECDSACurve, KeyAlgorithm, RSA, ECDSA,
    parse_duration, parse_start_date,
)

@pytest.mark.parametrize('text, expected', [
    ('8760h', timedelta(days=365)),
    ('1h30m', timedelta(minutes=90)),
    ('-90s', timedelta(seconds=-90)),
    ('+2m', timedelta(minutes=2)),
    ('1.5h', timedelta(minutes=90)),
    ('500ms', timedelta(milliseconds=500)),
    ('250us', timedelta(microseconds=250)),
    ('0', timedelta(0)),
    ('0s', timedelta(0)),
])
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected

@pytest.mark.parametrize('text', ['', '-', '10', 'h', '1d', '1h 30m', 'forever'])
def test_parse_duration_invalid(text):
    with pytest.raises(ConfigurationError):
        parse_duration(text)

def test_parse_start_date():
    assert parse_start_date('Jan 1 15:04:05 2011') == datetime(2011, 1, 1, 15, 4, 5, tzinfo=timezone.utc)
    assert parse_start_date('Dec 31 23:59:59 2030') == datetime(2030, 12, 31, 23, 59, 59, tzinfo=timezone.utc)

def test_parse_start_date_empty_is_now():
    before = datetime.now(timezone.utc)
    parsed = parse_start_date('')
    assert before <= parsed <= datetime.now(timezone.utc)

@pytest.mark.parametrize('text', ['2011-01-01', 'Jan 1 2011', 'yesterday'])
def test_parse_start_date_invalid(text):
    with pytest.raises(ConfigurationError, match='Failed to parse creation date'):
        parse_start_date(text)

def test_curve_from_string():
    for curve in ECDSACurve:
        assert ECDSACurve.from_string(str(curve)) is curve

@pytest.mark.parametrize('name', ['', 'p256', 'P-256', 'secp256r1', 'P192'])
def test_curve_from_string_invalid(name):
    with pytest.raises(ConfigurationError):
        ECDSACurve.from_string(name)

def test_select_key_algorithm():
    assert KeyAlgorithm.select('P521') == ECDSA(ECDSACurve.P521)
    assert KeyAlgorithm.select('P224', 4096) == ECDSA('P224')
    assert KeyAlgorithm.select('', 3072) == RSA(3072)
    assert KeyAlgorithm.select('bogus', 4096) == RSA(4096)
    assert KeyAlgorithm.select('bogus').kind == 'rsa'

def test_sans_order_and_classification():
    sans = SANs(['a.example', '10.0.0.1', 'b.example', 'fe80::1'])
    assert len(sans) == 4

    ext = sans.output()
    assert ext.get_values_for_type(x509.DNSName) == ['a.example', 'b.example']
    assert ext.get_values_for_type(x509.IPAddress) == [IPv4Address('10.0.0.1'), IPv6Address('fe80::1')]
    assert [n.value for n in ext] == ['a.example', IPv4Address('10.0.0.1'), 'b.example', IPv6Address('fe80::1')]

def test_sans_networks_are_dns_names():
    # only literal addresses are IP SANs
    ext = SANs('10.0.0.0/8').output()
    assert ext.get_values_for_type(x509.DNSName) == ['10.0.0.0/8']
    assert ext.get_values_for_type(x509.IPAddress) == []

def test_sans_scoped_ipv6_is_dns_name():
    ext = SANs(['fe80::1%eth0', 'fe80::1']).output()
    assert ext.get_values_for_type(x509.DNSName) == ['fe80::1%eth0']
    assert ext.get_values_for_type(x509.IPAddress) == [IPv6Address('fe80::1')]

def test_name_attributes():
    name = NameAttributes()
    assert len(name) == 0
    name.organization_name = 'Acme Co'
    assert len(name) == 1
    assert name.organization_name.value == 'Acme Co'
    assert name.common_name is None
    assert name.output().rfc4514_string() == 'O=Acme Co'

@pytest.mark.parametrize('text', ['99999999999999h', '-99999999999999h', '9' * 400 + 'h'])
def test_parse_duration_out_of_range(text):
    with pytest.raises(ConfigurationError, match='out of range'):
        parse_duration(text)
