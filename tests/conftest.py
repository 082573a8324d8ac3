import ssl

from datetime import datetime, timedelta, timezone

import pytest

from certgen.params import CertParams
from certgen.util import P256

@pytest.fixture
def valid_from():
    return datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)

@pytest.fixture
def ec_params(valid_from):
    # P-256 keeps the tests quick where the key algorithm doesn't matter
    return CertParams(
        hosts='localhost,127.0.0.1',
        valid_from=valid_from,
        valid_for=timedelta(days=30),
        key_algorithm=P256,
    )

@pytest.fixture
def load_pair(tmp_path):
    """Load a PEM pair the way a TLS server would; raises if they don't match."""
    def load(cert_pem, key_pem):
        cert_file = tmp_path / 'cert.pem'
        key_file = tmp_path / 'key.pem'
        cert_file.write_bytes(cert_pem)
        key_file.write_bytes(key_pem)

        context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
        context.load_cert_chain(str(cert_file), str(key_file))
        return context

    return load
