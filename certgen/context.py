import os
import ssl
import tempfile

from cryptography import x509
from cryptography.hazmat.primitives.serialization import load_pem_private_key

from .errors import ConfigurationError
from .output import generate_to_memory
from .params import CertParams

__all__ = ['get_context']

def _load(cert_pem, key_pem):
    # pyOpenSSL takes cryptography objects directly
    return load_pem_private_key(key_pem, password=None), x509.load_pem_x509_certificate(cert_pem)

def _pyopenssl_context(cert_pem, key_pem):
    from OpenSSL import SSL

    key, cert = _load(cert_pem, key_pem)

    context = SSL.Context(SSL.TLS_SERVER_METHOD)
    context.set_min_proto_version(SSL.TLS1_2_VERSION)
    context.use_certificate(cert)
    context.use_privatekey(key)
    context.check_privatekey()
    return context

def _ssl_context(cert_pem, key_pem):
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.minimum_version = ssl.TLSVersion.TLSv1_2

    # load_cert_chain only takes paths
    with tempfile.TemporaryDirectory() as tmp:
        filename = os.path.join(tmp, 'tls.pem')
        with open(os.open(filename, os.O_CREAT | os.O_WRONLY, 0o600), 'wb') as f:
            f.write(key_pem)
            f.write(cert_pem)
        context.load_cert_chain(filename)

    return context

def get_context(params=None, type_=None):
    """Generate an ephemeral self-signed pair and wrap it for a TLS server.

    `type_` is 'pem' for the raw `(cert_pem, key_pem)` tuple, 'pyopenssl'
    for an `OpenSSL.SSL.Context`, or None for an `ssl.SSLContext`.
    """
    if type_ not in (None, 'pem', 'pyopenssl'):
        raise ConfigurationError(f'Unsupported context type `{type_}`!')

    if params is None:
        params = CertParams.default()

    cert_pem, key_pem = generate_to_memory(params)

    if type_ == 'pem':
        return cert_pem, key_pem
    elif type_ == 'pyopenssl':
        return _pyopenssl_context(cert_pem, key_pem)
    else:
        return _ssl_context(cert_pem, key_pem)
