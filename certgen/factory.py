"""Self-signed certificate pair generation.

Each call to `generate` draws a fresh key pair and serial number, builds a
template from the parameters, self-signs it and returns the key with the
DER encoded certificate. Nothing is cached or kept between calls.
"""
import secrets
import warnings

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm

from .errors import KeyGenerationError, SerializationError
from .template import KeyPair, CertTemplate
from .util import PEM

__all__ = ['generate', 'encode_pem', 'random_serial_number', 'SERIAL_NUMBER_LIMIT']

SERIAL_NUMBER_LIMIT = 1 << 128

def random_serial_number():
    # X.509 serial numbers must be positive, so 0 is never drawn
    try:
        return secrets.randbelow(SERIAL_NUMBER_LIMIT - 1) + 1
    except (OSError, NotImplementedError) as e:
        raise KeyGenerationError(f'failed to generate serial number: {e}') from e

def generate_key(algorithm):
    try:
        return KeyPair.generate(algorithm)
    except (ValueError, TypeError, OSError, UnsupportedAlgorithm) as e:
        raise KeyGenerationError(f'failed to generate private key: {e}') from e

def generate(params):
    """Generate a key pair and a self-signed certificate for `params`.

    Returns `(key_pair, certificate_der)`. Raises `KeyGenerationError` if
    the key or serial number can't be drawn, `SerializationError` if the
    certificate can't be built or signed.
    """
    key_pair = generate_key(params.key_algorithm)
    serial_number = random_serial_number()

    if params.valid_for.total_seconds() <= 0:
        warnings.warn(f'Validity period `{params.valid_for}` is not positive, the certificate will never be valid!')

    try:
        template = CertTemplate.from_params(params, key_pair, serial_number)
        der = template.sign_der()
    except (ValueError, TypeError, OverflowError, UnsupportedAlgorithm) as e:
        raise SerializationError(f'failed to create certificate: {e}') from e

    return key_pair, der

def encode_pem(key_pair, certificate_der):
    """Return `(certificate_pem, key_pem)` for a generated pair."""
    # unknown key types fail here, before anything is encoded
    block_type = key_pair.pem_block_type

    try:
        cert_pem = x509.load_der_x509_certificate(certificate_der).public_bytes(PEM)
        key_pem = key_pair.private_bytes(PEM)
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise SerializationError(f'failed to encode {block_type}: {e}') from e

    return cert_pem, key_pem
