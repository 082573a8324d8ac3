import os
import logging

from .factory import generate, encode_pem

__all__ = ['generate_to_memory', 'generate_to_file', 'generate_to_writer']

log = logging.getLogger(__name__)

def generate_to_memory(params):
    """Generate a pair and return `(cert_pem, key_pem)` as bytes."""
    key_pair, der = generate(params)
    return encode_pem(key_pair, der)

def generate_to_file(params, cert_file, key_file):
    """Generate a pair and write it to `cert_file` and `key_file`.

    The key file is created readable by its owner only.
    """
    cert_pem, key_pem = generate_to_memory(params)

    with open(cert_file, 'wb') as f:
        f.write(cert_pem)
    log.info('written %s', cert_file)

    with open(os.open(key_file, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o600), 'wb') as f:
        f.write(key_pem)
    log.info('written %s', key_file)

def generate_to_writer(params, cert_writer, key_writer):
    cert_pem, key_pem = generate_to_memory(params)
    cert_writer.write(cert_pem)
    key_writer.write(key_pem)
