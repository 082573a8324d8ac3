__all__ = [
    'CertGenError',
    'KeyGenerationError', 'SerializationError', 'ConfigurationError',
]

class CertGenError(Exception):
    pass

class KeyGenerationError(CertGenError):
    """Key material or serial number could not be generated."""

class SerializationError(CertGenError):
    """The certificate could not be signed, or the key could not be encoded."""

class ConfigurationError(CertGenError, ValueError):
    """A parameter string (date, duration, curve name, ...) was not understood."""
