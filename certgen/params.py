from datetime import datetime, timedelta, timezone

from .util import KeyAlgorithm, RSA, isiterable, parse_duration, parse_start_date

__all__ = ['CertParams', 'DEFAULT_VALIDITY']

DEFAULT_VALIDITY = timedelta(days=365)

class CertParams:
    """Everything needed to generate one self-signed certificate pair.

    `hosts` may be a comma-separated string or a sequence of strings. Entries
    are used as given: nothing is trimmed, deduplicated or validated.
    """
    def __init__(self, hosts, valid_from, valid_for=DEFAULT_VALIDITY, is_ca=False, key_algorithm=None):
        self.hosts = hosts
        self.valid_from = valid_from
        self.valid_for = valid_for
        self.is_ca = is_ca
        self.key_algorithm = key_algorithm if key_algorithm is not None else RSA(2048)

    @classmethod
    def default(cls):
        """RSA 2048 for `localhost`, valid from now for one year."""
        return cls(
            hosts='localhost',
            valid_from=datetime.now(timezone.utc),
            valid_for=DEFAULT_VALIDITY,
            is_ca=False,
            key_algorithm=RSA(2048),
        )

    @classmethod
    def from_strings(cls, hosts, start_date='', duration='8760h', is_ca=False, rsa_bits=2048, ecdsa_curve=''):
        """Build parameters from command-line style strings.

        An empty or unknown `ecdsa_curve` selects RSA with `rsa_bits`.
        """
        return cls(
            hosts=hosts,
            valid_from=parse_start_date(start_date),
            valid_for=parse_duration(duration),
            is_ca=is_ca,
            key_algorithm=KeyAlgorithm.select(ecdsa_curve, rsa_bits),
        )

    @property
    def host_list(self):
        if isiterable(self.hosts):
            return list(self.hosts)
        return self.hosts.split(',')

    @property
    def not_before(self):
        # naive timestamps are UTC
        if self.valid_from.tzinfo is None:
            return self.valid_from.replace(tzinfo=timezone.utc)
        return self.valid_from

    @property
    def not_after(self):
        return self.not_before + self.valid_for

    def __repr__(self):
        return (
            f'CertParams(hosts={self.hosts!r}, valid_from={self.valid_from!r}, '
            f'valid_for={self.valid_for!r}, is_ca={self.is_ca!r}, key_algorithm={self.key_algorithm!r})'
        )
