import re
import abc
import enum
import ipaddress

from datetime import datetime, timedelta, timezone
from collections.abc import Iterable

# the safe stuff
from cryptography import x509
from cryptography.x509.oid import NameOID, ExtendedKeyUsageOID

# land mines, dragons, and dinosaurs with laser guns
from cryptography.hazmat.primitives.asymmetric import rsa, ec
from cryptography.hazmat.primitives.hashes import SHA256, SHA384, SHA512
from cryptography.hazmat.primitives.serialization import Encoding
from cryptography.hazmat.primitives.serialization import NoEncryption
from cryptography.hazmat.primitives.serialization import PrivateFormat

from .errors import ConfigurationError

PEM = Encoding.PEM
DER = Encoding.DER
# PKCS#1 for RSA keys, SEC1 for EC keys
PKCS1 = PrivateFormat.TraditionalOpenSSL

# e.g. "Jan 2 15:04:05 2006"
START_DATE_FORMAT = '%b %d %H:%M:%S %Y'

__all__ = [
    'NameAttributes', 'SANs',
    'ECDSACurve', 'KeyAlgorithm', 'RSA', 'ECDSA',
    'RSA2048', 'RSA3072', 'RSA4096',
    'P224', 'P256', 'P384', 'P521',
    'parse_duration', 'parse_start_date',

#    'PEM', 'DER', 'PKCS1', 'NoEncryption',
]

def isiterable(x):
    return not isinstance(x, (str, bytes)) and isinstance(x, Iterable)

def mapable(fn):
    def wrapped(first, *args, **kwarg):
        if len(args) > 0:
            return wrapped((first,) + args, **kwarg)
        elif isiterable(first):
            return map(lambda x: fn(x, **kwarg), first)
        else:
            return fn(first, **kwarg)

    return wrapped

def mapped(fn, *args):
    mapper = mapable(fn)
    return list(mapper(*args))

@mapable
def x509_ip(ip):
    addr = ipaddress.ip_address(ip)
    # a zone can't be carried in an IP SAN
    if getattr(addr, 'scope_id', None):
        raise ValueError(f'Scoped address `{ip}` is not an IP literal')
    return x509.IPAddress(addr)

x509_dns = mapable(x509.DNSName)

@mapable
def x509_host(host):
    # anything that isn't an IP literal is taken as a DNS name, unchecked
    try:
        return x509_ip(host)
    except ValueError:
        return x509_dns(host)

class NameAttributes:
    def __init__(self):
        self.attribs = {}

    def __len__(self):
        return len(self.attribs)

    def __getattr__(self, key):
        uc = key.upper()
        if hasattr(NameOID, uc):
            return self.attribs.get(uc, None)
        raise AttributeError(key)

    def __setattr__(self, key, value):
        uc = key.upper()
        if hasattr(NameOID, uc):
            oid = getattr(NameOID, uc)
            self.attribs[uc] = x509.NameAttribute(oid, value)
        else:
            object.__setattr__(self, key, value)

    def output(self):
        return x509.Name(list(self.attribs.values()))

class SANs:
    def __init__(self, hosts=()):
        self.names = mapped(x509_host, hosts) if isiterable(hosts) else [x509_host(hosts)]

    def __len__(self):
        return len(self.names)

    def output(self):
        return x509.SubjectAlternativeName(self.names)


class ECDSACurve(enum.Enum):
    P224 = (ec.SECP224R1, SHA256)
    P256 = (ec.SECP256R1, SHA256)
    P384 = (ec.SECP384R1, SHA384)
    P521 = (ec.SECP521R1, SHA512)

    def __str__(self):
        return self.name

    @property
    def ec_curve(self):
        return self.value[0]()

    @property
    def hash_algo(self):
        return self.value[1]

    @classmethod
    def from_string(cls, name):
        try:
            return cls[name]
        except KeyError:
            raise ConfigurationError(f'Invalid or unsupported ECDSA curve `{name}`!') from None

class KeyAlgorithm(metaclass=abc.ABCMeta):
    # discriminant, matched on by KeyPair
    kind = None

    @abc.abstractmethod
    def __call__(self): return

    @property
    @abc.abstractmethod
    def hash_algo(self): return

    @staticmethod
    def select(curve_name, rsa_bits=2048):
        """ECDSA on `curve_name` if it names a supported curve, otherwise RSA.

        An empty or unknown curve name is not an error: it means "use RSA".
        """
        try:
            return ECDSA(ECDSACurve.from_string(curve_name))
        except ConfigurationError:
            return RSA(rsa_bits)

class RSA(KeyAlgorithm):
    kind = 'rsa'
    hash_algo = SHA256

    def __init__(self, bits=2048, public_exponent=65537):
        self.bits = bits
        self.public_exponent = public_exponent

    def __call__(self):
        return rsa.generate_private_key(self.public_exponent, self.bits)

    def __eq__(self, other):
        return isinstance(other, RSA) and (self.bits, self.public_exponent) == (other.bits, other.public_exponent)

    def __hash__(self):
        return hash((self.kind, self.bits, self.public_exponent))

    def __repr__(self):
        return f'RSA({self.bits})'

class ECDSA(KeyAlgorithm):
    kind = 'ecdsa'

    def __init__(self, curve=ECDSACurve.P256):
        if not isinstance(curve, ECDSACurve):
            curve = ECDSACurve.from_string(curve)
        self.curve = curve

    def __call__(self):
        return ec.generate_private_key(self.curve.ec_curve)

    @property
    def hash_algo(self):
        return self.curve.hash_algo

    def __eq__(self, other):
        return isinstance(other, ECDSA) and self.curve == other.curve

    def __hash__(self):
        return hash((self.kind, self.curve))

    def __repr__(self):
        return f'ECDSA({self.curve})'

### RSA
key_sizes = (2048, 3072, 4096)
RSA2048, RSA3072, RSA4096 = mapped(RSA, key_sizes)

### ECDSA
P224, P256, P384, P521 = mapped(ECDSA, list(ECDSACurve))

eku_oids = []
for eku in dir(ExtendedKeyUsageOID):
    if eku[0] != '_':
        k, v = eku.lower(), getattr(ExtendedKeyUsageOID, eku)
        eku_oids.append((k, v))

_duration_re =re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)')

# in microseconds
_duration_units = {
    'ns': 0.001, 'us': 1, 'µs': 1, 'μs': 1, 'ms': 1000,
    's': 10**6, 'm': 60 * 10**6, 'h': 3600 * 10**6,
}

def parse_duration(s):
    """Parse a duration string such as `8760h`, `1h30m` or `-90s`."""
    text, sign = s, 1
    if text[:1] in ('-', '+'):
        sign = -1 if text[0] == '-' else 1
        text = text[1:]

    if text == '0':
        return timedelta(0)
    if not text:
        raise ConfigurationError(f'Invalid duration `{s}`!')

    pos, total = 0, 0.0
    while pos < len(text):
        m = _duration_re.match(text, pos)
        if m is None:
            raise ConfigurationError(f'Invalid duration `{s}`!')
        total += float(m.group(1)) * _duration_units[m.group(2)]
        pos = m.end()

    try:
        return timedelta(microseconds=sign * total)
    except OverflowError:
        raise ConfigurationError(f'Invalid duration `{s}`: out of range!') from None

def parse_start_date(s):
    """Parse a start date like `Jan 1 15:04:05 2011` (UTC). Empty means now."""
    if not s:
        return datetime.now(timezone.utc)

    try:
        return datetime.strptime(s, START_DATE_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError as e:
        raise ConfigurationError(f'Failed to parse creation date: {e}') from e
