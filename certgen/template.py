from datetime import timezone

from cryptography import x509

from .errors import SerializationError
from .util import NameAttributes, SANs, eku_oids, PEM, DER, PKCS1, NoEncryption

__all__ = ['KeyPair', 'CertTemplate', 'ORGANIZATION']

ORGANIZATION = 'Acme Co'

class KeyPair:
    """A private key tagged with the algorithm that produced it."""
    def __init__(self, algorithm, private_key):
        self.algorithm = algorithm
        self.private_key = private_key

    @classmethod
    def generate(cls, algorithm):
        return cls(algorithm, algorithm())

    @property
    def kind(self):
        return self.algorithm.kind

    def public_key(self):
        match self.kind:
            case 'rsa' | 'ecdsa':
                return self.private_key.public_key()
            case _:
                raise SerializationError(f'Unsupported key type `{self.kind}`!')

    @property
    def pem_block_type(self):
        match self.kind:
            case 'rsa':
                return 'RSA PRIVATE KEY'
            case 'ecdsa':
                return 'EC PRIVATE KEY'
            case _:
                raise SerializationError(f'Unsupported key type `{self.kind}`!')

    def private_bytes(self, encoding=PEM):
        # TraditionalOpenSSL is PKCS#1 for RSA and SEC1 for EC keys
        return self.private_key.private_bytes(encoding, PKCS1, NoEncryption())

    def __repr__(self):
        return f'KeyPair({self.algorithm!r})'

def _naive_utc(dt):
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt

class CertTemplate:
    def __init__(self, key_pair, serial_number, not_before, not_after, hosts=(), ca=False):
        self.key_pair = key_pair
        self.serial_number = serial_number
        self.not_before = not_before
        self.not_after = not_after

        self.subject = NameAttributes()
        self.subject.organization_name = ORGANIZATION

        self.sans = SANs(hosts)

        self.ca = ca

        usages = (
            'digital_signature', 'content_commitment', 'key_encipherment',
            'data_encipherment', 'key_agreement', 'key_cert_sign',
            'crl_sign', 'encipher_only', 'decipher_only'
        )

        for usage in usages: setattr(self, usage, False)
        for k, _ in eku_oids: setattr(self, k, False)

        self.digital_signature = True
        self.key_encipherment = True
        self.key_cert_sign = ca
        self.server_auth = True

    @classmethod
    def from_params(cls, params, key_pair, serial_number):
        return cls(
            key_pair, serial_number,
            not_before=params.not_before,
            not_after=params.not_after,
            hosts=params.host_list,
            ca=params.is_ca,
        )

    def _extended_key_usage(self):
        ekus = []
        for k, v in eku_oids:
            if getattr(self, k):
                ekus.append(v)

        return x509.ExtendedKeyUsage(ekus) if len(ekus) else None

    def _key_usage(self):
        return x509.KeyUsage(
            self.digital_signature, self.content_commitment, self.key_encipherment,
            self.data_encipherment, self.key_agreement, self.key_cert_sign,
            self.crl_sign, self.encipher_only, self.decipher_only
        )

    def _basic_constraints(self):
        return x509.BasicConstraints(ca=self.ca, path_length=None)

    def build(self):
        pub = self.key_pair.public_key()
        subject = self.subject.output()

        # The validity setters refuse an inverted window, which is accepted
        # here, so the times go straight into the constructor (naive UTC).
        crt = x509.CertificateBuilder(
            not_valid_before=_naive_utc(self.not_before),
            not_valid_after=_naive_utc(self.not_after),
        )
        crt = crt.public_key(pub)
        crt = crt.subject_name(subject)
        crt = crt.issuer_name(subject)
        crt = crt.serial_number(self.serial_number)

        def add_extension(k, v):
            nonlocal crt
            if k is not None:
                crt = crt.add_extension(k, v)

        add_extension(x509.SubjectKeyIdentifier.from_public_key(pub), False)
        add_extension(x509.AuthorityKeyIdentifier.from_issuer_public_key(pub), False)
        add_extension(self._key_usage(), True)
        add_extension(self._extended_key_usage(), False)
        add_extension(self._basic_constraints(), True)

        if len(self.sans):
            crt = crt.add_extension(self.sans.output(), not bool(len(self.subject)))

        return crt

    def sign(self):
        """Self-sign: issuer is the subject, signed with the template's own key."""
        crt = self.build()
        hash_algo = self.key_pair.algorithm.hash_algo
        return crt.sign(self.key_pair.private_key, hash_algo())

    def sign_der(self):
        return self.sign().public_bytes(DER)
