#!/usr/bin/env python3

import sys
import logging
import argparse

from .errors import CertGenError
from .output import generate_to_file
from .params import CertParams
from .util import RSA

log = logging.getLogger(__name__)

def build_parser():
    ap = argparse.ArgumentParser(prog='certgen', description='Generate a self-signed TLS certificate and key.')
    ap.add_argument('--host', default='', help='Comma-separated hostnames and IPs to generate a certificate for')
    ap.add_argument('--start-date', default='', help='Creation date formatted as Jan 1 15:04:05 2011')
    ap.add_argument('--duration', default='8760h', help='Duration that certificate is valid for')
    ap.add_argument('--ca', action='store_true', help='whether this cert should be its own Certificate Authority')
    ap.add_argument('--rsa-bits', type=int, default=2048, help='Size of RSA key to generate. Ignored if --ecdsa-curve is set')
    ap.add_argument('--ecdsa-curve', default='', help='ECDSA curve to use to generate a key. Valid values are P224, P256, P384, P521')
    ap.add_argument('--certfile', default='cert.pem', help='Filename for the Certificate File')
    ap.add_argument('--pemfile', default='key.pem', help='Filename for the Key File')
    ap.add_argument('-v', '--verbose', action='store_true', help='Log debug output')
    return ap

def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(message)s',
    )

    if len(args.host) == 0:
        print('Missing required --host parameter', file=sys.stderr)
        return 1

    try:
        params = CertParams.from_strings(
            args.host,
            start_date=args.start_date,
            duration=args.duration,
            is_ca=args.ca,
            rsa_bits=args.rsa_bits,
            ecdsa_curve=args.ecdsa_curve,
        )
    except CertGenError as e:
        print(e, file=sys.stderr)
        return 1

    if args.ecdsa_curve and isinstance(params.key_algorithm, RSA):
        log.debug('unknown ECDSA curve %r, using %r', args.ecdsa_curve, params.key_algorithm)
    log.debug('generating with %r', params)

    try:
        generate_to_file(params, args.certfile, args.pemfile)
    except (CertGenError, OSError) as e:
        print(f"Couldn't generate certs: {e}", file=sys.stderr)
        return 1

    return 0

if __name__ == '__main__':
    sys.exit(main())
