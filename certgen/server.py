"""HTTPS server bootstrap with a certificate generated on the fly.

The certificate is self-signed, so clients have to skip verification (or
trust the generated certificate explicitly) to talk to the server.
"""
import logging

from http.server import ThreadingHTTPServer

from .context import get_context

__all__ = ['make_server', 'listen_and_serve_tls']

log = logging.getLogger(__name__)

def make_server(address, handler_class, params=None):
    """Bind a threaded HTTP server on `address` and wrap its socket in TLS.

    If `params` is None, the default parameters (RSA 2048, valid from now
    for 365 days) are used.
    """
    context = get_context(params)

    server = ThreadingHTTPServer(address, handler_class)
    try:
        server.socket = context.wrap_socket(server.socket, server_side=True)
    except OSError:
        server.server_close()
        raise

    return server

def listen_and_serve_tls(address, handler_class, params=None):
    with make_server(address, handler_class, params) as server:
        host, port = server.server_address[:2]
        log.info('serving https on %s:%s', host, port)
        server.serve_forever()
