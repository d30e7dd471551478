"""WSGI proxy middleware configuration helper."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix


def init_app(app: Flask) -> None:
    """Apply :class:`ProxyFix` when ``USE_PROXYFIX`` is set.

    The rate limiter keys on the client address, so behind a reverse proxy
    ``X-Forwarded-For`` must be trusted. ``PROXYFIX_HOPS`` is the number of
    proxies in front of the app (default 1); trusting more hops than exist
    lets clients spoof their address.
    """
    if not app.config.get("USE_PROXYFIX", True):
        return
    hops = int(app.config.get("PROXYFIX_HOPS", 1))
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=hops, x_proto=hops, x_host=hops, x_prefix=hops)
