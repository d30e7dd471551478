"""HTTP API: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flask import Blueprint, Flask

log = logging.getLogger(__name__)


def join_prefix(*segments: str) -> str:
    """Join URL segments into one absolute prefix, skipping empty ones.

    ``join_prefix("/api/", "v1", "")`` gives ``"/api/v1"``.
    """
    parts = [s.strip("/") for s in segments if s and s.strip("/")]
    return "/" + "/".join(parts)


def mount_version(
    app: Flask, version: str, registry: Iterable[tuple[Blueprint, str]]
) -> list[str]:
    """Register one API version's blueprints and return their URL prefixes.

    :param version: Path segment of the version, e.g. ``"v1"``.
    :param registry: ``(blueprint, prefix relative to the version)`` pairs.
    """
    base = app.config.get("API_BASE_PREFIX", "/api")
    mounted: list[str] = []
    for bp, relative in registry:
        prefix = join_prefix(base, version, relative)
        app.register_blueprint(bp, url_prefix=prefix)
        mounted.append(prefix)
    return mounted


def init_app(app: Flask) -> None:
    from gatekeeper.api import v1

    mounted = mount_version(app, v1.API_VERSION, v1.REGISTRY)
    log.debug("api.mounted version=%s prefixes=%s", v1.API_VERSION, ",".join(mounted))


__all__ = ["init_app", "join_prefix", "mount_version"]
