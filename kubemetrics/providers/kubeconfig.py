"""Connection settings from a kubeconfig file

Only the current context is read. Static credentials are supported
(token, tokenFile, client certificate and key as files or inline data);
exec and auth-provider plugins are not.
"""

import base64
import binascii
import os

import yaml

from kubemetrics.errors import ConfigError


def _named(document: dict, section: str, name: str, path: str) -> dict:
    """Body of entry ``name`` in a kubeconfig list such as ``clusters``."""
    key = section[:-1]
    for entry in document.get(section) or ():
        if entry.get("name") == name:
            return entry.get(key) or {}
    raise ConfigError(f"kubeconfig {path}: {key} {name!r} not found")


def _decode(value: str | None, field: str, path: str) -> str | None:
    if value is None:
        return None
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ConfigError(f"kubeconfig {path}: invalid {field}: {exc}") from exc


def load_kubeconfig(path: str) -> dict:
    """Provider settings (API URL, TLS and auth material) of the current context.

    Relative file references resolve against the kubeconfig's directory.
    """
    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except OSError as exc:
        raise ConfigError(f"Cannot read kubeconfig {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid kubeconfig {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"Invalid kubeconfig {path}: not a mapping")

    current = document.get("current-context")
    if not current:
        raise ConfigError(f"kubeconfig {path} has no current-context")
    context = _named(document, "contexts", current, path)
    cluster = _named(document, "clusters", context.get("cluster"), path)
    user = {}
    if context.get("user"):
        user = _named(document, "users", context["user"], path)

    server = cluster.get("server")
    if not server:
        raise ConfigError(f"kubeconfig {path}: cluster {context.get('cluster')!r} has no server")

    base = os.path.dirname(os.path.abspath(path))

    def local(value: str | None) -> str | None:
        if value is None:
            return None
        return os.path.join(base, os.path.expanduser(value))

    return {
        "kubernetes_url": server,
        "ca_file": local(cluster.get("certificate-authority")),
        "ca_data": _decode(
            cluster.get("certificate-authority-data"), "certificate-authority-data", path
        ),
        "insecure_ssl": bool(cluster.get("insecure-skip-tls-verify")),
        "client_cert": local(user.get("client-certificate")),
        "client_key": local(user.get("client-key")),
        "client_cert_data": _decode(
            user.get("client-certificate-data"), "client-certificate-data", path
        ),
        "client_key_data": _decode(user.get("client-key-data"), "client-key-data", path),
        "token": user.get("token"),
        "bearer_token_file": local(user.get("tokenFile")),
    }
