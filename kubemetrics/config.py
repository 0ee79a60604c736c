"""Kubelet metrics collector settings"""

import os


def env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes", "on")


NODE_NAME: str = os.environ.get("NODE_NAME", "")
METRICS_TAG: str = os.environ.get("METRICS_TAG", "kubernetes.metrics.*")
SCRAPE_INTERVAL: int = int(os.environ.get("SCRAPE_INTERVAL", "15"))

# Endpoint
KUBELET_PORT: int = int(os.environ.get("KUBELET_PORT", "10255"))
KUBELET_URL: str | None = os.environ.get("KUBELET_URL")
KUBERNETES_URL: str | None = os.environ.get("KUBERNETES_URL")
REQUEST_TIMEOUT: float = float(os.environ.get("REQUEST_TIMEOUT", "10"))
VERIFY_ON_START: bool = env_bool("VERIFY_ON_START", "true")

# Single kubeconfig path; its current context overrides the endpoint and
# credential settings below
KUBECONFIG: str | None = os.environ.get("KUBECONFIG") or None

# Credentials; service account files are used when the explicit ones are unset
SECRET_DIR: str = os.environ.get(
    "SECRET_DIR", "/var/run/secrets/kubernetes.io/serviceaccount"
)
CA_FILE: str | None = os.environ.get("CA_FILE")
CLIENT_CERT: str | None = os.environ.get("CLIENT_CERT")
CLIENT_KEY: str | None = os.environ.get("CLIENT_KEY")
BEARER_TOKEN_FILE: str | None = os.environ.get("BEARER_TOKEN_FILE")
INSECURE_SSL: bool = env_bool("INSECURE_SSL")

OUTPUT: str = os.environ.get("OUTPUT", "exposition")
LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
METRICS_PORT: int = int(os.environ.get("METRICS_PORT", "9091"))


def provider_config() -> dict:
    """Settings handed to ``KubeletProvider``."""
    return {
        "tag": METRICS_TAG,
        "kubelet_port": KUBELET_PORT,
        "kubelet_url": KUBELET_URL,
        "kubernetes_url": KUBERNETES_URL,
        "kubeconfig": KUBECONFIG,
        "timeout": REQUEST_TIMEOUT,
        "secret_dir": SECRET_DIR,
        "ca_file": CA_FILE,
        "client_cert": CLIENT_CERT,
        "client_key": CLIENT_KEY,
        "bearer_token_file": BEARER_TOKEN_FILE,
        "insecure_ssl": INSECURE_SSL,
    }
