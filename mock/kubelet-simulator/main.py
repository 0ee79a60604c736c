"""Mock kubelet summary API for local testing.

Serves a generated /stats/summary document on port 10255 so the
collector can run with KUBELET_URL=http://localhost:10255 and no cluster.
"""

import json
import math
import random
import time
from datetime import datetime, timedelta, timezone
from http.server import HTTPServer, BaseHTTPRequestHandler

# ---------------------------------------------------------------------------
# Mock node definition
# ---------------------------------------------------------------------------

NODE_NAME = "sim-node-01"
BOOTED_AT = datetime.now(timezone.utc) - timedelta(days=3)

SYSTEM_CONTAINERS = ["kubelet", "runtime", "pods"]

PODS = [
    {
        "name": "web-7d4b9c",
        "namespace": "default",
        "containers": ["nginx", "sidecar"],
        "volumes": ["config", "kube-api-access"],
        "cpu_base": 120,
        "mem_base": 180,
    },
    {
        "name": "db-0",
        "namespace": "data",
        "containers": ["postgres"],
        "volumes": ["pgdata"],
        "cpu_base": 300,
        "mem_base": 900,
    },
    {
        "name": "coredns-5d78c",
        "namespace": "kube-system",
        "containers": ["coredns"],
        "volumes": [],
        "cpu_base": 15,
        "mem_base": 40,
    },
]

MIB = 1024**2
GIB = 1024**3

# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------


def _wave(base: float, amplitude: float, period_minutes: float = 60.0) -> float:
    """Return a realistic time-varying value using sine wave + noise."""
    t = time.time()
    wave = math.sin(2 * math.pi * t / (period_minutes * 60))
    noise = random.uniform(-amplitude * 0.2, amplitude * 0.2)
    return max(0.0, base + amplitude * wave + noise)


def _ts(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%SZ")


# ---------------------------------------------------------------------------
# Summary generation
# ---------------------------------------------------------------------------


def _cpu(now: str, millicores: float) -> dict:
    return {"time": now, "usageNanoCores": int(millicores * 1_000_000)}


def _memory(now: str, mib: float, limit_mib: float | None = None) -> dict:
    used = int(mib * MIB)
    stats = {
        "time": now,
        "usageBytes": used + 20 * MIB,
        "workingSetBytes": used,
        "rssBytes": int(used * 0.8),
        "pageFaults": random.randint(1000, 100_000),
        "majorPageFaults": random.randint(0, 50),
    }
    if limit_mib is not None:
        stats["availableBytes"] = int(limit_mib * MIB) - used
    return stats


def _fs(now: str, capacity: int, used_ratio: float) -> dict:
    used = int(capacity * used_ratio)
    inodes = capacity // (16 * 1024)
    inodes_used = int(inodes * used_ratio * 0.5)
    return {
        "time": now,
        "availableBytes": capacity - used,
        "capacityBytes": capacity,
        "usedBytes": used,
        "inodesFree": inodes - inodes_used,
        "inodes": inodes,
        "inodesUsed": inodes_used,
    }


def _network(now: str, names: list[str]) -> dict:
    interfaces = [
        {
            "name": name,
            "rxBytes": int(_wave(5e8, 2e8, 30)),
            "rxErrors": random.randint(0, 3),
            "txBytes": int(_wave(2e8, 1e8, 30)),
            "txErrors": 0,
        }
        for name in names
    ]
    return {"time": now, **interfaces[0], "interfaces": interfaces}


def generate_summary() -> dict:
    """Generate one kubelet summary document for the mock node."""
    now_dt = datetime.now(timezone.utc)
    now = _ts(now_dt)
    pods = []
    node_cpu = 0.0
    node_mem = 0.0

    for spec in PODS:
        containers = []
        pod_cpu = 0.0
        pod_mem = 0.0
        for name in spec["containers"]:
            cpu = _wave(spec["cpu_base"] / len(spec["containers"]), 20, 45)
            mem = _wave(spec["mem_base"] / len(spec["containers"]), 10, 90)
            pod_cpu += cpu
            pod_mem += mem
            containers.append(
                {
                    "name": name,
                    "startTime": _ts(now_dt - timedelta(hours=5)),
                    "cpu": _cpu(now, cpu),
                    "memory": _memory(now, mem),
                    "rootfs": _fs(now, 20 * GIB, 0.01),
                    "logs": _fs(now, 20 * GIB, 0.002),
                }
            )
        node_cpu += pod_cpu
        node_mem += pod_mem
        pods.append(
            {
                "podRef": {
                    "name": spec["name"],
                    "namespace": spec["namespace"],
                    "uid": f"{spec['namespace']}-{spec['name']}-uid",
                },
                "startTime": _ts(now_dt - timedelta(hours=6)),
                "containers": containers,
                "cpu": _cpu(now, pod_cpu),
                "memory": _memory(now, pod_mem),
                "network": _network(now, ["eth0"]),
                "volume": [
                    {"name": volume, **_fs(now, 1 * GIB, 0.1)}
                    for volume in spec["volumes"]
                ],
                "ephemeral-storage": _fs(now, 20 * GIB, 0.012),
            }
        )

    return {
        "node": {
            "nodeName": NODE_NAME,
            "startTime": _ts(BOOTED_AT),
            "systemContainers": [
                {
                    "name": name,
                    "startTime": _ts(BOOTED_AT),
                    "cpu": _cpu(now, _wave(50, 10, 30)),
                    "memory": _memory(now, _wave(100, 20, 60)),
                }
                for name in SYSTEM_CONTAINERS
            ],
            "cpu": _cpu(now, node_cpu + 150),
            "memory": _memory(now, node_mem + 800, limit_mib=8192),
            "network": _network(now, ["eth0", "cni0"]),
            "fs": _fs(now, 100 * GIB, 0.35),
            "runtime": {"imageFs": _fs(now, 100 * GIB, 0.2)},
            "rlimit": {"time": now, "maxpid": 4_194_304, "curproc": random.randint(300, 500)},
        },
        "pods": pods,
    }


# ---------------------------------------------------------------------------
# HTTP Handler
# ---------------------------------------------------------------------------


class _QuietHandler(BaseHTTPRequestHandler):
    """HTTP handler that suppresses per-request log messages."""

    def log_message(self, format, *args):  # noqa: A002
        """Suppress default request logging."""
        pass

    def _reply(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        if self.path == "/stats/summary":
            body = json.dumps(generate_summary()).encode("utf-8")
            self._reply(200, body, "application/json")
        elif self.path == "/healthz":
            self._reply(200, b"ok", "text/plain")
        else:
            self._reply(404, b"Not Found", "text/plain")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

PORT = 10255
BIND = "0.0.0.0"

if __name__ == "__main__":
    print(f"Mock kubelet summary API starting on {BIND}:{PORT}", flush=True)
    print(f"  /stats/summary  - summary of node {NODE_NAME} with {len(PODS)} pods", flush=True)
    print(f"  /healthz        - Health check endpoint", flush=True)

    server = HTTPServer((BIND, PORT), _QuietHandler)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nShutting down.", flush=True)
        server.server_close()
