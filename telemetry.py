"""Lightweight runtime telemetry for Videoclub (webhooks + Prometheus counters)."""
from __future__ import annotations

import hashlib
import hmac
import json
import logging
import os
import socket
import threading
import time
from collections import defaultdict
from typing import Dict, Iterable, Tuple

import requests

logger = logging.getLogger("videoclub.telemetry")

HELP_TEXT = {
    "videoclub_cache_reads_total": "Count of featured content cache reads by result.",
    "videoclub_refresh_total": "Count of featured content refreshes by result.",
    "videoclub_category_fetch_total": "Count of category fetches by result.",
    "videoclub_category_failures_total": "Count of failed categories during refreshes.",
    "videoclub_enrichment_lookups_total": "Count of TMDb enrichment lookups by result.",
    "videoclub_mock_fallback_total": "Count of requests served from static mock content.",
    "videoclub_webhooks_total": "Count of webhook delivery attempts/results.",
    "videoclub_webhook_events_total": "Count of webhook events emitted.",
}


class Metrics:
    """In-memory counter registry with Prometheus text rendering."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counters: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], float] = defaultdict(float)

    def inc(self, name: str, amount: float = 1.0, **labels):
        key = (name, tuple(sorted((k, str(v)) for k, v in labels.items())))
        with self._lock:
            self._counters[key] += amount

    def snapshot(self):
        with self._lock:
            return dict(self._counters)

    def value(self, name: str, **labels) -> float:
        key = (name, tuple(sorted((k, str(v)) for k, v in labels.items())))
        with self._lock:
            return self._counters.get(key, 0.0)

    def render(self, dynamic_lines: Iterable[str] | None = None) -> str:
        dynamic_lines = list(dynamic_lines or [])
        snapshot = sorted(self.snapshot().items())
        lines = []
        seen_names = set()
        for (name, _), _value in snapshot:
            if name not in seen_names:
                lines.append(f"# HELP {name} {HELP_TEXT.get(name, name)}")
                lines.append(f"# TYPE {name} counter")
                seen_names.add(name)
        for (name, labels), value in snapshot:
            if labels:
                label_str = ",".join(f'{k}="{_escape(v)}"' for k, v in labels)
                lines.append(f"{name}{{{label_str}}} {value}")
            else:
                lines.append(f"{name} {value}")
        lines.extend(dynamic_lines)
        return "\n".join(lines) + "\n"


def _escape(value: str) -> str:
    return str(value).replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


metrics = Metrics()


def _webhook_urls():
    raw = os.getenv("VIDEOCLUB_WEBHOOK_URLS", "").strip()
    if not raw:
        return []
    # comma- or newline-separated
    urls = []
    for part in raw.replace("\n", ",").split(","):
        url = part.strip()
        if url:
            urls.append(url)
    return urls


def emit_event(event_type: str, payload=None):
    """Emit a webhook event asynchronously (best effort)."""
    payload = dict(payload or {})
    payload.setdefault("ts", time.time())
    payload.setdefault("host", socket.gethostname())
    payload["event"] = event_type
    metrics.inc("videoclub_webhook_events_total", event=event_type)

    urls = _webhook_urls()
    if not urls:
        metrics.inc("videoclub_webhooks_total", result="skipped", event=event_type)
        return

    t = threading.Thread(target=_post_event, args=(event_type, payload, urls), daemon=True)
    t.start()


def sign_body(body: bytes, secret: str) -> str:
    if not secret:
        return ""
    return "sha256=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def _post_event(event_type: str, payload: dict, urls, requests_module=requests):
    timeout = float(os.getenv("VIDEOCLUB_WEBHOOK_TIMEOUT_SEC", "5"))
    body = json.dumps(payload, sort_keys=True).encode("utf-8")
    headers = {"Content-Type": "application/json", "User-Agent": "Videoclub/telemetry"}
    sig = sign_body(body, os.getenv("VIDEOCLUB_WEBHOOK_SECRET", ""))
    if sig:
        headers["X-Videoclub-Signature"] = sig
    for url in urls:
        try:
            resp = requests_module.post(url, data=body, headers=headers, timeout=timeout)
            code_bucket = f"{resp.status_code//100}xx"
            metrics.inc("videoclub_webhooks_total", result="sent", event=event_type, code=code_bucket)
            if resp.status_code >= 400:
                logger.warning("Webhook %s returned HTTP %s", url, resp.status_code)
        except Exception as exc:  # pragma: no cover - network failure path
            metrics.inc("videoclub_webhooks_total", result="error", event=event_type)
            logger.warning("Webhook %s failed: %s", url, exc)
