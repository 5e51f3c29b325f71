# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import logging
import sys
import contextvars
import threading
import queue
import time
import requests
import json
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger
from .config import settings

SERVICE_NAME = "heritage-admin"

request_id_var = contextvars.ContextVar("request_id", default=None)

# Key fragments whose string values never reach a log line
SECRETS = ("token", "secret", "password", "apikey", "api_key", "authorization", "cookie", "file_data")

def _is_secret(key: str) -> bool:
    lowered = key.lower()
    return any(s in lowered for s in SECRETS)

class RedactingJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["service_name"] = SERVICE_NAME

        req_id = request_id_var.get()
        if req_id:
            log_record["request_id"] = req_id

        for key, value in list(log_record.items()):
            if isinstance(value, str) and _is_secret(key):
                log_record[key] = "***REDACTED***"

class AxiomHandler(logging.Handler):
    """Batches formatted records and posts them to an Axiom dataset from a daemon thread."""

    batch_size = 50
    flush_interval = 3.0

    def __init__(self):
        super().__init__()
        self.queue = queue.Queue(maxsize=10000)
        self.worker = threading.Thread(target=self._run, name="axiom-shipper", daemon=True)
        self.worker.start()

    def _run(self):
        pending = []
        last_flush = time.monotonic()
        while True:
            try:
                pending.append(self.queue.get(timeout=self.flush_interval))
            except queue.Empty:
                pass

            due = time.monotonic() - last_flush >= self.flush_interval
            if pending and (len(pending) >= self.batch_size or due):
                self._post(pending)
                pending = []
                last_flush = time.monotonic()

    def _post(self, records):
        if not settings.axiom_dataset:
            return
        headers = {"Authorization": f"Bearer {settings.axiom_token}"}
        if settings.axiom_org_id:
            headers["X-Axiom-Org-Id"] = settings.axiom_org_id
        url = f"{settings.axiom_url.rstrip('/')}/v1/datasets/{settings.axiom_dataset}/ingest"
        try:
            requests.post(url, headers=headers, json=records, timeout=5.0)
        except requests.RequestException as e:
            sys.stderr.write(f"axiom shipping failed: {e}\n")

    def emit(self, record):
        try:
            self.queue.put_nowait(json.loads(self.format(record)))
        except queue.Full:
            sys.stderr.write("axiom queue full, dropping log record\n")
        except Exception:
            self.handleError(record)

def setup_logging(level: int = logging.INFO):
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    formatter = RedactingJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.axiom_token:
        shipper = AxiomHandler()
        shipper.setFormatter(formatter)
        root.addHandler(shipper)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)

def log_event(event: str, level: str = "info", **fields):
    """Log one structured event; None-valued fields are left out."""
    extra = {k: v for k, v in fields.items() if v is not None}
    extra["event"] = event
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logging.getLogger(SERVICE_NAME).log(log_level, event, extra=extra)
