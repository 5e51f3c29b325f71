# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler

from heritage_admin.config import settings
from heritage_admin.logging_setup import log_event
from heritage_admin.services.translation import translate, supported_languages, to_api_language_code

class TranslationState:
    """Editing state of one form: field -> {lang -> text}."""

    def __init__(self, fields: list[str] | None = None, languages: list[str] | None = None):
        self.languages = languages or supported_languages()
        self.values: dict[str, dict[str, str]] = {}
        self.translating: set[str] = set()
        self._lock = threading.Lock()
        for field in fields or []:
            self.ensure_field(field)

    def ensure_field(self, field: str):
        with self._lock:
            if field not in self.values:
                self.values[field] = {lang: "" for lang in self.languages}

    def set(self, field: str, lang: str, text: str):
        self.ensure_field(field)
        with self._lock:
            self.values[field][to_api_language_code(lang)] = text

    def get(self, field: str) -> dict[str, str]:
        with self._lock:
            return dict(self.values.get(field, {lang: "" for lang in self.languages}))

    def mark_translating(self, field: str, active: bool):
        with self._lock:
            if active:
                self.translating.add(field)
            else:
                self.translating.discard(field)

    def load(self, translations: dict[str, dict[str, str]]):
        for field, per_lang in translations.items():
            for lang, text in per_lang.items():
                self.set(field, lang, text or "")

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "values": {f: dict(v) for f, v in self.values.items()},
                "translating": sorted(self.translating),
            }

def fan_out(text: str, field: str, source: str, state: TranslationState, translate_fn: Callable = translate) -> dict[str, str]:
    """
    Translates one field into every other supported language, one call per
    language. A failed language gets "" and the rest carry on.
    """
    if not text or not text.strip():
        return state.get(field)

    source = to_api_language_code(source)
    state.set(field, source, text)
    state.mark_translating(field, True)
    failed = []
    try:
        for lang in state.languages:
            if lang == source:
                continue
            result = translate_fn(text, lang, source)
            texts = result.translations.get(lang) if result.success else None
            if not texts:
                failed.append(lang)
            state.set(field, lang, texts[0] if texts else "")
    finally:
        state.mark_translating(field, False)

    log_event("translation_fanout_done", field=field, source=source, failed_languages=",".join(failed) or None)
    return state.get(field)

class DraftRegistry:
    """In-process store of editing states keyed by draft id."""

    def __init__(self):
        self._drafts: dict[str, TranslationState] = {}
        self._lock = threading.Lock()

    def create(self, fields: list[str], values: dict[str, dict[str, str]] | None = None) -> str:
        draft_id = uuid.uuid4().hex
        state = TranslationState(fields)
        if values:
            state.load(values)
        with self._lock:
            self._drafts[draft_id] = state
        return draft_id

    def get(self, draft_id: str) -> TranslationState | None:
        with self._lock:
            return self._drafts.get(draft_id)

    def get_or_create(self, draft_id: str, fields: list[str] | None = None) -> TranslationState:
        with self._lock:
            state = self._drafts.get(draft_id)
            if state is None:
                state = TranslationState(fields)
                self._drafts[draft_id] = state
        return state

    def discard(self, draft_id: str) -> bool:
        with self._lock:
            return self._drafts.pop(draft_id, None) is not None

def run_fanout_job(registry: DraftRegistry, draft_id: str, field: str, text: str, source: str):
    state = registry.get(draft_id)
    if state is None:
        # Draft closed before the timer fired
        return
    fan_out(text, field, source, state)

class TranslationDebouncer:
    """
    One pending timer per (draft, field, source language). Scheduling again
    replaces the pending job, so only the last edit is translated.
    """

    def __init__(self, registry: DraftRegistry, scheduler: BackgroundScheduler | None = None, delay_seconds: float | None = None):
        self.registry = registry
        self.scheduler = scheduler or get_scheduler()
        self.delay_seconds = settings.translation_debounce_seconds if delay_seconds is None else delay_seconds

    @staticmethod
    def job_id(draft_id: str, field: str, source: str) -> str:
        return f"translate_{draft_id}_{field}_{to_api_language_code(source)}"

    def schedule(self, draft_id: str, field: str, text: str, source: str = "en") -> str | None:
        state = self.registry.get_or_create(draft_id, [field])
        # The typed text is visible immediately; translations follow the timer
        state.set(field, source, text)
        if not text or not text.strip():
            return None

        job_id = self.job_id(draft_id, field, source)
        self.scheduler.add_job(
            run_fanout_job,
            trigger="date",
            run_date=datetime.now(timezone.utc) + timedelta(seconds=self.delay_seconds),
            args=[self.registry, draft_id, field, text, to_api_language_code(source)],
            id=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
        )
        return job_id

_global_scheduler: BackgroundScheduler | None = None

def get_scheduler() -> BackgroundScheduler:
    global _global_scheduler
    if _global_scheduler is None:
        _global_scheduler = BackgroundScheduler(timezone="UTC")
    return _global_scheduler

def start_scheduler() -> BackgroundScheduler:
    sched = get_scheduler()
    if not sched.running:
        sched.start()
        log_event("scheduler_started")
    return sched

def shutdown_scheduler():
    if _global_scheduler is not None and _global_scheduler.running:
        _global_scheduler.shutdown(wait=False)

registry = DraftRegistry()
