# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

import requests
from heritage_admin.config import settings
from heritage_admin.logging_setup import log_event
from heritage_admin.schemas import TranslationResult

# Order matters: name goes first so callers can read it back by index 0
SITE_CONTENT_FIELDS = ["name", "short_desc", "full_desc", "address", "city", "state", "country"]

def supported_languages() -> list[str]:
    return list(settings.supported_languages)

def to_api_language_code(code: str) -> str:
    return (code or "").strip().lower()

def to_database_language_code(code: str) -> str:
    return (code or "").strip().upper()

def _headers() -> dict:
    headers = {"Content-Type": "application/json"}
    if settings.translate_api_key:
        headers["apikey"] = settings.translate_api_key
        headers["Authorization"] = f"Bearer {settings.translate_api_key}"
    return headers

def _parse_response(data: dict) -> dict[str, list[str]] | None:
    # Single target: {"target": "hi", "translations": [...]}
    if isinstance(data.get("translations"), list) and data.get("target"):
        return {to_api_language_code(data["target"]): [str(t) for t in data["translations"]]}
    # Multiple targets: {"results": {"hi": [...], "fr": [...]}}
    if isinstance(data.get("results"), dict):
        return {to_api_language_code(lang): [str(t) for t in texts] for lang, texts in data["results"].items()}
    return None

def translate(text: str | list[str], target: str | list[str], source: str | None = None) -> TranslationResult:
    """
    Calls the translation edge function.
    Never raises: transport and service errors come back as success=False.
    """
    payload = {"text": text, "target": target}
    if source:
        payload["source"] = source

    try:
        r = requests.post(
            settings.translate_function_url,
            json=payload,
            headers=_headers(),
            timeout=settings.translate_timeout_seconds,
        )
    except requests.RequestException as e:
        log_event("translation_request_fail", level="warning", target=str(target), error=str(e))
        return TranslationResult(success=False, error=str(e))

    try:
        data = r.json()
    except ValueError:
        data = {}

    if r.status_code >= 400:
        error = data.get("error") if isinstance(data, dict) else None
        error = error or f"HTTP {r.status_code}: {r.reason}"
        log_event("translation_http_error", level="warning", status_code=r.status_code, error=error)
        return TranslationResult(success=False, error=error)

    translations = _parse_response(data) if isinstance(data, dict) else None
    if translations is None:
        return TranslationResult(success=False, error="Invalid response format from translation service")

    return TranslationResult(success=True, translations=translations)

def _all_targets(source: str) -> list[str]:
    source = to_api_language_code(source)
    return [lang for lang in supported_languages() if lang != source]

def translate_to_all_languages(text: str, source: str = "en") -> TranslationResult:
    return translate_multiple_to_all_languages([text], source)

def translate_multiple_to_all_languages(texts: list[str], source: str = "en") -> TranslationResult:
    source = to_api_language_code(source)
    targets = _all_targets(source)
    if not targets:
        return TranslationResult(success=True, translations={source: list(texts)})

    result = translate(list(texts), targets, source)
    if result.success:
        result.translations[source] = list(texts)
    return result

def translate_fields(content: dict, source: str = "en") -> dict:
    """
    Batch-translates the non-empty fields of one record in a single call and
    regroups the output per language: {"HI": {"name": ..., "short_desc": ...}}.
    """
    keys = [k for k in SITE_CONTENT_FIELDS if content.get(k) and str(content[k]).strip()]
    # Fields outside the well-known list are kept in insertion order after them
    keys += [k for k, v in content.items() if k not in SITE_CONTENT_FIELDS and v and str(v).strip()]
    if not keys:
        return {"success": False, "error": "No content to translate"}

    texts = [str(content[k]) for k in keys]
    result = translate_multiple_to_all_languages(texts, source)
    if not result.success:
        return {"success": False, "error": result.error}

    grouped = {}
    for lang, values in result.translations.items():
        grouped[to_database_language_code(lang)] = {k: (values[i] if i < len(values) else "") for i, k in enumerate(keys)}

    log_event("translation_fields_done", fields=len(keys), languages=len(grouped))
    return {"success": True, "translations": grouped}

def health_check() -> bool:
    result = translate("test", "es")
    return result.success and bool(result.translations.get("es"))
