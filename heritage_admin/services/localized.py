import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from heritage_admin.services.translation import supported_languages, to_api_language_code, to_database_language_code

logger = logging.getLogger(__name__)

def empty_translations(fields: list[str]) -> dict[str, dict[str, str]]:
    return {f: {lang: "" for lang in supported_languages()} for f in fields}

def load_translations(db: Session, model, owner_column: str, owner_id: int, fields: list[str]) -> dict[str, dict[str, str]]:
    """Stored translation rows as field -> {lang -> text}, lower-case codes."""
    out = empty_translations(fields)
    try:
        rows = db.query(model).filter(getattr(model, owner_column) == owner_id).all()
    except SQLAlchemyError as e:
        logger.error(f"Failed to load {model.__tablename__} for {owner_id}: {e}")
        return out

    for row in rows:
        lang = to_api_language_code(row.language_code)
        for f in fields:
            value = getattr(row, f, None)
            if value:
                out[f][lang] = value
    return out

def merge_translations(primary: dict[str, dict[str, str]], fallback: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
    merged = {f: dict(v) for f, v in primary.items()}
    for f, per_lang in fallback.items():
        target = merged.setdefault(f, {})
        for lang, text in per_lang.items():
            if text and not target.get(lang):
                target[lang] = text
    return merged

def save_translations(
    db: Session,
    model,
    owner_column: str,
    owner_id: int,
    fields: list[str],
    translations: dict[str, dict[str, str]],
    include_source: bool = False,
    source: str = "en",
) -> int:
    """
    Upserts one row per language keyed by (owner, UPPERCASE code). Only trimmed
    non-empty values are written; languages with nothing to save are skipped.
    Caller commits.
    """
    source = to_api_language_code(source)
    written = 0
    for lang in supported_languages():
        if lang == source and not include_source:
            continue
        values = {}
        for f in fields:
            text = (translations.get(f) or {}).get(lang)
            if text and text.strip():
                values[f] = text.strip()
        if not values:
            continue

        code = to_database_language_code(lang)
        row = db.query(model).filter(
            getattr(model, owner_column) == owner_id,
            model.language_code == code,
        ).first()
        if not row:
            row = model(**{owner_column: owner_id, "language_code": code})
            db.add(row)
        for f, text in values.items():
            setattr(row, f, text)
        written += 1
    db.flush()
    return written
