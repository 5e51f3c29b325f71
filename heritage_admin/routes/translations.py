from fastapi import APIRouter, Depends, HTTPException
from ..models import AdminUser
from ..schemas import TranslateIn, TranslationResult, FieldEditIn, DraftSeedIn
from ..security.rbac import require_moderator
from ..services import translation
from ..services.fanout import registry, TranslationDebouncer

router = APIRouter(prefix="/translations", tags=["translations"])

def get_debouncer() -> TranslationDebouncer:
    return TranslationDebouncer(registry)

@router.get("/languages")
def languages() -> list[str]:
    return translation.supported_languages()

@router.get("/health")
def translation_health(_: AdminUser = Depends(require_moderator)):
    return {"healthy": translation.health_check()}

@router.post("/translate", response_model=TranslationResult)
def translate(payload: TranslateIn, _: AdminUser = Depends(require_moderator)):
    return translation.translate(payload.text, payload.target, payload.source)

@router.post("/translate-fields")
def translate_fields(content: dict[str, str], source: str = "en", _: AdminUser = Depends(require_moderator)):
    result = translation.translate_fields(content, source)
    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["error"])
    return result

@router.post("/drafts")
def create_draft(payload: DraftSeedIn, _: AdminUser = Depends(require_moderator)):
    draft_id = registry.create(payload.fields, payload.values)
    return {"draft_id": draft_id, **registry.get(draft_id).snapshot()}

@router.get("/drafts/{draft_id}")
def get_draft(draft_id: str, _: AdminUser = Depends(require_moderator)):
    state = registry.get(draft_id)
    if not state:
        raise HTTPException(status_code=404, detail="Draft not found")
    return {"draft_id": draft_id, **state.snapshot()}

@router.post("/drafts/{draft_id}/edit")
def edit_field(
    draft_id: str,
    payload: FieldEditIn,
    debouncer: TranslationDebouncer = Depends(get_debouncer),
    _: AdminUser = Depends(require_moderator),
):
    if not registry.get(draft_id):
        raise HTTPException(status_code=404, detail="Draft not found")
    job_id = debouncer.schedule(draft_id, payload.field, payload.text, payload.source)
    return {"draft_id": draft_id, "scheduled": job_id is not None, **registry.get(draft_id).snapshot()}

@router.delete("/drafts/{draft_id}")
def discard_draft(draft_id: str, _: AdminUser = Depends(require_moderator)):
    if not registry.discard(draft_id):
        raise HTTPException(status_code=404, detail="Draft not found")
    return {"success": True}
