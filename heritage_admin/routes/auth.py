from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import func
from sqlalchemy.orm import Session
from ..db import get_db
from ..models import AdminUser
from ..schemas import AdminCreate, AdminOut
from ..security.auth import verify_password, create_access_token, get_password_hash, require_admin_user
from ..security.rbac import require_superadmin, ROLE_RANK
from ..logging_setup import log_event

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/login")
def login(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
) -> dict[str, Any]:
    admin = db.query(AdminUser).filter(func.lower(AdminUser.email) == func.lower(form_data.username.strip())).first()
    if not admin or not admin.is_active or not verify_password(form_data.password, admin.password_hash):
        log_event("admin_login_fail", level="warning", email=form_data.username.strip())
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": str(admin.id), "role": admin.role})
    response.set_cookie(
        key="access_token",
        value=access_token,
        httponly=True,
        samesite="lax",
        secure=True,
        max_age=7 * 24 * 60 * 60 # 7 days
    )
    log_event("admin_login", admin_id=admin.id)
    return {"access_token": access_token, "token_type": "bearer"}

@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    response.delete_cookie(key="access_token", httponly=True, samesite="lax", secure=True)
    return {"message": "Logged out successfully"}

@router.get("/me", response_model=AdminOut)
def me(admin: AdminUser = Depends(require_admin_user)):
    return admin

@router.post("/admins", response_model=AdminOut)
def create_admin(
    admin_in: AdminCreate,
    db: Session = Depends(get_db),
    _: AdminUser = Depends(require_superadmin),
):
    if admin_in.role not in ROLE_RANK:
        raise HTTPException(status_code=400, detail=f"Unknown role: {admin_in.role}")
    existing = db.query(AdminUser).filter(func.lower(AdminUser.email) == func.lower(admin_in.email.strip())).first()
    if existing:
        raise HTTPException(status_code=400, detail="An admin with this email already exists.")

    admin = AdminUser(
        email=admin_in.email.strip(),
        name=admin_in.name.strip(),
        password_hash=get_password_hash(admin_in.password),
        role=admin_in.role,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin
