import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import admin_required, super_admin_required, get_current_user, user_to_dict
from multistore.core.security import create_token
from multistore.models.user import User, ROLES, ADMIN_ROLES
from multistore.schemas.user import RoleUpdate

router = APIRouter()

@router.get("/admin/users")
def get_all_users(
    search: Optional[str] = None,
    role: Optional[str] = None,
    admin: dict = Depends(admin_required),
    db: Session = Depends(get_db)
):
    query = db.query(User)

    if search:
        query = query.filter(
            or_(
                User.email.ilike(f"%{search}%"),
                User.first_name.ilike(f"%{search}%"),
                User.last_name.ilike(f"%{search}%")
            )
        )
    if role:
        query = query.filter(User.role == role)

    users_data = []
    for user in query.order_by(User.created_at).all():
        user_dict = user_to_dict(user)
        user_dict["created_by_user"] = (
            {"id": user.creator.id, "email": user.creator.email} if user.creator else None
        )
        users_data.append(user_dict)
    return users_data

@router.patch("/admin/users/{user_id}/role")
def update_user_role(user_id: str, data: RoleUpdate, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    if data.role not in ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.role = data.role
    db.commit()
    db.refresh(user)
    logging.info(f"{admin['email']} changed role of {user.email} to {data.role}")
    return user_to_dict(user)

@router.delete("/admin/users/{user_id}")
def delete_user(user_id: str, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    if user_id == admin["id"]:
        raise HTTPException(status_code=400, detail="Cannot delete yourself")

    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_deletable:
        raise HTTPException(status_code=404, detail="User not found or cannot be deleted")

    if user.vendors:
        raise HTTPException(status_code=400, detail="User owns a store and cannot be deleted")

    db.delete(user)
    db.commit()
    return {"message": "User deleted successfully"}

@router.post("/admin/impersonate/{user_id}")
def impersonate_user(user_id: str, admin: dict = Depends(admin_required), db: Session = Depends(get_db)):
    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(status_code=404, detail="Target user not found")

    # Only a super admin may take over an admin account
    if target.role in ADMIN_ROLES and admin["role"] != "super_admin":
        raise HTTPException(status_code=403, detail="Cannot impersonate an admin account")

    # Nested impersonation still points back to the real operator
    original_id = admin.get("impersonator_id") or admin["id"]
    logging.info(f"User {original_id} started impersonating {target.email}")

    return {
        "message": "Impersonation started successfully",
        "token": create_token(target.id, target.role, impersonator_id=original_id),
        "target_user": user_to_dict(target),
    }

@router.post("/admin/exit-impersonation")
def exit_impersonation(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    if not user.get("impersonator_id"):
        raise HTTPException(status_code=400, detail="No active impersonation session")

    original = db.query(User).filter(User.id == user["impersonator_id"]).first()
    if not original:
        raise HTTPException(status_code=404, detail="Original user not found")

    return {
        "message": "Impersonation ended successfully",
        "token": create_token(original.id, original.role),
        "user": user_to_dict(original),
    }
