import logging
from datetime import timedelta

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from multistore.db.session import get_db
from multistore.core.config import settings
from multistore.core.security import (
    REGISTRATION_SCOPE, create_token, create_scoped_token, decode_token, decode_scoped_token
)
from multistore.core import tenancy
from multistore.models.user import User, OtpCode, ADMIN_ROLES
from multistore.schemas.user import OTPRequest, OTPVerify, UserRegister
from multistore.services import email as email_utils
from multistore.utils.common import generate_otp, row_to_dict, utcnow

router = APIRouter()
security = HTTPBearer(auto_error=False)

def user_to_dict(user: User) -> dict:
    return row_to_dict(user)

def _load_user(db: Session, token: str) -> dict:
    try:
        payload = decode_token(token)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    if "user_id" not in payload:
        raise HTTPException(status_code=401, detail="Invalid token")

    user = db.query(User).filter(User.id == payload["user_id"]).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")

    user_dict = user_to_dict(user)
    user_dict["impersonator_id"] = payload.get("impersonator_id")
    return user_dict

# Dependency to get current user
def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)):
    if not credentials:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return _load_user(db, credentials.credentials)

def get_current_user_optional(credentials: HTTPAuthorizationCredentials = Depends(security), db: Session = Depends(get_db)):
    """Optional authentication - returns None if no token provided"""
    if not credentials:
        return None
    return _load_user(db, credentials.credentials)

def admin_required(user: dict = Depends(get_current_user)):
    if user.get("role") not in ADMIN_ROLES:
        raise HTTPException(status_code=403, detail="Access denied")
    return user

def super_admin_required(user: dict = Depends(get_current_user)):
    if user.get("role") != "super_admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user

def get_store_context(request: Request, user: dict = Depends(get_current_user_optional), db: Session = Depends(get_db)):
    """Domain-aware vendor resolution for vendor-scoped routes"""
    domain = tenancy.request_domain(request)
    if not domain:
        raise HTTPException(status_code=400, detail="Domain not specified")
    try:
        return tenancy.build_store_context(db, domain, user)
    except LookupError:
        raise HTTPException(status_code=404, detail="Store not found")

def vendor_required(user: dict = Depends(get_current_user), ctx: tenancy.StoreContext = Depends(get_store_context)):
    if not ctx.vendor:
        raise HTTPException(status_code=403, detail="Vendor access required")
    return ctx.vendor

def seed_super_admins(db: Session):
    """Make sure every address in SUPER_ADMIN_EMAILS has a protected super admin account"""
    for email in settings.SUPER_ADMIN_EMAILS:
        user = db.query(User).filter(User.email == email).first()
        if user:
            if user.role != "super_admin" or user.is_deletable:
                user.role = "super_admin"
                user.is_deletable = False
        else:
            db.add(User(email=email, role="super_admin", is_deletable=False, is_email_verified=True))
            logging.info(f"Seeded super admin {email}")
    db.commit()

def _login_response(user: User, message: str) -> dict:
    return {
        "message": message,
        "token": create_token(user.id, user.role),
        "user": user_to_dict(user),
        "requires_registration": False,
    }

@router.post("/auth/send-otp")
def send_otp(data: OTPRequest, db: Session = Depends(get_db)):
    email = data.email.lower()

    # Clean up expired OTPs
    db.query(OtpCode).filter(OtpCode.expires_at < utcnow()).delete()

    code = generate_otp()
    db.add(OtpCode(
        email=email,
        code=code,
        expires_at=utcnow() + timedelta(minutes=settings.OTP_EXPIRY_MINUTES),
        is_used=False
    ))
    db.commit()

    email_utils.send_otp_email(email, code)

    response = {"message": "OTP sent successfully"}
    if settings.EXPOSE_OTP:
        response["otp_for_testing"] = code
    return response

@router.post("/auth/verify-otp")
def verify_otp(data: OTPVerify, db: Session = Depends(get_db)):
    email = data.email.lower()

    otp = db.query(OtpCode).filter(
        OtpCode.email == email,
        OtpCode.code == data.code,
        OtpCode.is_used == False
    ).order_by(OtpCode.created_at.desc()).first()

    if not otp or otp.expires_at < utcnow():
        logging.info(f"OTP verification failed for {email}")
        raise HTTPException(status_code=400, detail="Invalid or expired OTP")

    otp.is_used = True

    user = db.query(User).filter(User.email == email).first()
    if user:
        if not user.is_active:
            db.commit()
            raise HTTPException(status_code=403, detail="Account disabled")
        user.is_email_verified = True
        user.last_login_at = utcnow()
        db.commit()
        db.refresh(user)
        logging.info(f"User {email} logged in")
        return _login_response(user, "Login successful")

    db.commit()
    return {
        "message": "OTP verified",
        "requires_registration": True,
        "email": email,
        "registration_token": create_scoped_token(REGISTRATION_SCOPE, email, settings.REGISTRATION_TOKEN_MINUTES * 60),
    }

@router.post("/auth/register")
def register(data: UserRegister, db: Session = Depends(get_db)):
    email = decode_scoped_token(data.registration_token, REGISTRATION_SCOPE)
    if not email:
        raise HTTPException(status_code=400, detail="Invalid or expired registration token")

    existing = db.query(User).filter(User.email == email).first()
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    new_user = User(
        email=email,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        is_email_verified=True,
        role="buyer",
        last_login_at=utcnow()
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    return {
        "message": "Registration successful",
        "token": create_token(new_user.id, new_user.role),
        "user": user_to_dict(new_user),
    }

@router.post("/auth/logout")
def logout():
    # Tokens are stateless; the client drops its copy
    return {"message": "Logged out successfully"}

@router.get("/auth/user")
def get_current_user_info(request: Request, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    domain = tenancy.request_domain(request)

    domain_vendor = None
    if domain and not tenancy.is_local_domain(domain):
        domain_vendor, _ = tenancy.find_vendor_by_domain(db, domain)

    user_vendor = tenancy.vendor_for_owner(db, user["id"]) if user["role"] == "seller" else None
    local = domain is None or tenancy.is_local_domain(domain)
    role = tenancy.effective_role(user["role"], user_vendor, domain_vendor, local)

    original_user = None
    if user["impersonator_id"]:
        impersonator = db.query(User).filter(User.id == user["impersonator_id"]).first()
        if impersonator:
            original_user = {"id": impersonator.id, "email": impersonator.email, "role": impersonator.role}

    response = dict(user)
    response.pop("impersonator_id")
    response.update({
        "role": role,
        "original_role": user["role"],
        "home_path": tenancy.home_path_for_role(role),
        "is_impersonating": bool(user["impersonator_id"]),
        "original_user": original_user,
        "current_domain": domain,
        "is_domain_owner": bool(domain_vendor and user_vendor and domain_vendor.id == user_vendor.id),
    })
    return response
