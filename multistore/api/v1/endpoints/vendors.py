import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import get_current_user, super_admin_required
from multistore.core import tenancy
from multistore.core.config import settings
from multistore.models.user import User
from multistore.models.vendor import Vendor
from multistore.schemas.vendor import VendorCreate, VendorUpdate
from multistore.utils.common import row_to_dict

router = APIRouter()

def vendor_summary(vendor: Vendor) -> dict:
    return {
        "id": vendor.id,
        "name": vendor.name,
        "description": vendor.description,
        "domain": vendor.domain,
    }

def vendor_to_dict(vendor: Vendor) -> dict:
    vendor_dict = row_to_dict(vendor)
    owner = vendor.owner
    vendor_dict["owner"] = {"id": owner.id, "email": owner.email, "name": owner.full_name} if owner else None
    vendor_dict["custom_domain"] = vendor.custom_domain.domain if vendor.custom_domain else None
    return vendor_dict

def _ensure_domain_free(db: Session, domain: str, vendor_id: str = None):
    query = db.query(Vendor).filter(Vendor.domain == domain)
    if vendor_id:
        query = query.filter(Vendor.id != vendor_id)
    if query.first():
        raise HTTPException(status_code=400, detail="Domain already in use")

@router.get("/vendors")
def get_vendors(admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    vendors = db.query(Vendor).order_by(Vendor.created_at).all()
    return [vendor_to_dict(v) for v in vendors]

@router.post("/vendors")
def create_vendor(data: VendorCreate, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    domain = tenancy.normalize_domain(data.domain)
    _ensure_domain_free(db, domain)

    owner_email = data.owner_email.lower()
    owner = db.query(User).filter(User.email == owner_email).first()
    if not owner:
        owner = User(
            email=owner_email,
            role="seller",
            is_email_verified=False,
            is_deletable=True,
            created_by=admin["id"]
        )
        db.add(owner)
        db.flush()
        logging.info(f"Created seller account {owner_email} for new store")
    elif owner.role not in ("seller", "super_admin"):
        owner.role = "seller"

    vendor = Vendor(
        owner_id=owner.id,
        name=data.name,
        domain=domain,
        description=data.description,
        plan=data.plan,
        status=data.status,
        subscription_status=data.subscription_status,
        created_by=admin["id"]
    )
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    return vendor_to_dict(vendor)

@router.get("/vendors/my")
def get_my_vendor(request: Request, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    domain = tenancy.request_domain(request)
    if not domain:
        raise HTTPException(status_code=400, detail="Domain not specified")

    user_vendor = tenancy.vendor_for_owner(db, user["id"])

    if tenancy.is_local_domain(domain):
        if not user_vendor:
            raise HTTPException(status_code=404, detail="Vendor not found")
        return vendor_to_dict(user_vendor)

    domain_vendor, _ = tenancy.find_vendor_by_domain(db, domain)
    if not domain_vendor:
        raise HTTPException(status_code=404, detail="Store not found")
    if not user_vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")

    # Only the owner of this storefront sees its vendor record
    if user_vendor.id != domain_vendor.id:
        return None
    return vendor_to_dict(user_vendor)

@router.put("/vendors/{vendor_id}")
def update_vendor(vendor_id: str, data: VendorUpdate, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    vendor = db.query(Vendor).filter(Vendor.id == vendor_id).first()
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("domain"):
        update_data["domain"] = tenancy.normalize_domain(update_data["domain"])
        _ensure_domain_free(db, update_data["domain"], vendor.id)

    for k, v in update_data.items():
        if v is not None:
            setattr(vendor, k, v)
    db.commit()
    db.refresh(vendor)
    return vendor_to_dict(vendor)

@router.post("/admin/vendors/{vendor_id}/generate-subdomain")
def generate_subdomain(vendor_id: str, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    vendor = db.query(Vendor).filter(Vendor.id == vendor_id).first()
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")

    slug = tenancy.slugify_subdomain(vendor.name)
    if not slug:
        raise HTTPException(status_code=400, detail="Vendor name has no usable characters for a subdomain")

    domain = f"{slug}.{settings.BASE_DOMAIN}"
    _ensure_domain_free(db, domain, vendor.id)
    vendor.domain = domain
    db.commit()
    db.refresh(vendor)
    return vendor_to_dict(vendor)
