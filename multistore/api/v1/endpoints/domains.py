from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import super_admin_required
from multistore.api.v1.endpoints.vendors import vendor_summary
from multistore.core import tenancy
from multistore.models.vendor import Vendor, CustomDomain
from multistore.schemas.vendor import CustomDomainCreate, CustomDomainUpdate
from multistore.utils.common import row_to_dict

router = APIRouter()

def domain_to_dict(domain: CustomDomain) -> dict:
    domain_dict = row_to_dict(domain)
    domain_dict["vendor"] = vendor_summary(domain.vendor) if domain.vendor else None
    return domain_dict

def _get_vendor(db: Session, vendor_id: str) -> Vendor:
    vendor = db.query(Vendor).filter(Vendor.id == vendor_id).first()
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor

def _link(vendor: Vendor, domain: CustomDomain):
    vendor.custom_domain_id = domain.id

def _unlink(db: Session, domain: CustomDomain):
    db.query(Vendor).filter(Vendor.custom_domain_id == domain.id).update({"custom_domain_id": None})

@router.get("/admin/custom-domains")
def get_custom_domains(admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    domains = db.query(CustomDomain).order_by(CustomDomain.created_at).all()
    return [domain_to_dict(d) for d in domains]

@router.post("/admin/custom-domains")
def create_custom_domain(data: CustomDomainCreate, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    name = tenancy.normalize_domain(data.domain)
    if db.query(CustomDomain).filter(CustomDomain.domain == name).first():
        raise HTTPException(status_code=400, detail="Domain already registered")

    vendor = _get_vendor(db, data.vendor_id) if data.vendor_id else None

    domain = CustomDomain(
        domain=name,
        vendor_id=data.vendor_id,
        is_active=data.is_active,
        ssl_enabled=data.ssl_enabled,
        created_by=admin["id"]
    )
    db.add(domain)
    db.flush()

    if vendor:
        _link(vendor, domain)

    db.commit()
    db.refresh(domain)
    return domain_to_dict(domain)

@router.put("/admin/custom-domains/{domain_id}")
def update_custom_domain(domain_id: str, data: CustomDomainUpdate, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    domain = db.query(CustomDomain).filter(CustomDomain.id == domain_id).first()
    if not domain:
        raise HTTPException(status_code=404, detail="Domain not found")

    update_data = data.model_dump(exclude_unset=True)

    if update_data.get("domain"):
        name = tenancy.normalize_domain(update_data["domain"])
        clash = db.query(CustomDomain).filter(CustomDomain.domain == name, CustomDomain.id != domain.id).first()
        if clash:
            raise HTTPException(status_code=400, detail="Domain already registered")
        domain.domain = name

    if "vendor_id" in update_data and update_data["vendor_id"] != domain.vendor_id:
        _unlink(db, domain)
        domain.vendor_id = update_data["vendor_id"]
        if domain.vendor_id:
            _link(_get_vendor(db, domain.vendor_id), domain)

    for field in ("is_active", "ssl_enabled"):
        if update_data.get(field) is not None:
            setattr(domain, field, update_data[field])

    db.commit()
    db.refresh(domain)
    return domain_to_dict(domain)

@router.delete("/admin/custom-domains/{domain_id}")
def delete_custom_domain(domain_id: str, admin: dict = Depends(super_admin_required), db: Session = Depends(get_db)):
    domain = db.query(CustomDomain).filter(CustomDomain.id == domain_id).first()
    if not domain:
        return {"success": False}

    _unlink(db, domain)
    db.delete(domain)
    db.commit()
    return {"success": True}
