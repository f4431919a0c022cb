from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from multistore.db.session import get_db
from multistore.api.v1.endpoints.categories import category_to_dict
from multistore.api.v1.endpoints.products import product_to_dict
from multistore.core import tenancy
from multistore.models.product import Category, Product
from multistore.models.vendor import Vendor

router = APIRouter()

def _storefront_payload(db: Session, vendor: Vendor, custom_domain=None) -> dict:
    products = db.query(Product).filter(
        Product.vendor_id == vendor.id,
        Product.is_active == True
    ).order_by(Product.created_at.desc()).all()
    categories = db.query(Category).filter(
        (Category.vendor_id == vendor.id) | (Category.is_global == True),
        Category.status == "active"
    ).order_by(Category.name).all()

    return {
        "vendor": {
            "id": vendor.id,
            "name": vendor.name,
            "description": vendor.description,
            "domain": vendor.domain,
            "custom_domain": custom_domain,
        },
        "products": [product_to_dict(p) for p in products],
        "categories": [category_to_dict(c) for c in categories],
    }

@router.get("/storefront/by-domain")
def get_storefront(request: Request, db: Session = Depends(get_db)):
    domain = tenancy.request_domain(request)
    if not domain:
        raise HTTPException(status_code=400, detail="Domain not specified")

    # An explicit ?domain= lets local development preview any store
    explicit = tenancy.normalize_domain(request.query_params.get("domain"))
    if tenancy.is_local_domain(domain) and explicit and not tenancy.is_local_domain(explicit):
        domain = explicit

    if tenancy.is_local_domain(domain):
        vendor = db.query(Vendor).filter(Vendor.status != "suspended").order_by(Vendor.created_at).first()
        if not vendor:
            raise HTTPException(status_code=404, detail="No stores available")
        return _storefront_payload(db, vendor)

    vendor, via_custom = tenancy.resolve_storefront_vendor(db, domain)
    if not vendor or vendor.status == "suspended":
        raise HTTPException(status_code=404, detail="Store not found")

    return _storefront_payload(db, vendor, custom_domain=domain if via_custom else None)
