from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import vendor_required
from multistore.api.v1.endpoints.products import get_owned_product, sku_taken, variant_to_dict
from multistore.models.product import Product, ProductVariant
from multistore.models.vendor import Vendor
from multistore.schemas.product import VariantCreate, VariantMatrixGenerate, VariantMatrixPreview, VariantUpdate
from multistore.services.variants import build_variant_matrix, INHERITED_FIELDS

router = APIRouter()

def _base_for(product: Product) -> dict:
    """Pricing template taken from the product's first variant"""
    if not product.variants:
        raise HTTPException(status_code=400, detail="Product has no base variant to derive from")
    first = sorted(product.variants, key=lambda v: v.created_at)[0]
    base = {field: getattr(first, field) for field in INHERITED_FIELDS}
    base["sku"] = _strip_axis_suffix(first)
    return base

def _strip_axis_suffix(variant: ProductVariant) -> str:
    """Recover the base SKU from a generated ``BASE-COLOR-SIZE`` SKU"""
    sku = variant.sku
    for part in (variant.size, variant.color):
        suffix = f"-{part.upper()}" if part else ""
        if suffix and sku.upper().endswith(suffix):
            sku = sku[:-len(suffix)]
    return sku

def _check_new_skus(db: Session, skus: List[str], ignore_product: Product = None):
    if len(set(skus)) != len(skus):
        raise HTTPException(status_code=400, detail="Duplicate SKU in request")
    clashes = db.query(ProductVariant).filter(ProductVariant.sku.in_(skus))
    if ignore_product is not None:
        clashes = clashes.filter(ProductVariant.product_id != ignore_product.id)
    taken = [v.sku for v in clashes.all()]
    if taken:
        raise HTTPException(status_code=400, detail=f"SKU already exists: {', '.join(sorted(taken))}")

def _get_owned_variant(db: Session, variant_id: str, vendor: Vendor) -> ProductVariant:
    variant = db.query(ProductVariant).filter(ProductVariant.id == variant_id).first()
    if not variant or variant.product.vendor_id != vendor.id:
        raise HTTPException(status_code=403, detail="Access denied to this product")
    return variant

@router.post("/variants/preview")
def preview_variant_matrix(data: VariantMatrixPreview):
    return build_variant_matrix(data.base.model_dump(), data.colors, data.sizes)

@router.get("/products/{product_id}/variants")
def get_variants(product_id: str, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    product = get_owned_product(db, product_id, vendor)
    return [variant_to_dict(v) for v in product.variants]

@router.post("/products/{product_id}/variants/matrix")
def generate_variants(product_id: str, data: VariantMatrixGenerate, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    product = get_owned_product(db, product_id, vendor)
    rows = build_variant_matrix(_base_for(product), data.colors, data.sizes)
    if not rows:
        raise HTTPException(status_code=400, detail="Provide at least one color or size")

    if data.replace:
        _check_new_skus(db, [r["sku"] for r in rows], ignore_product=product)
        product.variants.clear()
        db.flush()
    else:
        _check_new_skus(db, [r["sku"] for r in rows])

    for row in rows:
        product.variants.append(ProductVariant(**row))
    db.commit()
    db.refresh(product)
    return [variant_to_dict(v) for v in product.variants]

@router.post("/products/{product_id}/variants")
def create_variants(product_id: str, variants: List[VariantCreate], vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    product = get_owned_product(db, product_id, vendor)
    if not variants:
        raise HTTPException(status_code=400, detail="No variants provided")
    _check_new_skus(db, [v.sku for v in variants])

    created = []
    for data in variants:
        variant = ProductVariant(**data.model_dump())
        product.variants.append(variant)
        created.append(variant)
    db.commit()
    return [variant_to_dict(v) for v in created]

@router.put("/variants/{variant_id}")
def update_variant(variant_id: str, data: VariantUpdate, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    variant = _get_owned_variant(db, variant_id, vendor)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("sku") and sku_taken(db, update_data["sku"], exclude_id=variant.id):
        raise HTTPException(status_code=400, detail="SKU already exists")

    for k, v in update_data.items():
        if v is not None:
            setattr(variant, k, v)
    db.commit()
    db.refresh(variant)
    return variant_to_dict(variant)

@router.delete("/variants/{variant_id}")
def delete_variant(variant_id: str, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    variant = _get_owned_variant(db, variant_id, vendor)
    db.delete(variant)
    db.commit()
    return {"success": True}
