from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import Optional

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import vendor_required
from multistore.api.v1.endpoints.vendors import vendor_summary
from multistore.models.product import Category, Product, ProductVariant
from multistore.models.order import CartItem, OrderItem
from multistore.models.vendor import Vendor
from multistore.schemas.product import ProductCreate, ProductUpdate
from multistore.utils.common import row_to_dict

router = APIRouter()

def variant_to_dict(variant: ProductVariant) -> dict:
    return row_to_dict(variant)

def product_to_dict(product: Product, with_variants: bool = False) -> dict:
    product_dict = row_to_dict(product)
    product_dict["vendor"] = vendor_summary(product.vendor) if product.vendor else None
    if with_variants:
        product_dict["variants"] = [variant_to_dict(v) for v in product.variants]
    return product_dict

def get_owned_product(db: Session, product_id: str, vendor: Vendor) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product or product.vendor_id != vendor.id:
        raise HTTPException(status_code=403, detail="Access denied to this product")
    return product

def check_category(db: Session, category_id: Optional[str], vendor: Vendor):
    if not category_id:
        return
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category or not (category.is_global or category.vendor_id == vendor.id):
        raise HTTPException(status_code=400, detail="Invalid category")

def sku_taken(db: Session, sku: str, exclude_id: str = None) -> bool:
    query = db.query(ProductVariant).filter(ProductVariant.sku == sku)
    if exclude_id:
        query = query.filter(ProductVariant.id != exclude_id)
    return query.first() is not None

@router.get("/products")
def get_products(
    vendor_id: Optional[str] = None,
    category_id: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
    db: Session = Depends(get_db)
):
    query = db.query(Product).filter(Product.is_active == True)

    if vendor_id:
        query = query.filter(Product.vendor_id == vendor_id)
    if category_id:
        query = query.filter(Product.category_id == category_id)
    if search:
        search_pattern = f"%{search}%"
        query = query.filter(
            or_(
                Product.name.ilike(search_pattern),
                Product.description.ilike(search_pattern)
            )
        )

    page = max(page, 1)
    limit = min(max(limit, 1), 200)
    total = query.count()
    products = query.order_by(Product.created_at.desc()).offset((page - 1) * limit).limit(limit).all()

    return {
        "products": [product_to_dict(p) for p in products],
        "total": total,
        "page": page,
        "pages": (total + limit - 1) // limit
    }

@router.get("/products/{product_id}")
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product_to_dict(product, with_variants=True)

@router.post("/products")
def create_product(data: ProductCreate, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    if sku_taken(db, data.sku):
        raise HTTPException(status_code=400, detail="SKU already exists")
    check_category(db, data.category_id, vendor)

    product = Product(
        vendor_id=vendor.id,
        name=data.name,
        description=data.description,
        price=data.selling_price,
        image_url=data.image_url,
        category_id=data.category_id,
        stock=data.stock,
        is_active=data.status == "active"
    )
    # Simple products keep their pricing and dimensions on a single base variant
    product.variants.append(ProductVariant(
        sku=data.sku,
        mrp=data.mrp,
        selling_price=data.selling_price,
        purchase_price=data.purchase_price,
        stock=data.stock,
        weight=data.weight,
        length=data.length,
        breadth=data.breadth,
        height=data.height,
        status=data.status,
        image_urls=[data.image_url] if data.image_url else []
    ))
    db.add(product)
    db.commit()
    db.refresh(product)

    product_dict = product_to_dict(product, with_variants=True)
    product_dict["variant"] = product_dict["variants"][0]
    return product_dict

@router.put("/products/{product_id}")
def update_product(product_id: str, data: ProductUpdate, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    product = get_owned_product(db, product_id, vendor)

    update_data = data.model_dump(exclude_unset=True)
    if "category_id" in update_data:
        check_category(db, update_data["category_id"], vendor)

    for k, v in update_data.items():
        if v is not None or k in ("category_id", "description", "image_url"):
            setattr(product, k, v)
    db.commit()
    db.refresh(product)
    return product_to_dict(product, with_variants=True)

@router.delete("/products/{product_id}")
def delete_product(product_id: str, vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    product = get_owned_product(db, product_id, vendor)
    db.query(CartItem).filter(CartItem.product_id == product.id).delete()
    db.query(OrderItem).filter(OrderItem.product_id == product.id).update({"product_id": None})
    db.delete(product)
    db.commit()
    return {"message": "Product deleted successfully"}

@router.get("/vendor/products")
def get_vendor_products(vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    products = db.query(Product).filter(Product.vendor_id == vendor.id).order_by(Product.created_at.desc()).all()
    return [product_to_dict(p) for p in products]
