from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import get_current_user, vendor_required
from multistore.core import tenancy
from multistore.models.product import Category
from multistore.models.vendor import Vendor
from multistore.schemas.product import CategoryCreate, CategoryUpdate
from multistore.utils.common import row_to_dict

router = APIRouter()

def category_to_dict(category: Category) -> dict:
    return row_to_dict(category)

def build_category_tree(categories: List[Category]) -> List[dict]:
    """Nest a flat category list under its parents; orphans whose parent is not visible become roots"""
    nodes = {c.id: dict(category_to_dict(c), children=[]) for c in categories}
    roots = []
    for category in categories:
        node = nodes[category.id]
        parent = nodes.get(category.parent_id)
        if parent is not None:
            parent["children"].append(node)
        else:
            roots.append(node)
    return roots

def _seller_vendor(db: Session, user: dict) -> Vendor:
    vendor = tenancy.vendor_for_owner(db, user["id"])
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor

def visible_categories(db: Session, user: dict, vendor_id: Optional[str] = None, is_global: Optional[bool] = None):
    if user["role"] == "super_admin":
        query = db.query(Category)
        if vendor_id:
            query = query.filter(Category.vendor_id == vendor_id)
        if is_global is not None:
            query = query.filter(Category.is_global == is_global)
        return query.order_by(Category.name).all()

    if user["role"] == "seller":
        vendor = _seller_vendor(db, user)
        return db.query(Category).filter(
            (Category.is_global == True) | (Category.vendor_id == vendor.id)
        ).order_by(Category.name).all()

    return []

def _can_manage(db: Session, user: dict, category: Category) -> bool:
    if user["role"] == "super_admin" and category.is_global:
        return True
    if user["role"] == "seller" and not category.is_global:
        vendor = tenancy.vendor_for_owner(db, user["id"])
        if not vendor or category.vendor_id != vendor.id:
            raise HTTPException(status_code=403, detail="Cannot modify this category")
        return True
    return False

def _check_parent(db: Session, parent_id: str, is_global: bool, vendor_id: Optional[str]) -> Category:
    parent = db.query(Category).filter(Category.id == parent_id).first()
    if not parent:
        raise HTTPException(status_code=400, detail="Parent category not found")
    # A vendor category may hang under a global one, never under another vendor's
    if is_global and not parent.is_global:
        raise HTTPException(status_code=400, detail="Global categories can only have global parents")
    if not is_global and not parent.is_global and parent.vendor_id != vendor_id:
        raise HTTPException(status_code=400, detail="Parent category belongs to another store")
    return parent

@router.get("/categories")
def get_categories(
    vendor_id: Optional[str] = None,
    is_global: Optional[bool] = None,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return [category_to_dict(c) for c in visible_categories(db, user, vendor_id, is_global)]

@router.get("/categories/tree")
def get_category_tree(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    return build_category_tree(visible_categories(db, user))

@router.post("/categories", status_code=201)
def create_category(data: CategoryCreate, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    if user["role"] == "super_admin" and data.is_global:
        vendor_id, is_global = None, True
    elif user["role"] == "seller":
        vendor_id, is_global = _seller_vendor(db, user).id, False
    else:
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    if data.parent_id:
        _check_parent(db, data.parent_id, is_global, vendor_id)

    category = Category(
        name=data.name,
        description=data.description,
        parent_id=data.parent_id,
        vendor_id=vendor_id,
        is_global=is_global,
        status=data.status,
        created_by=user["id"]
    )
    db.add(category)
    db.commit()
    db.refresh(category)
    return category_to_dict(category)

@router.patch("/categories/{category_id}")
def update_category(category_id: str, data: CategoryUpdate, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    if not _can_manage(db, user, category):
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("parent_id"):
        if update_data["parent_id"] == category.id:
            raise HTTPException(status_code=400, detail="A category cannot be its own parent")
        parent = _check_parent(db, update_data["parent_id"], category.is_global, category.vendor_id)
        # Walk up to refuse cycles
        ancestor = parent
        while ancestor is not None:
            if ancestor.id == category.id:
                raise HTTPException(status_code=400, detail="A category cannot be moved under its own child")
            ancestor = ancestor.parent

    for k, v in update_data.items():
        if k != "name" or v is not None:
            setattr(category, k, v)
    db.commit()
    db.refresh(category)
    return category_to_dict(category)

@router.delete("/categories/{category_id}")
def delete_category(category_id: str, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    if not _can_manage(db, user, category):
        raise HTTPException(status_code=403, detail="Insufficient permissions")

    db.delete(category)
    db.commit()
    return {"success": True}

@router.get("/vendor/categories")
def get_vendor_categories(vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    categories = db.query(Category).filter(Category.vendor_id == vendor.id).order_by(Category.name).all()
    return [category_to_dict(c) for c in categories]
