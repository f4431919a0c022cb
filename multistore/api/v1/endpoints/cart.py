from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import get_current_user
from multistore.api.v1.endpoints.products import product_to_dict
from multistore.models.order import CartItem
from multistore.models.product import Product
from multistore.schemas.order import CartItemAdd, CartItemUpdate
from multistore.services.pricing import summarize_cart

router = APIRouter()

def cart_item_to_dict(item: CartItem) -> dict:
    return {
        "id": item.id,
        "product_id": item.product_id,
        "quantity": item.quantity,
        "created_at": item.created_at,
        "product": product_to_dict(item.product),
    }

def get_cart_items(db: Session, user_id: str):
    return db.query(CartItem).filter(CartItem.user_id == user_id).order_by(CartItem.created_at).all()

@router.get("/cart")
def get_cart(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    items = get_cart_items(db, user["id"])
    return {
        "items": [cart_item_to_dict(i) for i in items],
        "summary": summarize_cart(items),
    }

@router.post("/cart")
def add_to_cart(data: CartItemAdd, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    product = db.query(Product).filter(Product.id == data.product_id, Product.is_active == True).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    item = db.query(CartItem).filter(
        CartItem.user_id == user["id"],
        CartItem.product_id == data.product_id
    ).first()
    if item:
        item.quantity += data.quantity
    else:
        item = CartItem(user_id=user["id"], product_id=data.product_id, quantity=data.quantity)
        db.add(item)

    db.commit()
    db.refresh(item)
    return cart_item_to_dict(item)

@router.put("/cart/{product_id}")
def update_cart_item(product_id: str, data: CartItemUpdate, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    item = db.query(CartItem).filter(
        CartItem.user_id == user["id"],
        CartItem.product_id == product_id
    ).first()
    if not item:
        raise HTTPException(status_code=404, detail="Item not in cart")

    if data.quantity <= 0:
        db.delete(item)
        db.commit()
        return {"success": True, "removed": True}

    item.quantity = data.quantity
    db.commit()
    db.refresh(item)
    return cart_item_to_dict(item)

@router.delete("/cart/{product_id}")
def remove_from_cart(product_id: str, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    removed = db.query(CartItem).filter(
        CartItem.user_id == user["id"],
        CartItem.product_id == product_id
    ).delete()
    db.commit()
    return {"success": removed > 0}

@router.delete("/cart")
def clear_cart(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    db.query(CartItem).filter(CartItem.user_id == user["id"]).delete()
    db.commit()
    return {"success": True}
