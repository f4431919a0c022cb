import logging
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import get_current_user, vendor_required
from multistore.api.v1.endpoints.cart import get_cart_items
from multistore.api.v1.endpoints.vendors import vendor_summary
from multistore.core import tenancy
from multistore.models.order import Order, OrderItem, ORDER_STATUSES, CANCELLABLE_STATUSES
from multistore.models.product import Product
from multistore.models.user import ADMIN_ROLES
from multistore.models.vendor import Vendor
from multistore.schemas.order import OrderCreate, OrderStatusUpdate, OrderCancellationRequest
from multistore.services.pricing import compute_totals, group_by_vendor
from multistore.utils.common import generate_order_number, row_to_dict

router = APIRouter()

def order_to_dict(order: Order) -> dict:
    order_dict = row_to_dict(order)
    order_dict["vendor"] = vendor_summary(order.vendor) if order.vendor else None
    order_dict["customer"] = (
        {"id": order.customer.id, "email": order.customer.email, "name": order.customer.full_name}
        if order.customer else None
    )
    order_dict["items"] = [row_to_dict(i) for i in order.items]
    return order_dict

def _can_view(db: Session, user: dict, order: Order) -> bool:
    if user["role"] in ADMIN_ROLES or order.customer_id == user["id"]:
        return True
    if user["role"] == "seller":
        vendor = tenancy.vendor_for_owner(db, user["id"])
        return vendor is not None and vendor.id == order.vendor_id
    return False

def _get_order(db: Session, order_id: str) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return order

def restore_stock(db: Session, order: Order):
    """Put an order's quantities back on the shelf"""
    for item in order.items:
        product = db.query(Product).filter(Product.id == item.product_id).first()
        if product:
            product.stock += item.quantity

@router.get("/orders")
def get_orders(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    query = db.query(Order)

    if user["role"] == "seller":
        vendor = tenancy.vendor_for_owner(db, user["id"])
        if not vendor:
            return []
        query = query.filter(Order.vendor_id == vendor.id)
    elif user["role"] not in ADMIN_ROLES:
        query = query.filter(Order.customer_id == user["id"])

    return [order_to_dict(o) for o in query.order_by(Order.created_at.desc()).all()]

@router.post("/orders")
def create_orders(data: OrderCreate, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Check out the cart, producing one order per vendor"""
    cart_items = get_cart_items(db, user["id"])
    if data.vendor_id:
        cart_items = [i for i in cart_items if i.product.vendor_id == data.vendor_id]
    if not cart_items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    orders = []
    for vendor_id, items in group_by_vendor(cart_items).items():
        for item in items:
            product = item.product
            if not product.is_active:
                raise HTTPException(status_code=400, detail=f"{product.name} is no longer available")
            if product.stock < item.quantity:
                raise HTTPException(status_code=400, detail=f"Insufficient stock for {product.name}")

        totals = compute_totals((i.product.price, i.quantity) for i in items)
        order = Order(
            order_number=generate_order_number(),
            customer_id=user["id"],
            vendor_id=vendor_id,
            subtotal=totals["subtotal"],
            tax_amount=totals["tax_amount"],
            shipping_fee=totals["shipping_fee"],
            total=totals["total"],
            status="pending",
            payment_method=data.payment_method,
            shipping_address=data.shipping_address
        )
        for item in items:
            order.items.append(OrderItem(
                product_id=item.product_id,
                product_name=item.product.name,
                quantity=item.quantity,
                price=item.product.price
            ))
            item.product.stock -= item.quantity
            db.delete(item)

        db.add(order)
        orders.append(order)

    db.commit()
    for order in orders:
        db.refresh(order)
        logging.info(f"Order {order.order_number} placed by {user['email']} for vendor {order.vendor_id}")
    return [order_to_dict(o) for o in orders]

@router.get("/orders/{order_id}")
def get_order(order_id: str, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    order = _get_order(db, order_id)
    if not _can_view(db, user, order):
        raise HTTPException(status_code=403, detail="Access denied")
    return order_to_dict(order)

@router.put("/orders/{order_id}/status")
def update_order_status(order_id: str, data: OrderStatusUpdate, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    if data.status not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid order status")

    if user["role"] in ADMIN_ROLES:
        order = _get_order(db, order_id)
    elif user["role"] == "seller":
        order = _get_order(db, order_id)
        vendor = tenancy.vendor_for_owner(db, user["id"])
        if not vendor or order.vendor_id != vendor.id:
            raise HTTPException(status_code=403, detail="Access denied")
    else:
        raise HTTPException(status_code=403, detail="Access denied")

    if order.status == "cancelled" and data.status != "cancelled":
        raise HTTPException(status_code=400, detail="Cancelled orders cannot be reopened")
    if data.status == "cancelled" and order.status != "cancelled":
        restore_stock(db, order)
        logging.info(f"Order {order.order_number} cancelled by {user['email']} via status update")

    order.status = data.status
    db.commit()
    db.refresh(order)
    return order_to_dict(order)

@router.post("/orders/{order_id}/cancel")
def cancel_order(order_id: str, data: OrderCancellationRequest, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    order = _get_order(db, order_id)
    if user["role"] not in ADMIN_ROLES and order.customer_id != user["id"]:
        raise HTTPException(status_code=403, detail="Not authorized to cancel this order")

    if order.status not in CANCELLABLE_STATUSES:
        raise HTTPException(status_code=400, detail=f"Cannot cancel order with status: {order.status}")

    restore_stock(db, order)
    order.status = "cancelled"
    db.commit()
    db.refresh(order)
    logging.info(f"Order {order.order_number} cancelled by {user['email']}: {data.reason or 'no reason given'}")
    return order_to_dict(order)

@router.get("/orders/{order_id}/invoice")
def get_invoice(order_id: str, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Invoice PDF for an order"""
    from multistore.utils.pdf import generate_invoice_pdf

    order = _get_order(db, order_id)
    if not _can_view(db, user, order):
        raise HTTPException(status_code=403, detail="Not authorized")

    pdf_buffer = generate_invoice_pdf(order)
    return Response(
        content=pdf_buffer.getvalue(),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=invoice_{order.order_number}.pdf"}
    )

@router.get("/vendor/orders")
def get_vendor_orders(vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    orders = db.query(Order).filter(Order.vendor_id == vendor.id).order_by(Order.created_at.desc()).all()
    return [order_to_dict(o) for o in orders]
