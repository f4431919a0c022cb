from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import func

from multistore.db.session import get_db
from multistore.api.v1.endpoints.auth import admin_required, vendor_required
from multistore.api.v1.endpoints.orders import order_to_dict
from multistore.core.config import settings
from multistore.models.order import Order
from multistore.models.product import Product, ProductVariant
from multistore.models.user import User
from multistore.models.vendor import Vendor
from multistore.services.pricing import to_money

router = APIRouter()

def _revenue(query):
    return to_money(query.filter(Order.status != "cancelled").with_entities(func.sum(Order.total)).scalar() or 0)

@router.get("/admin/dashboard")
def get_admin_dashboard(admin: dict = Depends(admin_required), db: Session = Depends(get_db)):
    status_counts = dict(
        db.query(Order.status, func.count(Order.id)).group_by(Order.status).all()
    )

    return {
        "totals": {
            "users": db.query(User).count(),
            "vendors": db.query(Vendor).count(),
            "active_vendors": db.query(Vendor).filter(Vendor.status == "active").count(),
            "products": db.query(Product).count(),
            "orders": db.query(Order).count(),
        },
        "revenue": _revenue(db.query(Order)),
        "orders_by_status": status_counts,
        "recent_orders": [order_to_dict(o) for o in db.query(Order).order_by(Order.created_at.desc()).limit(10).all()],
    }

@router.get("/vendor/dashboard")
def get_vendor_dashboard(vendor: Vendor = Depends(vendor_required), db: Session = Depends(get_db)):
    orders = db.query(Order).filter(Order.vendor_id == vendor.id)

    low_stock = db.query(ProductVariant).join(Product).filter(
        Product.vendor_id == vendor.id,
        ProductVariant.stock <= settings.LOW_STOCK_THRESHOLD
    ).order_by(ProductVariant.stock).all()

    return {
        "vendor": {"id": vendor.id, "name": vendor.name, "domain": vendor.domain},
        "totals": {
            "products": db.query(Product).filter(Product.vendor_id == vendor.id).count(),
            "orders": orders.count(),
            "pending_orders": orders.filter(Order.status == "pending").count(),
        },
        "revenue": _revenue(orders),
        "low_stock": [{"id": v.id, "sku": v.sku, "product_id": v.product_id, "stock": v.stock} for v in low_stock],
    }
