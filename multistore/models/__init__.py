from multistore.db.base import Base
from multistore.models.user import User, OtpCode
from multistore.models.vendor import Vendor, CustomDomain
from multistore.models.product import Category, Product, ProductVariant
from multistore.models.order import Order, OrderItem, CartItem
