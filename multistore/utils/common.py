import uuid
import random
import string
from datetime import datetime, timezone

def generate_id():
    return str(uuid.uuid4())

def utcnow():
    """Naive UTC timestamp, comparable with values read back from the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def generate_order_number():
    """Generate a unique order number"""
    timestamp = datetime.now().strftime("%y%m%d")
    random_part = ''.join(random.choices(string.digits, k=6))
    return f"ORD{timestamp}{random_part}"

def generate_otp():
    """Generate a 6-digit OTP"""
    return str(random.SystemRandom().randint(100000, 999999))

def generate_invoice_number(order_number: str):
    return order_number.replace("ORD", "INV", 1)

def row_to_dict(obj, exclude=()):
    """Column values of an ORM row as a plain dict"""
    return {c.name: getattr(obj, c.name) for c in obj.__table__.columns if c.name not in exclude}
