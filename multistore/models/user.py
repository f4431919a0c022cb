from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from multistore.db.base import Base
from multistore.utils.common import generate_id, utcnow

ROLES = ("buyer", "seller", "admin", "super_admin")
ADMIN_ROLES = ("admin", "super_admin")

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    is_email_verified = Column(Boolean, default=False)
    role = Column(String(20), nullable=False, default="buyer") # super_admin, admin, seller, buyer
    is_deletable = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_login_at = Column(DateTime, nullable=True)
    permissions = Column(JSON, default=dict)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    creator = relationship("User", remote_side=[id])
    vendors = relationship("Vendor", back_populates="owner", foreign_keys="Vendor.owner_id")
    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan")

    @property
    def full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.email

class OtpCode(Base):
    __tablename__ = "otp_codes"

    id = Column(String(36), primary_key=True, default=generate_id)
    email = Column(String(255), index=True, nullable=False)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow)
