from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    is_global: bool = False
    status: str = "active"

class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    parent_id: Optional[str] = None
    status: Optional[str] = None

class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    sku: str = Field(min_length=1, max_length=100)
    mrp: Decimal = Field(ge=0)
    selling_price: Decimal = Field(ge=0)
    purchase_price: Decimal = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    weight: Optional[Decimal] = None
    length: Optional[Decimal] = None
    breadth: Optional[Decimal] = None
    height: Optional[Decimal] = None
    status: str = "active"

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    image_url: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

class VariantBase(BaseModel):
    sku: str = Field(min_length=1, max_length=100)
    mrp: Optional[Decimal] = None
    selling_price: Optional[Decimal] = None
    purchase_price: Optional[Decimal] = None
    weight: Optional[Decimal] = None
    length: Optional[Decimal] = None
    breadth: Optional[Decimal] = None
    height: Optional[Decimal] = None

class VariantMatrixPreview(BaseModel):
    base: VariantBase
    colors: List[str] = []
    sizes: List[str] = []

class VariantMatrixGenerate(BaseModel):
    colors: List[str] = []
    sizes: List[str] = []
    replace: bool = False

class VariantCreate(BaseModel):
    sku: str = Field(min_length=1, max_length=100)
    mrp: Decimal = Field(ge=0)
    selling_price: Decimal = Field(ge=0)
    purchase_price: Decimal = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    weight: Optional[Decimal] = None
    length: Optional[Decimal] = None
    breadth: Optional[Decimal] = None
    height: Optional[Decimal] = None
    color: Optional[str] = None
    size: Optional[str] = None
    material: Optional[str] = None
    style: Optional[str] = None
    image_urls: List[str] = []
    status: str = "active"

class VariantUpdate(BaseModel):
    sku: Optional[str] = Field(default=None, min_length=1, max_length=100)
    mrp: Optional[Decimal] = Field(default=None, ge=0)
    selling_price: Optional[Decimal] = Field(default=None, ge=0)
    purchase_price: Optional[Decimal] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    weight: Optional[Decimal] = None
    length: Optional[Decimal] = None
    breadth: Optional[Decimal] = None
    height: Optional[Decimal] = None
    color: Optional[str] = None
    size: Optional[str] = None
    material: Optional[str] = None
    style: Optional[str] = None
    image_urls: Optional[List[str]] = None
    status: Optional[str] = None
