# storeadmin/schemas.py
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List

# 👤 Пользователь
class UserBase(BaseModel):
    email: EmailStr
    full_name: str

class UserCreate(UserBase):
    password: str

class UserOut(UserBase):
    id: int
    is_admin: bool = True
    class Config:
        from_attributes = True


class UserLogin(BaseModel):
    email: EmailStr
    password: str


# 🛍️ Товар
class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    image_url: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    brand_name: Optional[str] = None

class ProductCreate(ProductBase):
    # пусть при создании можно задать остаток; по умолчанию 0
    stock: int = Field(default=0, ge=0)

class ProductOut(ProductBase):
    id: int
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


# 📊 Дашборд администратора
class SubcategoryGroup(BaseModel):
    name: Optional[str]
    count: int
    products: List[ProductOut]


class CategoryGroup(BaseModel):
    name: Optional[str]
    count: int
    # on the wire the subcategory groups travel under "products"
    subcategories: List[SubcategoryGroup] = Field(alias="products")
    class Config:
        populate_by_name = True


class BrandGroup(BaseModel):
    name: Optional[str]
    count: int
    products: List[ProductOut]


class DashboardOut(BaseModel):
    count_overall_products: int = Field(alias="countOverallProducts")
    formatted_categories: List[CategoryGroup] = Field(alias="formattedCategories")
    formatted_brands: List[BrandGroup] = Field(alias="formattedBrands")
    count_total_users: int = Field(alias="countTotalUsers")
    class Config:
        populate_by_name = True
