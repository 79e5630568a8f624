from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, condecimal, model_validator

from precosmart.core.config import settings
from precosmart.core.units import Unit


Money = condecimal(max_digits=12, decimal_places=2)
Quantity = condecimal(max_digits=14, decimal_places=4, gt=0)


class CategoryRef(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class CategoryIn(BaseModel):
    name: str
    description: Optional[str] = None


class CategoryOut(CategoryIn):
    id: int
    organization_id: int

    class Config:
        from_attributes = True


class ItemBase(BaseModel):
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    unit: Unit
    price: Money
    discounted_price: Optional[Money] = None
    active: bool = True

    @model_validator(mode="after")
    def check_prices(self):
        if self.price <= 0:
            raise ValueError("O preço deve ser maior que zero")
        if self.discounted_price is not None:
            if self.discounted_price <= 0:
                raise ValueError("O preço com desconto deve ser maior que zero")
            if self.discounted_price >= self.price:
                raise ValueError("O preço com desconto deve ser menor que o preço original")
        return self


class ItemOut(ItemBase):
    id: int
    organization_id: int
    category: Optional[CategoryRef] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PriceHistoryOut(BaseModel):
    id: int
    old_price: Decimal
    new_price: Decimal
    changed_at: datetime

    class Config:
        from_attributes = True


class ProductBase(BaseModel):
    name: str
    description: Optional[str] = None
    category_id: Optional[int] = None
    sale_price: Money = Decimal("0")
    promotional_price: Optional[Money] = None
    active: bool = True


class ProductOut(ProductBase):
    id: int
    organization_id: int
    category: Optional[CategoryRef] = None
    total_cost: Decimal
    margin: Decimal
    low_margin: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def flag_low_margin(self):
        self.low_margin = self.margin < Decimal(str(settings.low_margin_threshold))
        return self


class LineItemOut(BaseModel):
    id: int
    name: str
    unit: str
    price: Decimal
    discounted_price: Optional[Decimal] = None
    category: Optional[CategoryRef] = None

    class Config:
        from_attributes = True


class LineIn(BaseModel):
    item_id: int
    quantity: Quantity
    unit: Optional[Unit] = None


class LineUpdate(BaseModel):
    quantity: Quantity


class LineOut(BaseModel):
    id: int
    product_id: int
    item_id: int
    quantity: Decimal
    unit: str
    cost: Decimal
    item: Optional[LineItemOut] = None

    class Config:
        from_attributes = True


class ProductDetailOut(ProductOut):
    lines: List[LineOut] = []
