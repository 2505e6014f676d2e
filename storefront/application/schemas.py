from pydantic import BaseModel, EmailStr, Field
from typing import Dict, Optional
from datetime import datetime

class ProductCreate(BaseModel):
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    price: float = Field(..., gt=0)
    description: str = ""
    image: Optional[str] = None
    specs: Dict[str, str] = {}
    in_stock: bool = True
    rating: float = Field(0.0, ge=0, le=5)
    review_count: int = Field(0, ge=0)
    # Opening stock for the inventory ledger
    stock: Optional[int] = Field(None, ge=0)

class ProductUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    description: Optional[str] = None
    image: Optional[str] = None
    specs: Optional[Dict[str, str]] = None
    in_stock: Optional[bool] = None

class ProductRead(BaseModel):
    id: str
    name: str
    category: str
    price: float
    description: str = ""
    image: Optional[str] = None
    specs: Dict[str, str] = {}
    in_stock: bool
    rating: float
    review_count: int

    class Config:
        from_attributes = True

class CategoryStatsRead(BaseModel):
    count: int
    total_price: float
    avg_price: float
    total_rating: float
    avg_rating: float

class PriceRangeRead(BaseModel):
    min: float
    max: float
    average: float

class StockRead(BaseModel):
    product_id: str
    quantity: int
    in_stock: bool

class StockAdjust(BaseModel):
    delta: int

class CustomerCreate(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

class CustomerRead(BaseModel):
    id: int
    email: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class OrderItemCreate(BaseModel):
    product_id: str
    quantity: int = Field(..., ge=1)
    # Defaults to the current catalog price when omitted
    unit_price: Optional[float] = Field(None, gt=0)

class OrderCreate(BaseModel):
    customer_id: int
    items: list[OrderItemCreate] = Field(..., min_length=1)
    shipping_address: Optional[str] = None
    notes: Optional[str] = None

class CheckoutRequest(BaseModel):
    session_id: str = Field(..., min_length=1)
    customer_id: int
    shipping_address: Optional[str] = None
    notes: Optional[str] = None

class OrderCreated(BaseModel):
    order_id: int
    order_number: str
    total_amount: float
    message: str = "Order created successfully"

class OrderStatusUpdate(BaseModel):
    status: str

class OrderItemRead(BaseModel):
    id: int
    product_id: str
    quantity: int
    unit_price: float
    subtotal: float
    product_name_snapshot: Optional[str] = None

    class Config:
        from_attributes = True

class OrderRead(BaseModel):
    id: int
    order_number: str
    customer_id: int
    status: str
    total_amount: float
    shipping_address: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class OrderDetails(BaseModel):
    order: OrderRead
    items: list[OrderItemRead]

class CartAdd(BaseModel):
    session_id: str = Field(..., min_length=1)
    customer_id: Optional[int] = None
    product_id: str
    quantity: int = 1

class CartQuantityUpdate(BaseModel):
    quantity: int

class CartLineRead(BaseModel):
    session_id: str
    product_id: str
    name: str
    price: float
    image: Optional[str] = None
    category: Optional[str] = None
    quantity: int
    added_at: datetime

class CartStatsRead(BaseModel):
    item_count: int
    total_items: int
    total_price: float

class ReviewCreate(BaseModel):
    product_id: str
    customer_id: Optional[int] = None
    rating: int
    review_text: Optional[str] = None

class ReviewRead(BaseModel):
    id: int
    product_id: str
    customer_id: Optional[int] = None
    rating: int
    review_text: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserRead(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserRead

class Message(BaseModel):
    message: str
