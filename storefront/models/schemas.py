from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, EmailStr, Field

# Request bodies keep their fields optional: handlers report missing values
# with the storefront's own 400 messages.

Number = Union[int, float, str]


class CategoryIn(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None


class ColorIn(BaseModel):
    name: Optional[str] = None
    value: Optional[str] = None


class SizeIn(BaseModel):
    name: Optional[str] = None
    display_order: Optional[Number] = 0


class ProductIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Number] = None
    images: Optional[List[str]] = None
    category: Optional[str] = None
    selectedColors: Optional[List[int]] = None
    selectedSizes: Optional[List[int]] = None
    stock_quantity: Optional[Number] = None
    sku: Optional[str] = None
    is_featured: Optional[bool] = None
    is_active: Optional[bool] = None


class CartProduct(BaseModel):
    id: int
    name: str
    price: float


class CartItem(BaseModel):
    product: CartProduct
    quantity: int = Field(1, ge=1)
    selectedColor: Optional[str] = None
    selectedSize: Optional[str] = None


class CustomerInfo(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ShippingInfo(BaseModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    country: Optional[str] = None


class PaymentInfo(BaseModel):
    method: Optional[str] = None


class OrderCreate(BaseModel):
    user_id: Optional[str] = None
    cart_items: Optional[List[CartItem]] = None
    customer_info: Optional[CustomerInfo] = None
    shipping_info: Optional[ShippingInfo] = None
    payment_info: Optional[PaymentInfo] = None
    subtotal: Optional[float] = None
    shipping_cost: Optional[float] = None
    total_amount: Optional[float] = None


class OrderCancel(BaseModel):
    user_id: Optional[str] = None


class OrderUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None
    payment_status: Optional[str] = None


class SampleOrderIn(BaseModel):
    user_id: Optional[str] = None


class AddressIn(BaseModel):
    id: Optional[Union[int, str]] = None
    user_id: Optional[str] = None
    title: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    is_default: Optional[bool] = None


class ProfileIn(BaseModel):
    user_id: Optional[str] = None
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class EmailLookup(BaseModel):
    email: Optional[str] = None


class MakeAdminIn(BaseModel):
    email: Optional[str] = None
    confirm: Optional[str] = None


class ConfirmIn(BaseModel):
    confirm: Optional[str] = None


def provided_fields(model: BaseModel) -> Dict[str, Any]:
    """Fields the client actually sent, for partial updates."""
    return model.model_dump(exclude_unset=True)
