from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Dict, Any
from datetime import datetime

# Form checkboxes post "on" when ticked
TRUTHY_FORM_VALUES = {"on", "true", "1", "yes"}
FALSY_FORM_VALUES = {"", "off", "false", "0", "no"}

def coerce_flag(value: Any) -> bool:
    """Read a yes/no flag sent as a JSON bool, 0/1, a form string or nothing."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUTHY_FORM_VALUES:
            return True
        if text in FALSY_FORM_VALUES:
            return False
    raise ValueError(f"{value!r} is not a valid yes/no value")

class Address(BaseModel):
    """Model for a stored shipping address"""
    id: str
    street: str
    city: str
    state: str
    zip: str
    country: str
    isDefault: bool = False

    @field_validator("isDefault", mode="before")
    @classmethod
    def missing_flag_is_false(cls, value: Any) -> bool:
        return coerce_flag(value)

class AddressUpdateRequest(BaseModel):
    """Field values for editing one shipping address"""
    street: str = Field(..., min_length=3, max_length=200, description="Street address")
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100, description="State or province")
    zip: str = Field(..., min_length=3, max_length=20, description="ZIP or postal code")
    country: str = Field(..., min_length=1, max_length=100)
    isDefault: bool = Field(False, description="Make this the default shipping address")

    @field_validator("isDefault", mode="before")
    @classmethod
    def coerce_form_checkbox(cls, value: Any) -> bool:
        return coerce_flag(value)

class AddressBookResponse(BaseModel):
    """The committed list of a user's shipping addresses"""
    shippingAddresses: List[Address]
    defaultAddressId: Optional[str] = None

class CreateAccountRequest(BaseModel):
    """Sign-up data for a new storefront account"""
    firstName: str = Field(..., min_length=1, max_length=100)
    lastName: str = Field(..., min_length=1, max_length=100)
    email: str
    phoneCountryCode: Optional[str] = None
    phoneNumber: Optional[str] = None
    street: str = Field(..., min_length=3, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip: str = Field(..., min_length=3, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)

class User(BaseModel):
    """Model for a user profile document"""
    uid: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    displayName: Optional[str] = None
    email: str
    countryCode: Optional[str] = None
    phoneNumber: Optional[str] = None
    shippingAddresses: List[Address] = []
    wishlistedProductIds: List[str] = []
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True

class Product(BaseModel):
    """Model for a catalog product"""
    id: str
    name: str
    description: str = ""
    price: float = 0
    imageUrls: List[str] = []
    videoUrl: Optional[str] = None
    category: str = "Uncategorized"
    brand: Optional[str] = None

class OrderItem(BaseModel):
    """A line item, priced at the time of purchase"""
    productId: str
    name: str
    quantity: int
    price: float
    imageUrl: Optional[str] = None

class Order(BaseModel):
    """Model for a placed order"""
    id: str
    userId: str
    orderDate: Optional[datetime] = None
    items: List[OrderItem] = []
    totalAmount: float = 0
    shippingAddress: Optional[Dict[str, Any]] = Field(None, description="A copy of the shipping address for this order")

class WishlistResponse(BaseModel):
    """Product IDs on a user's wishlist"""
    user_id: str
    wishlistedProductIds: List[str]
