"""
Field definitions for the admin panel's generic entity form.

Each entity lists its editable fields explicitly instead of the form
guessing them from whatever object it was handed.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel

from flowershop.constants.order_status import ADMIN_STATUSES, PAYMENT_STATUSES


class FormField(BaseModel):
    name: str
    label: str
    type: str  # text, textarea, number, integer, date, select, relation, list
    required: bool = False
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None
    options: Optional[List[str]] = None
    relation: Optional[str] = None  # entity the id points to


class EntityForm(BaseModel):
    entity: str
    endpoint: str
    fields: List[FormField]


ENTITY_FORMS: Dict[str, EntityForm] = {
    "categories": EntityForm(
        entity="categories",
        endpoint="/api/categories",
        fields=[
            FormField(name="name", label="Name", type="text", required=True),
        ],
    ),
    "subcategories": EntityForm(
        entity="subcategories",
        endpoint="/api/subcategories",
        fields=[
            FormField(name="name", label="Name", type="text", required=True),
            FormField(name="category_id", label="Category", type="relation", required=True, relation="categories"),
        ],
    ),
    "products": EntityForm(
        entity="products",
        endpoint="/api/products",
        fields=[
            FormField(name="name", label="Name", type="text", required=True),
            FormField(name="description", label="Description", type="textarea"),
            FormField(name="price", label="Price", type="number", required=True, min=0),
            FormField(name="subcategory_id", label="Subcategory", type="relation", relation="subcategories"),
        ],
    ),
    "bouquets": EntityForm(
        entity="bouquets",
        endpoint="/api/products/bouquet",
        fields=[
            FormField(name="name", label="Name", type="text", required=True),
            FormField(name="description", label="Description", type="textarea"),
            FormField(name="price", label="Price (empty = sum of flowers)", type="number", min=0),
            FormField(name="subcategory_id", label="Subcategory", type="relation", relation="subcategories"),
            FormField(name="flowers", label="Flowers", type="list", required=True, relation="flowers"),
        ],
    ),
    "flowers": EntityForm(
        entity="flowers",
        endpoint="/api/flowers",
        fields=[
            FormField(name="name", label="Name", type="text", required=True),
            FormField(name="price", label="Price", type="number", required=True, min=0),
        ],
    ),
    "reviews": EntityForm(
        entity="reviews",
        endpoint="/api/reviews",
        fields=[
            FormField(name="title", label="Title", type="text", required=True),
            FormField(name="description", label="Text", type="textarea", required=True),
            FormField(name="rating", label="Rating", type="integer", required=True, min=1, max=5),
            FormField(name="parent_id", label="Product", type="relation", required=True, relation="products"),
        ],
    ),
    "users": EntityForm(
        entity="users",
        endpoint="/api/admin/users",
        fields=[
            FormField(name="name", label="Name", type="text", required=True),
            FormField(name="phone_number", label="Phone", type="text", required=True, pattern=r"^\+?[0-9]{10,15}$"),
            FormField(name="birth_date", label="Birth date", type="date"),
            FormField(name="role", label="Role", type="select", required=True, options=["user", "admin"]),
        ],
    ),
    "orders": EntityForm(
        entity="orders",
        endpoint="/api/orders/admin",
        fields=[
            FormField(
                name="status",
                label="Status",
                type="select",
                required=True,
                options=ADMIN_STATUSES,
            ),
            FormField(
                name="payment_status",
                label="Payment",
                type="select",
                required=True,
                options=PAYMENT_STATUSES,
            ),
        ],
    ),
}
