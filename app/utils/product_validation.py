import math
from typing import Any, Dict, Sequence

from pydantic import BaseModel

from ..enums import DetailType
from ..schemas.product import ProductFormData
from .category_resolver import first_selected_name, get_category_by_name
from .detail_type import get_detail_type
from .form_utils import is_blank, safe_parse_float, safe_parse_int


MOBILE_REQUIRED_FIELDS = {
    "brand": "Brand is required",
    "compatible_model": "Compatible model is required",
    "type": "Type is required",
    "color": "Color is required",
}


class ProductValidationResult(BaseModel):
    is_valid: bool
    errors: Dict[str, str] = {}


def _is_positive_number(value: Any) -> bool:
    number = safe_parse_float(value)
    return number is not None and math.isfinite(number) and number > 0


def validate_product_form(form_data: ProductFormData, categories: Sequence[Any]) -> ProductValidationResult:
    """
    Check a product form before anything is written.

    ``categories`` are the root categories known to the admin screen; the chosen
    one decides whether apparel or mobile fields are mandatory.
    Returns every failing field at once, keyed by field name.
    """
    errors: Dict[str, str] = {}

    if is_blank(form_data.name):
        errors["name"] = "Product name is required"

    if is_blank(form_data.description):
        errors["description"] = "Product description is required"

    if not _is_positive_number(form_data.price):
        errors["price"] = "Valid price is required"

    if not is_blank(form_data.original_price) and not _is_positive_number(form_data.original_price):
        errors["original_price"] = "Original price must be a positive number"

    if not is_blank(form_data.stock_quantity):
        stock = safe_parse_int(form_data.stock_quantity)
        if stock is None or stock < 0:
            errors["stock_quantity"] = "Stock quantity must be a whole number of zero or more"

    category = None
    if is_blank(form_data.category):
        errors["category"] = "Category is required"
    else:
        category = get_category_by_name(form_data.category, categories)
        if category is None:
            errors["category"] = "Selected category does not exist"

    if first_selected_name(form_data.subcategories) is None:
        errors["subcategories"] = "At least one subcategory is required"

    detail_type = get_detail_type(category)

    if detail_type == DetailType.APPAREL:
        if not form_data.selected_sizes:
            errors["sizes"] = "Select at least one size"
        if not form_data.selected_fit_types:
            errors["fit_types"] = "Select at least one fit type"
        if is_blank(form_data.apparel_details.brand):
            errors["apparel_details.brand"] = "Brand is required"

    elif detail_type == DetailType.MOBILE:
        for field, message in MOBILE_REQUIRED_FIELDS.items():
            if is_blank(getattr(form_data.mobile_details, field)):
                errors[f"mobile_details.{field}"] = message

    return ProductValidationResult(is_valid=not errors, errors=errors)
