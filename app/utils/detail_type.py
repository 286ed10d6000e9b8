from typing import Any, Optional, Type

from ..enums import DetailType
from ..models import AccessoriesDetails, ApparelDetails, MobileDetails


DETAIL_MODELS = {
    DetailType.MOBILE: MobileDetails,
    DetailType.APPAREL: ApparelDetails,
    DetailType.ACCESSORIES: AccessoriesDetails,
}


def get_detail_type(category: Optional[Any]) -> Optional[DetailType]:
    """Detail schema for products in ``category``; None means no detail record is written."""
    if category is None or not category.detail_type:
        return None

    return DetailType(category.detail_type)


def get_detail_model(detail_type: Optional[DetailType]) -> Optional[Type]:
    if detail_type is None:
        return None

    return DETAIL_MODELS[DetailType(detail_type)]
