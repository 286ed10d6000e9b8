import enum


class DetailType(str, enum.Enum):
    """ Which product detail table a category's products are written to. """
    MOBILE = "mobile"
    APPAREL = "apparel"
    ACCESSORIES = "accessories"
