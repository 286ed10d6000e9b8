from typing import Any, Dict, List, Sequence


def map_product_images_for_api(images: Sequence[Any], is_edit: bool = False) -> List[Dict[str, Any]]:
    """
    Convert uploader image entries into the rows the create/update endpoints store.

    On create an explicit ``display_order`` is kept and missing ones fall back to
    the list position. On edit the list position always wins, since the editor
    lets the admin reorder, and existing image ids are passed through.
    """
    payload = []
    for index, image in enumerate(images):
        item: Dict[str, Any] = {}
        if is_edit and getattr(image, "id", None):
            item["id"] = image.id

        item["image_url"] = image.image_url
        item["alt_text"] = image.alt_text or ""

        display_order = getattr(image, "display_order", None)
        item["display_order"] = index if is_edit or display_order is None else display_order

        payload.append(item)

    return payload
