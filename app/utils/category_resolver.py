from typing import Any, NamedTuple, Optional, Sequence, Union
from uuid import UUID


class ResolvedCategoryIds(NamedTuple):
    category_id: Optional[UUID]
    subcategory_id: Optional[UUID]


def _first_by_name(name: Optional[str], items: Sequence[Any]) -> Optional[Any]:
    if not name:
        return None
    # duplicate names are not prevented by a constraint; list order decides
    return next((item for item in items if item.name == name), None)


def get_category_by_name(category_name: Optional[str], categories: Sequence[Any]) -> Optional[Any]:
    return _first_by_name(category_name, categories)


def first_selected_name(names: Union[str, Sequence[str], None]) -> Optional[str]:
    """First non-blank name of a form selection, which may be a single string."""
    if isinstance(names, str):
        names = [names]
    return next((name for name in names or [] if name and name.strip()), None)


def resolve_category_ids(
    category_name: Optional[str],
    subcategory_names: Union[str, Sequence[str], None],
    categories: Sequence[Any],
    subcategories: Sequence[Any],
) -> ResolvedCategoryIds:
    """
    Map the names picked in the product form to category ids.

    Works on lists that were already fetched; no query is issued here. Only the
    first non-blank subcategory is used, and it is looked up among the children
    of the resolved category. Names without a match resolve to None and it is
    up to the caller to refuse to continue.
    """
    category = get_category_by_name(category_name, categories)

    subcategory = None
    if category is not None:
        children = [sub for sub in subcategories if sub.parent_category_id == category.id]
        subcategory = _first_by_name(first_selected_name(subcategory_names), children)

    return ResolvedCategoryIds(
        category_id=category.id if category is not None else None,
        subcategory_id=subcategory.id if subcategory is not None else None,
    )
