from typing import Any, Dict, List

INHERITED_FIELDS = ("mrp", "selling_price", "purchase_price", "weight", "length", "breadth", "height")

def clean_values(values) -> List[str]:
    """Trim, drop blanks and drop repeats while keeping first-seen order"""
    seen = []
    for value in values or []:
        value = (value or "").strip()
        if value and value not in seen:
            seen.append(value)
    return seen

def _variant(base: Dict[str, Any], sku: str, color: str, size: str) -> Dict[str, Any]:
    variant = {
        "sku": sku,
        "color": color,
        "size": size,
        "stock": 0,
        "image_urls": [],
    }
    for field in INHERITED_FIELDS:
        variant[field] = base.get(field)
    return variant

def build_variant_matrix(base: Dict[str, Any], colors=None, sizes=None) -> List[Dict[str, Any]]:
    """Expand colors x sizes into variant rows for a base product.

    ``base`` carries the parent ``sku`` and the pricing/dimension fields every
    variant inherits. SKUs are ``BASE-COLOR-SIZE`` with upper-cased parts, or
    a single suffix when only one axis is given.
    """
    colors = clean_values(colors)
    sizes = clean_values(sizes)
    base_sku = base["sku"]

    if colors and sizes:
        return [
            _variant(base, f"{base_sku}-{color.upper()}-{size.upper()}", color, size)
            for color in colors
            for size in sizes
        ]
    if colors:
        return [_variant(base, f"{base_sku}-{color.upper()}", color, "") for color in colors]
    if sizes:
        return [_variant(base, f"{base_sku}-{size.upper()}", "", size) for size in sizes]
    return []
