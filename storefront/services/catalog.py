import re
from typing import Optional

from slugify import slugify

HEX_COLOR = re.compile(r"#[0-9A-F]{6}", re.IGNORECASE)


def normalize_size_name(name: str) -> str:
    return name.strip().upper()


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR.fullmatch(value))


def slug_from_name(name: str) -> str:
    # "T-Shirts & Tops" -> "t-shirts-tops"
    return slugify(name, lowercase=True)


def parse_int(value, default: int = 0) -> Optional[int]:
    """
    Integer from a JSON number or a numeric string ("2", " 3 ", 4.0).
    Returns None when the value is not a number.
    """
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_price(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def clean_sku(sku: Optional[str]) -> Optional[str]:
    if sku is None or not sku.strip():
        return None
    return sku.strip()


def join_rows(product_id: int, key: str, ids) -> list:
    return [{"product_id": product_id, key: i, "available": True} for i in ids]
