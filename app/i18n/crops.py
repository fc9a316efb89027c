# app/i18n/crops.py
from typing import Callable

CROP_TYPES = (
    "wheat",
    "corn",
    "tomatoes",
    "carrots",
    "potatoes",
    "onions",
    "rice",
    "apples",
    "lettuce",
    "soybeans",
)


def crop_display_name(crop_name: str, translate: Callable[..., str]) -> str:
    """
    Nazwa uprawy do wyswietlenia: dokladny klucz crops.<nazwa>, potem
    dopasowanie czesciowe ("Organic Wheat" -> wheat), na koncu oryginal.
    """
    if not crop_name:
        return crop_name

    key_name = crop_name.lower().strip()

    direct_key = f"crops.{key_name}"
    direct = translate(direct_key)
    if direct != direct_key:
        return direct

    found = next((c for c in CROP_TYPES if c in key_name), None)
    if found:
        partial_key = f"crops.{found}"
        partial = translate(partial_key)
        if partial != partial_key:
            return partial

    return crop_name


def crop_image_id(crop_name: str) -> str | None:
    """Domyslny obrazek dla znanej uprawy (klucz z CROP_TYPES), inaczej None."""
    key_name = (crop_name or "").lower().strip()
    if key_name in CROP_TYPES:
        return f"market-{key_name}"
    return None
