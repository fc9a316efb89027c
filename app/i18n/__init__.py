from app.i18n.translator import Translator, lookup, get_translator, LANGUAGES, DEFAULT_LANGUAGE
from app.i18n.crops import CROP_TYPES, crop_display_name, crop_image_id

__all__ = [
    "Translator",
    "lookup",
    "get_translator",
    "LANGUAGES",
    "DEFAULT_LANGUAGE",
    "CROP_TYPES",
    "crop_display_name",
    "crop_image_id",
]
