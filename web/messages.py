"""
Client-Facing Messages - Arabic and English Error Texts

The site is Arabic-first. English is served when the client asks for it via
Accept-Language. Messages are looked up by the reason codes produced in core.
"""

from __future__ import annotations

from typing import Final, Optional

from fastapi import Request

from utils.config import Config


SUPPORTED_LOCALES: Final[tuple[str, ...]] = ("ar", "en")

MESSAGES: Final[dict[str, dict[str, str]]] = {
    # Trust
    "csrf_failed": {
        "ar": "فشل التحقق من مصدر الطلب",
        "en": "CSRF validation failed",
    },
    "unauthorized": {
        "ar": "غير مصرح",
        "en": "Unauthorized",
    },
    "method_not_allowed": {
        "ar": "الطريقة غير مسموح بها",
        "en": "Method not allowed",
    },
    # Abuse
    "rate_limited": {
        "ar": "تم تجاوز الحد الأقصى للطلبات. يرجى المحاولة بعد دقيقة.",
        "en": "Too many requests. Please try again in a minute.",
    },
    "login_rate_limited": {
        "ar": "تم تجاوز الحد الأقصى لمحاولات تسجيل الدخول. يرجى المحاولة بعد دقيقة.",
        "en": "Too many login attempts. Please try again in a minute.",
    },
    # Submission validation
    "name_required": {
        "ar": "الاسم مطلوب",
        "en": "Name is required",
    },
    "phone_invalid": {
        "ar": "رقم الجوال غير صالح",
        "en": "Invalid mobile number",
    },
    # Login
    "credentials_required": {
        "ar": "اسم المستخدم وكلمة المرور مطلوبان",
        "en": "Username and password are required",
    },
    "invalid_credentials": {
        "ar": "اسم المستخدم أو كلمة المرور غير صحيحة",
        "en": "Invalid username or password",
    },
    # Listings and uploads
    "title_required": {
        "ar": "عنوان العقار مطلوب",
        "en": "Property title is required",
    },
    "id_required": {
        "ar": "المعرف مطلوب",
        "en": "ID is required",
    },
    "not_found": {
        "ar": "العنصر غير موجود",
        "en": "Not found",
    },
    "upload_invalid": {
        "ar": "الملف واسم الملف مطلوبان",
        "en": "File and fileName are required",
    },
    "invalid_body": {
        "ar": "بيانات الطلب غير صالحة",
        "en": "Invalid request body",
    },
    # Dependency failures (generic on purpose)
    "submission_save_failed": {
        "ar": "تعذر حفظ الطلب",
        "en": "Failed to save submission",
    },
    "submissions_fetch_failed": {
        "ar": "تعذر جلب الطلبات",
        "en": "Failed to fetch submissions",
    },
    "properties_fetch_failed": {
        "ar": "تعذر جلب العقارات",
        "en": "Failed to fetch properties",
    },
    "property_save_failed": {
        "ar": "تعذر حفظ العقار",
        "en": "Failed to save property",
    },
    "property_delete_failed": {
        "ar": "تعذر حذف العقار",
        "en": "Failed to delete property",
    },
    "settings_save_failed": {
        "ar": "تعذر تحديث الإعدادات",
        "en": "Failed to update settings",
    },
    "upload_failed": {
        "ar": "تعذر رفع الصورة",
        "en": "Failed to upload image",
    },
    "server_error": {
        "ar": "خطأ في الخادم",
        "en": "Internal server error",
    },
}


def resolve_locale(request: Optional[Request]) -> str:
    """English when the client's first language preference is English."""
    default = Config.load().default_locale
    if default not in SUPPORTED_LOCALES:
        default = SUPPORTED_LOCALES[0]
    if request is None:
        return default

    accept = request.headers.get("accept-language", "")
    first = accept.split(",", 1)[0].strip().lower()
    if first.startswith("en"):
        return "en"
    if first.startswith("ar"):
        return "ar"
    return default


def message(code: str, locale: str = "ar") -> str:
    """Localised text for a reason code; unknown codes get the generic error."""
    texts = MESSAGES.get(code) or MESSAGES["server_error"]
    return texts.get(locale) or texts["ar"]


def message_for(request: Optional[Request], code: str) -> str:
    return message(code, resolve_locale(request))
