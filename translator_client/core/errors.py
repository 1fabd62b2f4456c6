from __future__ import annotations

from typing import Optional


class TranslatorError(Exception):
    """الخطأ الأساسي لعميل الترجمة، يحمل رسالة جاهزة للعرض على المستخدم."""

    kind = "error"
    default_message = "حدث خطأ غير متوقع."

    def __init__(self, message: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(TranslatorError):
    """ملف غير صالح أو طلب غير مسموح به محليًا؛ لا يصل إلى الشبكة أبدًا."""

    kind = "validation"
    default_message = "المدخلات غير صالحة."


class AuthError(TranslatorError):
    kind = "auth"
    default_message = "فشل التحقق من الهوية."


class IntentError(TranslatorError):
    """رفض الخادم طلب رابط الرفع."""

    kind = "intent"
    default_message = "تعذر الحصول على رابط الرفع."

    def __init__(self, reason: Optional[str] = None, *, status_code: Optional[int] = None) -> None:
        self.reason = reason
        super().__init__(reason, status_code=status_code)


class TransferError(TranslatorError):
    kind = "transfer"
    default_message = "فشل رفع الملف إلى التخزين."


class FetchError(TranslatorError):
    kind = "fetch"
    default_message = "تعذر جلب بيانات المهام."


class DownloadUnavailableError(TranslatorError):
    kind = "download"
    default_message = "رابط التنزيل غير متاح."
