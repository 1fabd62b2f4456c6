from translator_client.core.errors import ValidationError
from translator_client.models.upload import SelectedFile

SUPPORTED_EXTENSION = "pdf"
PDF_CONTENT_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def ensure_pdf(file: SelectedFile) -> None:
    """التحقق من أن الملف المختار هو PDF (من الامتداد، دون اعتبار لحالة الأحرف)."""
    if file.extension != SUPPORTED_EXTENSION:
        raise ValidationError("يرجى اختيار ملف PDF.")


def ensure_size(file: SelectedFile, limit: int = MAX_UPLOAD_BYTES) -> None:
    if file.size_bytes > limit:
        raise ValidationError(f"يجب أن يكون حجم الملف أقل من {limit // (1024 * 1024)} ميغابايت.")


def ensure_readable(file: SelectedFile) -> None:
    if file.data is None and (file.path is None or not file.path.is_file()):
        raise ValidationError(f"الملف {file.name} غير موجود أو لا يمكن قراءته.")


def validate_document(file: SelectedFile) -> None:
    ensure_pdf(file)
    ensure_size(file)
    ensure_readable(file)


def describe_file(file: SelectedFile) -> str:
    return f"{file.name} ({file.size_bytes / 1024 / 1024:.2f} MB)"
