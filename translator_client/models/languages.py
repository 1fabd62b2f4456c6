from typing import NamedTuple


class Language(NamedTuple):
    code: str
    name: str


LANGUAGES: tuple[Language, ...] = (
    Language("es", "Spanish"),
    Language("fr", "French"),
    Language("de", "German"),
    Language("it", "Italian"),
    Language("pt", "Portuguese"),
    Language("zh", "Chinese (Simplified)"),
    Language("zh-TW", "Chinese (Traditional)"),
    Language("ja", "Japanese"),
    Language("ko", "Korean"),
    Language("ar", "Arabic"),
    Language("hi", "Hindi"),
    Language("ru", "Russian"),
    Language("nl", "Dutch"),
    Language("pl", "Polish"),
    Language("sv", "Swedish"),
    Language("tr", "Turkish"),
    Language("vi", "Vietnamese"),
    Language("th", "Thai"),
    Language("id", "Indonesian"),
    Language("el", "Greek"),
)

_BY_CODE = {language.code: language for language in LANGUAGES}


def is_supported(code: str) -> bool:
    return code in _BY_CODE


def language_name(code: str) -> str:
    """اسم اللغة للعرض، أو الرمز نفسه إن لم تكن ضمن القائمة."""
    language = _BY_CODE.get(code)
    return language.name if language else code
