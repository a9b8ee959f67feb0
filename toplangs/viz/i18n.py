"""
Localized strings for the language card.

Translations are keyed by message id, then by locale. Lookups for a locale
without a translation fall back to English.
"""
from typing import Optional

FALLBACK_LOCALE = "en"

LANG_CARD_LOCALES: dict[str, dict[str, str]] = {
    "langcard.title": {
        "en": "Most Used Languages",
        "cn": "最常用的语言",
        "de": "Meist verwendete Sprachen",
        "es": "Lenguajes más usados",
        "fr": "Langages les plus utilisés",
        "it": "Linguaggi più utilizzati",
        "ja": "最もよく使っている言語",
        "pt-br": "Linguagens mais usadas",
        "ru": "Наиболее используемые языки",
    },
    "langcard.nodata": {
        "en": "No languages data.",
        "cn": "没有语言数据。",
        "de": "Keine Sprachdaten.",
        "es": "Sin datos de lenguajes.",
        "fr": "Aucune donnée sur les langues.",
        "it": "Nessun dato sulle lingue.",
        "ja": "言語データがありません。",
        "pt-br": "Sem dados de linguagens.",
        "ru": "Нет данных о языках.",
    },
}

AVAILABLE_LOCALES = sorted(
    {locale for messages in LANG_CARD_LOCALES.values() for locale in messages}
)


def is_locale_available(locale: Optional[str]) -> bool:
    return bool(locale) and locale.lower() in AVAILABLE_LOCALES


class I18n:
    """Message lookup bound to one locale."""

    def __init__(
        self,
        locale: Optional[str] = None,
        translations: Optional[dict[str, dict[str, str]]] = None,
    ) -> None:
        self.locale = (locale or FALLBACK_LOCALE).lower()
        self.translations = translations if translations is not None else LANG_CARD_LOCALES

    def t(self, message_id: str) -> str:
        """Translate ``message_id``.

        Raises:
            KeyError: If no translation exists for the message id at all.
        """
        messages = self.translations.get(message_id)
        if not messages:
            raise KeyError(f"{message_id} Translation string not found")
        return messages.get(self.locale) or messages[FALLBACK_LOCALE]
