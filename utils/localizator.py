import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

import config
from enums.message_scope import MessageScope

L10N_DIR = Path(__file__).parent.parent / "l10n"


@lru_cache(maxsize=8)
def _load_language(language: str) -> dict:
    with open(L10N_DIR / f"{language}.json", "r", encoding="UTF-8") as f:
        return json.loads(f.read())


class Localizator:

    @staticmethod
    def get_text(scope: MessageScope, key: str, lang: Optional[str] = None) -> str:
        """
        Get localized text for given scope and key.

        Args:
            scope: Message scope (CUSTOMER, ADMIN, COMMON)
            key: Localization key
            lang: Optional language code (e.g., "en", "fr").
                  If None, uses config.STORE_LANGUAGE.

        Returns:
            Localized text string

        Example:
            text = Localizator.get_text(MessageScope.CUSTOMER, "cart_item_added", lang="en")
        """
        language = lang if lang is not None else config.STORE_LANGUAGE
        data = _load_language(language)
        return data[scope.value][key]

    @staticmethod
    def get_currency_symbol(lang: Optional[str] = None) -> str:
        return Localizator.get_text(MessageScope.COMMON, f"{config.CURRENCY.value.lower()}_symbol", lang=lang)
