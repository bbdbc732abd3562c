# catalog/services/slugs.py
from __future__ import annotations

import re
from typing import Optional

from django.utils.text import slugify

# Только латиница в нижнем регистре, цифры и одиночные дефисы между ними
SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# пробелы и дефисы slugify уже схлопнул; остаются подчёркивания вперемешку с дефисами
_SEPARATORS = re.compile(r"[_-]+")


def slugify_name(text: Optional[str]) -> str:
    """Слаг из названия: «  Café  Deluxe_2 » -> «cafe-deluxe-2»."""
    if not text:
        return ""
    # slugify уже выкидывает спецсимволы; подчёркивания тоже превращаем в дефис
    slug = slugify(text.strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(SLUG_PATTERN.match(value or ""))


class SlugTracker:
    """Состояние поля slug в форме продукта.

    Два состояния:
      - AUTO   — slug выводится из названия;
      - MANUAL — пользователь правил slug руками, больше его не трогаем.

    Переход AUTO -> MANUAL происходит при первой ручной правке,
    обратно — только через reset() (закрытие/очистка формы).
    """

    AUTO = "auto"
    MANUAL = "manual"
    STATES = (AUTO, MANUAL)

    def __init__(self, state: str = AUTO):
        if state not in self.STATES:
            state = self.AUTO
        self.state = state

    @property
    def is_auto(self) -> bool:
        return self.state == self.AUTO

    def edit_slug(self) -> None:
        self.state = self.MANUAL

    def reset(self) -> None:
        self.state = self.AUTO

    def resolve(self, name: str, slug: str, original_name: Optional[str] = None) -> str:
        """Итоговый slug для сохранения.

        В режиме AUTO slug пересчитывается из name. Для редактирования
        (original_name задан) пересчёт идёт только если название поменялось.
        Пустой slug при непустом названии всегда выводится из названия.
        """
        slug = (slug or "").strip()
        if not self.is_auto:
            return slug or slugify_name(name)
        if original_name is not None and name == original_name and slug:
            return slug
        return slugify_name(name) or slug
