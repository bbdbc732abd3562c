# catalog/services/pagination.py
from __future__ import annotations
from typing import List, Tuple, Union

# Маркер пропущенного диапазона страниц (не кликабелен)
ELLIPSIS = "…"

# Меньше 5 слотов ветки окна начинают наезжать друг на друга
MIN_VISIBLE = 5
DEFAULT_VISIBLE = 7

PageLabel = Union[int, str]


def clamp_page(page: int, total_pages: int) -> int:
    """Приводит номер страницы к диапазону [1, total_pages]."""
    return min(max(page, 1), max(total_pages, 1))


def parse_page(raw) -> int:
    """Номер страницы из query-string: пусто/мусор/<1 -> 1."""
    try:
        page = int(str(raw).strip())
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


def _normalize_visible(max_visible: int) -> int:
    max_visible = max(MIN_VISIBLE, int(max_visible))
    if max_visible % 2 == 0:
        max_visible -= 1
    return max_visible


def page_window(current_page: int, total_pages: int,
                max_visible: int = DEFAULT_VISIBLE) -> List[PageLabel]:
    """Возвращает метки для контрола пагинации: номера страниц и ELLIPSIS.

    Parameters
    ----------
    current_page : int
        Текущая страница (1-based). Значение вне диапазона приводится к нему.
    total_pages : int
        Общее число страниц.
    max_visible : int, optional
        Сколько слотов номеров показывать, по умолчанию 7.
        Меньше 5 поднимается до 5, чётное уменьшается до нечётного.

    Returns
    -------
    List[int | str]
        Первая и последняя страницы всегда на месте, текущая страница
        всегда присутствует, номера строго возрастают.
    """
    if total_pages <= 1:
        return [1]

    max_visible = _normalize_visible(max_visible)
    current = clamp_page(current_page, total_pages)

    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))

    half = max_visible // 2

    # Рядом с началом
    if current <= half + 1:
        return list(range(1, max_visible - 1)) + [ELLIPSIS, total_pages]

    # Рядом с концом
    if current >= total_pages - half:
        tail = range(total_pages - (max_visible - 3), total_pages + 1)
        return [1, ELLIPSIS] + list(tail)

    # В середине
    middle = range(current - half + 2, current + half - 1)
    return [1, ELLIPSIS] + list(middle) + [ELLIPSIS, total_pages]


def item_range(current_page: int, per_page: int, total_items: int) -> Tuple[int, int]:
    """Диапазон элементов «показано с start по end» для текущей страницы."""
    start = (current_page - 1) * per_page + 1
    end = min(current_page * per_page, total_items)
    return start, end
