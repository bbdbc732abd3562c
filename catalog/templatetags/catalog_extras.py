from django import template
from django.conf import settings

from catalog.services.pagination import ELLIPSIS, item_range, page_window

register = template.Library()


@register.simple_tag
def page_links(page_meta, window=None):
    """
    Кнопки пагинации для meta бэкенда:
      [{"number": 1, "current": True}, {"ellipsis": True}, {"number": 20, "current": False}]
    Использование в шаблоне:
      {% load catalog_extras %}
      {% page_links page_meta as links %}
    """
    window = window or settings.PANEL_PAGINATION_SLOTS
    current = page_meta["current_page"]
    labels = page_window(current, page_meta["last_page"], window)
    return [
        {"ellipsis": True} if label == ELLIPSIS else {"number": label, "current": label == current}
        for label in labels
    ]


@register.simple_tag
def item_range_text(page_meta):
    """(start, end) для строки «Показано с start по end из total»."""
    return item_range(page_meta["current_page"], page_meta["per_page"], page_meta["total"])
