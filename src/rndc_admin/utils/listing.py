"""Filtrado y paginación en memoria para las tablas de cada módulo."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Generic, Iterable, Sequence, TypeVar
import math

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
INVESTOR_PAGE_SIZES = (5, 10, 25, 50)


def matches_text(query: str, *fields: Any) -> bool:
    """Coincidencia de subcadena sin distinguir mayúsculas; consulta vacía coincide siempre."""
    q = (query or "").strip().lower()
    if not q:
        return True
    return any(q in str(f).lower() for f in fields if f is not None)


@dataclass(frozen=True)
class Page(Generic[T]):
    items: tuple[T, ...]
    page: int
    total_pages: int
    total_items: int
    page_size: int

    @property
    def start_index(self) -> int:
        """Posición (base 1) del primer elemento visible; 0 si no hay elementos."""
        if not self.items:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def end_index(self) -> int:
        if not self.items:
            return 0
        return self.start_index + len(self.items) - 1

    @property
    def label(self) -> str:
        return f"Mostrando {self.start_index}-{self.end_index} de {self.total_items}"

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def page_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size debe ser positivo")
    return math.ceil(total / page_size)


def paginate(items: Sequence[T], page: int, page_size: int = DEFAULT_PAGE_SIZE) -> Page[T]:
    """Devuelve la ventana ``page`` (base 1); la página se acota a [1, total]."""
    total_pages = page_count(len(items), page_size)
    page = min(max(page, 1), max(total_pages, 1))
    start = (page - 1) * page_size
    return Page(
        items=tuple(items[start:start + page_size]),
        page=page,
        total_pages=total_pages,
        total_items=len(items),
        page_size=page_size,
    )


@dataclass(frozen=True)
class ListState(Generic[T]):
    """Estado de una lista: elementos, filtros y página actual.

    Cambiar cualquier filtro (o el tamaño de página) vuelve a la página 1.
    """
    items: tuple[T, ...] = ()
    filters: dict[str, Any] = field(default_factory=dict)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def with_items(self, items: Iterable[T]) -> "ListState[T]":
        state = replace(self, items=tuple(items))
        return state.with_page(self.page)

    def with_filter(self, name: str, value: Any) -> "ListState[T]":
        filters = dict(self.filters)
        filters[name] = value
        return replace(self, filters=filters, page=1)

    def with_page(self, page: int) -> "ListState[T]":
        return replace(self, page=max(page, 1))

    def with_page_size(self, page_size: int) -> "ListState[T]":
        return replace(self, page_size=page_size, page=1)

    def filter_value(self, name: str, default: Any = "") -> Any:
        return self.filters.get(name, default)

    def visible(self, predicate) -> Page[T]:
        """Filtra con ``predicate(item, filters)`` y pagina el resultado."""
        filtered = [item for item in self.items if predicate(item, self.filters)]
        return paginate(filtered, self.page, self.page_size)
