# 페이지 요청/슬라이스 응답 공통 스키마

from typing import Generic, List, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class SortOrder(BaseModel):
    """정렬 요청 한 건. name은 클라이언트 필드명(registrationEnd 등)."""

    name: str
    direction: Literal["asc", "desc"] = "asc"

    @property
    def is_ascending(self) -> bool:
        return self.direction == "asc"

    @classmethod
    def parse(cls, raw: str) -> "SortOrder":
        """'registrationEnd,desc' 형식. 방향이 없거나 이상하면 asc."""
        prop, _, direction = raw.partition(",")
        direction = direction.strip().lower()
        return cls(name=prop.strip(), direction="desc" if direction == "desc" else "asc")


class Pageable(BaseModel):
    """0부터 시작하는 page + size + 정렬 목록."""

    page: int = Field(default=0, ge=0)
    size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    sort: List[SortOrder] = Field(default_factory=list)

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def of(cls, page: int = 0, size: int = DEFAULT_PAGE_SIZE, sort: List[str] | None = None) -> "Pageable":
        return cls(page=page, size=size, sort=[SortOrder.parse(s) for s in sort or [] if s])


class Slice(BaseModel, Generic[T]):
    """
    조회 결과 한 페이지 + 다음 페이지 존재 여부.

    has_next는 "가져온 행 수 == 요청 size"로 계산한 근사값이다.
    전체 개수가 size의 배수이면 마지막 페이지에서도 True가 된다.
    """

    content: List[T]
    page: int
    size: int
    has_next: bool

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @classmethod
    def of(cls, content: List[T], pageable: Pageable) -> "Slice[T]":
        return cls(
            content=content,
            page=pageable.page,
            size=pageable.size,
            has_next=len(content) == pageable.size,
        )


class PagedResponse(BaseModel, Generic[T]):
    """목록 API 응답. current_page_size는 이번 페이지의 원소 수."""

    data: List[T]
    has_next: bool
    current_page_size: int

    @classmethod
    def from_slice(cls, page: Slice) -> "PagedResponse":
        return cls(data=page.content, has_next=page.has_next, current_page_size=page.number_of_elements)
