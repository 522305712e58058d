# app/domains/media/ordering.py

"""
자산의 표시 순서(position)와 대표 이미지(is_primary) 지정 규칙입니다.
I/O가 없는 순수 함수만 포함합니다.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class OrderingAssignment:
    positions: List[int] = field(default_factory=list)
    primary_index: Optional[int] = None


def assign_on_create(n: int) -> OrderingAssignment:
    """
    새 레코드와 함께 업로드된 n개 자산의 순서를 지정합니다.
    위치는 0..n-1, 첫 번째 자산이 대표 이미지가 됩니다. n == 0이면 빈 결과입니다.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    if n == 0:
        return OrderingAssignment()
    return OrderingAssignment(positions=list(range(n)), primary_index=0)


def assign_on_append(existing_max_position: Optional[int], n_new: int) -> List[int]:
    """
    기존 자산 뒤에 n_new개를 이어 붙일 위치를 반환합니다.
    부모에 자산이 없으면(None) 0부터 시작합니다. 추가된 자산은 대표 이미지가 되지 않습니다.
    """
    if n_new < 0:
        raise ValueError("n_new must be non-negative")
    start = 0 if existing_max_position is None else existing_max_position + 1
    return list(range(start, start + n_new))


def recompute_after_removal(remaining_positions: Sequence[int]) -> List[int]:
    # 재번호 없음. 빈 위치는 그대로 둡니다.
    return list(remaining_positions)


class ImageOrderingPolicy:
    """코디네이터에 주입되는 정책 객체. 기본 구현은 위 함수들을 그대로 사용합니다."""

    def assign_on_create(self, n: int) -> OrderingAssignment:
        return assign_on_create(n)

    def assign_on_append(self, existing_max_position: Optional[int], n_new: int) -> List[int]:
        return assign_on_append(existing_max_position, n_new)

    def recompute_after_removal(self, remaining_positions: Sequence[int]) -> List[int]:
        return recompute_after_removal(remaining_positions)
