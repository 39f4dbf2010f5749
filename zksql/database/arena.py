"""
라운드 범위 할당기 (Arena)
===========================

한 질의의 한 라운드 동안 쓰이는 중간 컬럼을 모아두는 bump 방식 할당기.

    >>> with Arena() as alloc:
    ...     values = alloc.alloc_slice([1, 2, 3])
    ...     ...
    >>> values   # [] : with 블록을 벗어나면 모든 슬라이스가 한꺼번에 비워진다

개별 슬라이스는 해제하지 않는다. 닫힌 Arena에서 할당하면 RuntimeError.
"""


class Arena:
    def __init__(self):
        self._slices = []
        self._closed = False

    def _check_open(self):
        if self._closed:
            raise RuntimeError("이미 해제된 Arena에서 할당할 수 없습니다")

    def alloc_slice(self, values):
        """values를 복사한 새 슬라이스를 할당한다."""
        self._check_open()
        slice_ = list(values)
        self._slices.append(slice_)
        return slice_

    def alloc_slice_fill(self, value, length):
        """같은 값 length개로 채운 슬라이스를 할당한다."""
        self._check_open()
        slice_ = [value] * length
        self._slices.append(slice_)
        return slice_

    @property
    def num_slices(self):
        return len(self._slices)

    @property
    def closed(self):
        return self._closed

    def reset(self):
        """모든 슬라이스를 제자리에서 비우고 Arena를 닫는다."""
        for slice_ in self._slices:
            slice_.clear()
        self._slices = []
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.reset()
        return False
