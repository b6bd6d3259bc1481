"""Fixed-depth subroutine return stack."""

from typing import List

from .constants import STACK_SIZE
from .errors import StackOverflow, StackUnderflow


class CallStack:
    """LIFO of return addresses with an enforced capacity"""

    def __init__(self, capacity: int = STACK_SIZE):
        self.capacity = capacity
        self._addresses: List[int] = []

    def __len__(self) -> int:
        return len(self._addresses)

    @property
    def depth(self) -> int:
        return len(self._addresses)

    def push(self, address: int):
        if len(self._addresses) >= self.capacity:
            raise StackOverflow(address, self.capacity)
        self._addresses.append(address)

    def pop(self) -> int:
        if not self._addresses:
            raise StackUnderflow()
        return self._addresses.pop()

    def peek(self) -> int:
        if not self._addresses:
            raise StackUnderflow()
        return self._addresses[-1]

    def clear(self):
        self._addresses.clear()
