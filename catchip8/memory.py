"""Bounds-checked 4KB address space."""

import logging
from typing import Iterable

from .constants import MEMORY_SIZE, BYTE_MASK
from .errors import MemoryOutOfBounds, validate_argument

logger = logging.getLogger(__name__)


class Memory:
    """Flat 4096-byte RAM. Every access outside [0, 4095] raises."""

    def __init__(self, size: int = MEMORY_SIZE):
        self.size = size
        self.data = bytearray(size)

    def __len__(self) -> int:
        return self.size

    def _check(self, address: int, length: int = 1):
        if address < 0:
            raise MemoryOutOfBounds(address)
        end = address + length - 1
        if end >= self.size:
            raise MemoryOutOfBounds(end)

    def read(self, address: int) -> int:
        self._check(address)
        return self.data[address]

    def write(self, address: int, value: int):
        self._check(address)
        self.data[address] = validate_argument(value, BYTE_MASK)

    def read_block(self, address: int, length: int) -> bytes:
        if length <= 0:
            self._check(address)
            return b""
        self._check(address, length)
        return bytes(self.data[address:address + length])

    def write_block(self, address: int, data: Iterable[int]):
        """Copy ``data`` to ``address``; nothing is written if any byte would fall outside RAM"""
        data = bytes(data)
        if not data:
            self._check(address)
            return
        self._check(address, len(data))
        self.data[address:address + len(data)] = data

    def fetch_word(self, address: int) -> int:
        """Big-endian 16-bit read of two consecutive bytes"""
        self._check(address, 2)
        return (self.data[address] << 8) | self.data[address + 1]

    def load(self, data: bytes, offset: int):
        """Copy a program image into RAM starting at ``offset``"""
        self.write_block(offset, data)
        logger.debug("Loaded %d bytes at $%03X", len(data), offset)
