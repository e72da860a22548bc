from __future__ import annotations


class IOController:
    """Integer input queue and text output buffer behind the syscalls."""

    def __init__(self, inputs: list[int] | None = None):
        self._in_queue: list[int] = list(inputs or [])
        self._out: list[str] = []

    def read_int(self) -> int:
        if not self._in_queue:
            return 0
        return self._in_queue.pop(0)

    def write_int(self, value: int):
        self._out.append(str(value))

    def write_char(self, code: int):
        self._out.append(chr(code & 0xFF))

    def out_dump(self) -> str:
        return "".join(self._out)
