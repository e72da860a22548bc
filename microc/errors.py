from __future__ import annotations


class CompileError(Exception):
    """Base class for every fatal compilation error.

    ``line`` and ``col`` are 1-based; ``line == 0`` means the error has no
    source position.
    """

    kind = "compile"

    def __init__(self, message: str, line: int = 0, col: int = 0, length: int = 1):
        self.message = message
        self.line = line
        self.col = col
        self.length = max(1, length)
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line > 0:
            return f"{self.message} at {self.line}:{self.col}"
        return self.message

    def render(self, source: str) -> str:
        head = f"microc: {self.kind} error: {self.message}"
        # the lexer only counts \n as a line break
        lines = source.split("\n")
        if self.line <= 0 or self.line > len(lines):
            return head
        text = lines[self.line - 1].rstrip("\r")
        return "\n".join(
            [
                head,
                f"    --> {self.line}:{self.col}",
                "      |",
                f"{self.line:>5} | {text}",
                "      | " + " " * (self.col - 1) + "^" * self.length,
            ]
        )


class LexError(CompileError):
    kind = "syntax"

    def __init__(self, message: str, source: str, line: int, col: int, length: int = 1, token=None):
        super().__init__(message, line, col, length)
        self.token = token
        self.excerpt = self.render(source)


class ParseError(CompileError):
    kind = "parse"

    def __init__(self, message: str, token):
        self.token = token
        super().__init__(f"{message}, found {token.describe()}", token.line, token.col, token.length)


class GeneratorError(CompileError):
    kind = "codegen"
