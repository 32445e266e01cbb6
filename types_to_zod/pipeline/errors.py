"""
Errors raised and warnings recorded while compiling declarations.

A CompileError aborts the declaration being compiled. A CompileWarning marks
a construct that was degraded to `any()` so the rest of the declaration could
still be compiled.
"""

from __future__ import annotations

from dataclasses import dataclass


class TypeAstLoadError(ValueError):
    """Raised when a JSON-encoded Type AST document is malformed."""


class CompileError(Exception):
    """Raised when a declaration cannot be compiled.

    This can happen when:
    - An Omit/Pick key set is not made of string literals
    - A generic declaration is compiled as a standalone schema
    - An interface combines `extends` with an index signature
    - A reserved boolean-generic interface does not have exactly one parameter
    - An indexed-access chain does not end on a named reference
    """

    def __init__(self, message: str, declaration: str | None = None):
        super().__init__(message)
        self.message = message
        self.declaration = declaration

    def __str__(self) -> str:
        if self.declaration:
            return f"{self.declaration}: {self.message}"
        return self.message


class UnsupportedProjectionError(CompileError):
    """Omit<T, K> / Pick<T, K> with a key set that is not a string literal union."""


class GenericDeclarationError(CompileError):
    """A generic interface or type alias compiled directly."""


class ExtensionIndexSignatureError(CompileError):
    """An interface with both `extends` and an index signature."""


class MaybeInterfaceArityError(CompileError):
    """A reserved boolean-generic interface without exactly one type parameter."""


class IndexedAccessError(CompileError):
    """An indexed-access object type that is neither indexed access nor a reference."""


class GenericDepthError(CompileError):
    """Nested generic instantiation exceeded the configured depth."""


@dataclass(frozen=True)
class CompileWarning:
    """A construct that was compiled to the catch-all schema."""

    message: str
    declaration: str = ""

    def __str__(self) -> str:
        if self.declaration:
            return f"{self.declaration}: {self.message}"
        return self.message
