"""Product declarations and the install prefix placeholder.

Products are the files a build is expected to produce. A build declaration
creates them either directly or through a function of the install prefix::

    products = [
        LibraryProduct("libLLVM", "libllvm"),
        ExecutableProduct("llvm-config", "llvm_config"),
    ]

    def products(prefix):
        return [LibraryProduct(prefix, ["libz"], "libz")]
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath


@dataclass(frozen=True)
class Prefix:
    """Install prefix placeholder handed to product functions."""

    path: str = "."

    def __truediv__(self, other: str) -> str:
        return str(PurePosixPath(self.path) / other)


def _julia_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$")
    return f'"{escaped}"'


def _julia_symbol(value: str) -> str:
    return f":{value}"


def _names(value: str | Sequence[str], field: str) -> tuple[str, ...]:
    names = (value,) if isinstance(value, str) else tuple(value)
    if not names or not all(isinstance(n, str) for n in names):
        raise TypeError(f"{field} must be a string or a list of strings: {value!r}")
    return names


def _julia_names(names: tuple[str, ...]) -> str:
    if len(names) == 1:
        return _julia_string(names[0])
    return f"[{', '.join(_julia_string(n) for n in names)}]"


class Product(ABC):
    """Base class for declared build products."""

    variable_name: str

    @abstractmethod
    def _arguments(self) -> list[str]:
        """Julia source of the constructor arguments between prefix and name."""

    def render(self) -> str:
        """Render as a BinaryProvider constructor call taking ``prefix``."""
        args = ["prefix", *self._arguments(), _julia_symbol(self.variable_name)]
        return f"{type(self).__name__}({', '.join(args)})"


@dataclass(frozen=True)
class LibraryProduct(Product):
    libnames: tuple[str, ...]
    variable_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "libnames", _names(self.libnames, "libnames"))

    def _arguments(self) -> list[str]:
        names = ", ".join(_julia_string(n) for n in self.libnames)
        return [f"[{names}]"]


@dataclass(frozen=True)
class ExecutableProduct(Product):
    """An executable, found under any of the names in ``binname``."""

    binname: tuple[str, ...]
    variable_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "binname", _names(self.binname, "binname"))

    def _arguments(self) -> list[str]:
        return [_julia_names(self.binname)]


@dataclass(frozen=True)
class FileProduct(Product):
    path: tuple[str, ...]
    variable_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", _names(self.path, "path"))

    def _arguments(self) -> list[str]:
        return [_julia_names(self.path)]


PRODUCT_TYPES: tuple[type[Product], ...] = (
    LibraryProduct,
    ExecutableProduct,
    FileProduct,
)


def accepts_prefix(product_type: type[Product]) -> Callable[..., Product]:
    """Wrap a product type so a leading Prefix argument is accepted and dropped.

    Older declarations pass the prefix explicitly
    (``LibraryProduct(prefix, "libz", "libz")``); newer ones omit it.
    """

    def build(*args, **kwargs) -> Product:
        if args and isinstance(args[0], Prefix):
            args = args[1:]
        return product_type(*args, **kwargs)

    build.__name__ = product_type.__name__
    build.__qualname__ = product_type.__qualname__
    build.__doc__ = product_type.__doc__
    return build


def resolve_products(
    products: Sequence[Product] | Callable[[Prefix], Sequence[Product]],
) -> list[Product]:
    """Return the product list, calling ``products(Prefix("."))`` if needed."""
    if callable(products):
        products = products(Prefix("."))
    return list(products)
