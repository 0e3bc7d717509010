"""Build declaration loading.

A build declaration (``build_tarballs.py``) describes a package by calling
``build_tarballs(ARGS, name, version, sources, script, platforms, products,
dependencies, **kwargs)``. load_build_declaration() runs the declaration in
a private namespace where that call only records its arguments, so nothing
is built and nothing is downloaded.
"""

import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from buildjl.exceptions import DeclarationError
from buildjl.logger import get_logger
from buildjl.products import (
    PRODUCT_TYPES,
    Prefix,
    Product,
    accepts_prefix,
    resolve_products,
)

logger = get_logger(__name__)

SANDBOX_MODULE_NAME = "__build_tarballs__"


@dataclass(frozen=True)
class BuildDeclaration:
    """Metadata captured from a build declaration."""

    name: str
    version: str
    products: list[Product] = field(default_factory=list)


class _Recorder:
    """Stand-in for build_tarballs() that records instead of building."""

    def __init__(self) -> None:
        self.calls: list[BuildDeclaration] = []

    def build_tarballs(
        self,
        args,
        name,
        version,
        sources,
        script,
        platforms,
        products,
        dependencies,
        **kwargs,
    ) -> None:
        declaration = BuildDeclaration(
            name=str(name),
            version=str(version),
            products=resolve_products(products),
        )
        logger.debug(
            "Recorded build_tarballs(%s, %s) with %d products",
            declaration.name,
            declaration.version,
            len(declaration.products),
        )
        self.calls.append(declaration)


@contextmanager
def _isolated_process_state(workdir: Path) -> Iterator[None]:
    """Restore sys.argv, sys.path and the working directory afterwards."""
    saved_argv = sys.argv[:]
    saved_path = sys.path[:]
    saved_cwd = Path.cwd()
    os.chdir(workdir)
    try:
        yield
    finally:
        os.chdir(saved_cwd)
        sys.argv[:] = saved_argv
        sys.path[:] = saved_path


def _run_file(path: Path, namespace: dict[str, Any]) -> None:
    """Execute ``path`` with ``namespace`` as its globals."""
    source = path.read_text(encoding="utf-8")
    code = compile(source, str(path), "exec")
    previous_file = namespace.get("__file__")
    namespace["__file__"] = str(path)
    try:
        exec(code, namespace)  # noqa: S102
    finally:
        namespace["__file__"] = previous_file


def _sandbox_namespace(path: Path, recorder: _Recorder) -> dict[str, Any]:
    """Build the globals a declaration runs with."""
    namespace: dict[str, Any] = {
        "__name__": SANDBOX_MODULE_NAME,
        "__builtins__": __builtins__,
        "ARGS": [],
        "Prefix": Prefix,
        "build_tarballs": recorder.build_tarballs,
    }
    for product_type in PRODUCT_TYPES:
        namespace[product_type.__name__] = accepts_prefix(product_type)

    def include(relpath: str) -> None:
        """Run another file, relative to the including file, in this namespace."""
        current = Path(namespace.get("__file__") or path)
        target = (current.parent / relpath).resolve()
        if not target.is_file():
            raise DeclarationError("included file not found", target=str(target))
        logger.debug("Including %s", target)
        _run_file(target, namespace)

    namespace["include"] = include
    return namespace


def load_build_declaration(path: str | Path) -> BuildDeclaration:
    """Evaluate a build declaration and return what it declares.

    Args:
        path: Path to the ``build_tarballs.py`` declaration

    Returns:
        The name, version and products passed to build_tarballs()

    Raises:
        DeclarationError: If the file is missing, raises while running, or
            never calls build_tarballs()

    """
    path = Path(path).resolve()
    if not path.is_file():
        raise DeclarationError("file not found", target=str(path))

    recorder = _Recorder()
    namespace = _sandbox_namespace(path, recorder)

    with _isolated_process_state(path.parent):
        try:
            _run_file(path, namespace)
        except DeclarationError:
            raise
        except SystemExit as e:
            raise DeclarationError(
                f"script exited with status {e.code}", target=str(path)
            ) from e
        except Exception as e:
            raise DeclarationError(
                f"{type(e).__name__}: {e}", target=str(path)
            ) from e

    if not recorder.calls:
        raise DeclarationError(
            "build_tarballs() was never called", target=str(path)
        )
    if len(recorder.calls) > 1:
        logger.warning(
            "%s called build_tarballs() %d times; using the last call",
            path.name,
            len(recorder.calls),
        )
    return recorder.calls[-1]
