"""Tests for build.jl rendering."""

import hashlib
import io

from buildjl.fetch import ProductHash, product_hashes_from_github_release
from buildjl.manifest import (
    read_bin_prefix,
    read_download_info,
    render_buildjl,
    sorted_product_hashes,
    write_buildjl,
)
from buildjl.platforms import classify_triplet
from buildjl.products import ExecutableProduct, LibraryProduct

BIN_PATH = "https://github.com/JuliaBinaryWrappers/LLVM_jll.jl/releases/download/LLVM-v11.0.1"
PRODUCTS = [
    LibraryProduct("libLLVM", "libllvm"),
    ExecutableProduct("llvm-config", "llvm_config"),
]


def hashes_for(*triplets: str):
    return {
        classify_triplet(t): ProductHash(
            f"LLVM.v11.0.1.{t}.tar.gz", hashlib.sha256(t.encode()).hexdigest()
        )
        for t in triplets
    }


class TestRenderBuildjl:
    """Test render_buildjl() and write_buildjl()."""

    def test_layout(self):
        text = render_buildjl(
            PRODUCTS, hashes_for("x86_64-linux-gnu-cxx11"), BIN_PATH
        )
        sha = hashlib.sha256(b"x86_64-linux-gnu-cxx11").hexdigest()

        assert text.startswith(
            "using BinaryProvider # requires BinaryProvider 0.3.0 or later\n"
        )
        assert 'const verbose = "--verbose" in ARGS' in text
        assert (
            "products = [\n"
            '    LibraryProduct(prefix, ["libLLVM"], :libllvm),\n'
            '    ExecutableProduct(prefix, "llvm-config", :llvm_config),\n'
            "]\n"
        ) in text
        assert f'bin_prefix = "{BIN_PATH}"' in text
        assert (
            "download_info = Dict(\n"
            "    Linux(:x86_64, libc=:glibc, compiler_abi=CompilerABI(:gcc_any, :cxx11))"
            ' => ("$bin_prefix/LLVM.v11.0.1.x86_64-linux-gnu-cxx11.tar.gz", '
            f'"{sha}"),\n'
            ")\n"
        ) in text
        assert "choose_download(download_info, platform_key_abi())" in text
        assert 'write_deps_file(joinpath(@__DIR__, "deps.jl"), products' in text

    def test_entries_sorted_by_triplet(self):
        triplets = [
            "x86_64-w64-mingw32",
            "aarch64-linux-gnu",
            "x86_64-apple-darwin14",
            "i686-linux-musl",
        ]
        text = render_buildjl(PRODUCTS, hashes_for(*triplets), BIN_PATH)
        files = list(read_download_info(text).values())
        assert [f.filename for f in files] == [
            f"LLVM.v11.0.1.{t}.tar.gz" for t in sorted(triplets)
        ]

    def test_rendering_is_idempotent(self):
        forward = hashes_for("x86_64-linux-gnu", "x86_64-apple-darwin14")
        backward = dict(reversed(list(forward.items())))
        assert render_buildjl(PRODUCTS, forward, BIN_PATH) == render_buildjl(
            PRODUCTS, backward, BIN_PATH
        )

    def test_write_to_stream(self):
        buffer = io.StringIO()
        hashes = hashes_for("x86_64-linux-gnu")
        write_buildjl(buffer, PRODUCTS, hashes, BIN_PATH)
        assert buffer.getvalue() == render_buildjl(PRODUCTS, hashes, BIN_PATH)

    def test_no_hashes(self):
        text = render_buildjl(PRODUCTS, {}, BIN_PATH)
        assert "download_info = Dict(\n)\n" in text
        assert read_download_info(text) == {}

    def test_sorted_product_hashes(self):
        hashes = hashes_for("x86_64-w64-mingw32", "aarch64-linux-gnu")
        assert [p.triplet for p, _ in sorted_product_hashes(hashes)] == [
            "aarch64-linux-gnu",
            "x86_64-w64-mingw32",
        ]


class TestReadBack:
    """Test parsing generated build.jl text back."""

    def test_bin_prefix(self):
        text = render_buildjl(PRODUCTS, {}, BIN_PATH)
        assert read_bin_prefix(text) == BIN_PATH
        assert read_bin_prefix("nothing here") is None

    def test_hash_round_trip_through_release(self, fake_client, tarball_contents):
        hashes = product_hashes_from_github_release(fake_client, "o/r", "t")
        text = render_buildjl(PRODUCTS, hashes, BIN_PATH)

        parsed = read_download_info(text)

        assert parsed == hashes
        for entry in parsed.values():
            expected = hashlib.sha256(tarball_contents[entry.filename]).hexdigest()
            assert entry.sha256 == expected
