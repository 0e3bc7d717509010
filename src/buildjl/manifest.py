"""build.jl rendering.

The generated script is consumed by BinaryProvider at install time: it
lists the declared products, maps every platform to a download URL and
SHA-256, and installs the best match for the user's machine.
"""

import re
from collections.abc import Sequence
from io import StringIO
from typing import TextIO

from buildjl.constants import BINARYPROVIDER_MIN_VERSION
from buildjl.fetch import ProductHash, ProductHashes
from buildjl.platforms import Platform, parse_descriptor
from buildjl.products import Product

PREAMBLE = f"""\
using BinaryProvider # requires BinaryProvider {BINARYPROVIDER_MIN_VERSION} or later

# Parse some basic command-line arguments
const verbose = "--verbose" in ARGS
const prefix = Prefix(get([a for a in ARGS if a != "--verbose"], 1, joinpath(@__DIR__, "usr")))
"""

DOWNLOAD_HEADER = """\
# Download binaries from hosted location
bin_prefix = "{bin_path}"

# Listing of files generated by BinaryBuilder:
"""

INSTALL_FOOTER = """\
# Install unsatisfied or updated dependencies:
unsatisfied = any(!satisfied(p; verbose=verbose) for p in products)
dl_info = choose_download(download_info, platform_key_abi())
if dl_info === nothing && unsatisfied
    # If we don't have a compatible .tar.gz to download, complain.
    # Alternatively, you could attempt to install from a separate provider,
    # build from source or something even more ambitious here.
    error("Your platform (\\"$(Sys.MACHINE)\\", parsed as \\"$(triplet(platform_key_abi()))\\") is not supported by this package!")
end

# If we have a download, and we are unsatisfied (or the version we're
# trying to install is not itself installed) then load it up!
if unsatisfied || !isinstalled(dl_info...; prefix=prefix)
    # Download and install binaries
    install(dl_info...; prefix=prefix, force=true, verbose=verbose)
end

# Write out a deps.jl file that will contain mappings for our products
write_deps_file(joinpath(@__DIR__, "deps.jl"), products, verbose=verbose)
"""

_BIN_PREFIX_RE = re.compile(r'^bin_prefix = "(?P<url>[^"]*)"$', re.MULTILINE)
_DOWNLOAD_LINE_RE = re.compile(
    r'^    (?P<platform>\S.*?) => \("\$bin_prefix/(?P<filename>[^"]+)", '
    r'"(?P<sha256>[0-9a-f]+)"\),$',
    re.MULTILINE,
)


def sorted_product_hashes(
    product_hashes: ProductHashes,
) -> list[tuple[Platform, ProductHash]]:
    """Order entries by canonical triplet so output is reproducible."""
    return sorted(product_hashes.items(), key=lambda item: item[0].triplet)


def write_buildjl(
    io: TextIO,
    products: Sequence[Product],
    product_hashes: ProductHashes,
    bin_path: str,
) -> None:
    """Write a BinaryProvider build.jl script to ``io``.

    Args:
        io: Text stream to write to
        products: Products declared by the build declaration
        product_hashes: Platform to (file name, sha256) mapping
        bin_path: URL prefix the tarballs are downloaded from

    """
    io.write(PREAMBLE)

    io.write("products = [\n")
    for product in products:
        io.write(f"    {product.render()},\n")
    io.write("]\n\n")

    io.write(DOWNLOAD_HEADER.format(bin_path=bin_path))
    io.write("download_info = Dict(\n")
    for platform, entry in sorted_product_hashes(product_hashes):
        io.write(
            f'    {platform.render()} => '
            f'("$bin_prefix/{entry.filename}", "{entry.sha256}"),\n'
        )
    io.write(")\n\n")

    io.write(INSTALL_FOOTER)


def render_buildjl(
    products: Sequence[Product],
    product_hashes: ProductHashes,
    bin_path: str,
) -> str:
    """Return the build.jl script as a string."""
    buffer = StringIO()
    write_buildjl(buffer, products, product_hashes, bin_path)
    return buffer.getvalue()


def read_bin_prefix(text: str) -> str | None:
    """Return the ``bin_prefix`` URL of a generated build.jl."""
    match = _BIN_PREFIX_RE.search(text)
    return match.group("url") if match else None


def read_download_info(text: str) -> ProductHashes:
    """Parse the ``download_info`` entries of a generated build.jl.

    Raises:
        PlatformError: If an entry's platform text cannot be parsed

    """
    return {
        parse_descriptor(match.group("platform")): ProductHash(
            match.group("filename"), match.group("sha256")
        )
        for match in _DOWNLOAD_LINE_RE.finditer(text)
    }
