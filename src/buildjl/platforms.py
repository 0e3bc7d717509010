"""Platform descriptors and triplet classification.

A platform triplet such as ``x86_64-linux-gnu-libgfortran5-cxx11`` is
classified into one of a small set of frozen descriptor types (Linux, MacOS,
FreeBSD, Windows). Each descriptor renders to the text form understood by
BinaryProvider, for example::

    Linux(:x86_64, libc=:glibc, compiler_abi=CompilerABI(:gcc8, :cxx11))

and can be parsed back from that text with parse_descriptor().
"""

import platform as _platform
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from buildjl.exceptions import (
    PlatformError,
    UnknownABIError,
    UnknownVendorError,
)

FORTRAN_PREFIX = "libgfortran"
CXX_PREFIX = "cxx"

# libgfortran soname version -> GCC generation label used by CompilerABI
GCC_LABELS: dict[str, str] = {
    "libgfortran3": "gcc4",
    "libgfortran4": "gcc7",
    "libgfortran5": "gcc8",
}
GCC_ANY = "gcc_any"

# Linux ABI field -> (libc, call_abi)
LINUX_ABIS: dict[str, tuple[str, str | None]] = {
    "gnu": ("glibc", None),
    "musl": ("musl", None),
    "gnueabihf": ("glibc", "eabihf"),
    "musleabihf": ("musl", "eabihf"),
}
_LIBC_TO_ABI = {"glibc": "gnu", "musl": "musl"}

# Host machine names -> triplet architecture names
ARCH_ALIASES: dict[str, str] = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv7l": "armv7l",
    "armv7": "armv7l",
    "armv6l": "armv6l",
    "i386": "i686",
    "i586": "i686",
    "i686": "i686",
    "x86": "i686",
    "ppc64le": "powerpc64le",
    "powerpc64le": "powerpc64le",
}


@dataclass(frozen=True)
class CompilerABI:
    """Compiler runtime requirements carried by a tarball.

    Both fields keep the raw triplet tags (``libgfortran5``, ``cxx11``) so
    that the canonical triplet can be rebuilt exactly.
    """

    libgfortran: str | None = None
    cxxstring_abi: str | None = None

    @property
    def gcc_label(self) -> str:
        """GCC generation label for the Fortran runtime tag."""
        if self.libgfortran is None:
            return GCC_ANY
        return GCC_LABELS.get(self.libgfortran, GCC_ANY)

    @property
    def tags(self) -> list[str]:
        """Triplet suffix fields, Fortran tag first."""
        return [t for t in (self.libgfortran, self.cxxstring_abi) if t]

    def render(self) -> str:
        """Render as ``CompilerABI(:gcc8, :cxx11)``."""
        parts = [f":{self.gcc_label}"]
        if self.cxxstring_abi is not None:
            parts.append(f":{self.cxxstring_abi}")
        return f"CompilerABI({', '.join(parts)})"


class Platform(ABC):
    """Base class of all platform descriptors."""

    family: ClassVar[str] = ""

    arch: str
    compiler_abi: CompilerABI | None

    def _extra_fields(self) -> list[str]:
        return []

    @abstractmethod
    def _base_triplet(self) -> str:
        """Triplet without compiler ABI tags."""

    @property
    def triplet(self) -> str:
        """Canonical triplet, including compiler ABI tags."""
        fields = [self._base_triplet()]
        if self.compiler_abi is not None:
            fields.extend(self.compiler_abi.tags)
        return "-".join(fields)

    def render(self) -> str:
        """Render the descriptor in BinaryProvider's constructor syntax."""
        fields = [f":{self.arch}", *self._extra_fields()]
        if self.compiler_abi is not None:
            fields.append(f"compiler_abi={self.compiler_abi.render()}")
        return f"{self.family}({', '.join(fields)})"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class Linux(Platform):
    """Linux with glibc or musl, optionally with a hard-float call ABI."""

    family: ClassVar[str] = "Linux"

    arch: str
    libc: str = "glibc"
    call_abi: str | None = None
    compiler_abi: CompilerABI | None = None

    def _extra_fields(self) -> list[str]:
        fields = [f"libc=:{self.libc}"]
        if self.call_abi is not None:
            fields.append(f"call_abi=:{self.call_abi}")
        return fields

    def _base_triplet(self) -> str:
        abi = _LIBC_TO_ABI.get(self.libc, self.libc) + (self.call_abi or "")
        return f"{self.arch}-linux-{abi}"


@dataclass(frozen=True)
class MacOS(Platform):
    family: ClassVar[str] = "MacOS"

    arch: str
    compiler_abi: CompilerABI | None = None

    def _base_triplet(self) -> str:
        return f"{self.arch}-apple-darwin14"


@dataclass(frozen=True)
class FreeBSD(Platform):
    family: ClassVar[str] = "FreeBSD"

    arch: str
    compiler_abi: CompilerABI | None = None

    def _base_triplet(self) -> str:
        return f"{self.arch}-unknown-freebsd11.1"


@dataclass(frozen=True)
class Windows(Platform):
    family: ClassVar[str] = "Windows"

    arch: str
    compiler_abi: CompilerABI | None = None

    def _base_triplet(self) -> str:
        return f"{self.arch}-w64-mingw32"


@dataclass(frozen=True)
class UnknownPlatform(Platform):
    """Placeholder for assets whose platform could not be determined."""

    family: ClassVar[str] = "UnknownPlatform"

    arch: str = ""
    compiler_abi: CompilerABI | None = None

    def _base_triplet(self) -> str:
        return "unknown"

    def render(self) -> str:
        return "UnknownPlatform()"


def _split_compiler_tags(
    triplet: str, extra: list[str]
) -> CompilerABI | None:
    """Interpret the fourth and fifth triplet fields."""
    if not extra:
        return None

    if len(extra) == 1:
        (tag,) = extra
        if tag.startswith(CXX_PREFIX):
            return CompilerABI(cxxstring_abi=tag)
        if tag.startswith(FORTRAN_PREFIX):
            return CompilerABI(libgfortran=tag)
        raise PlatformError(f"unknown compiler ABI tag '{tag}'", target=triplet)

    fortran, cxx = extra
    if not fortran.startswith(FORTRAN_PREFIX) or not cxx.startswith(CXX_PREFIX):
        raise PlatformError(
            f"expected '{FORTRAN_PREFIX}*-{CXX_PREFIX}*' tags, "
            f"got '{fortran}-{cxx}'",
            target=triplet,
        )
    return CompilerABI(libgfortran=fortran, cxxstring_abi=cxx)


def classify_triplet(triplet: str) -> Platform:
    """Classify a platform triplet into a descriptor.

    Args:
        triplet: Dash-separated triplet with 3 to 5 fields

    Returns:
        The matching Linux, MacOS, FreeBSD or Windows descriptor

    Raises:
        PlatformError: If the field count or compiler tags are malformed
        UnknownVendorError: If the vendor/ABI pair names no known OS family
        UnknownABIError: If a Linux triplet has an unrecognized libc ABI

    """
    fields = triplet.split("-")
    if not 3 <= len(fields) <= 5:
        raise PlatformError(
            f"expected 3 to 5 dash-separated fields, got {len(fields)}",
            target=triplet,
        )

    arch, vendor, abi, *extra = fields
    compiler_abi = _split_compiler_tags(triplet, extra)

    if vendor == "linux":
        if abi not in LINUX_ABIS:
            raise UnknownABIError(f"'{abi}' is not a known libc", target=triplet)
        libc, call_abi = LINUX_ABIS[abi]
        return Linux(arch, libc=libc, call_abi=call_abi, compiler_abi=compiler_abi)
    if vendor == "apple" and abi.startswith("darwin"):
        return MacOS(arch, compiler_abi=compiler_abi)
    if vendor == "unknown" and abi.startswith("freebsd"):
        return FreeBSD(arch, compiler_abi=compiler_abi)
    if vendor == "w64" and abi == "mingw32":
        return Windows(arch, compiler_abi=compiler_abi)

    raise UnknownVendorError(f"vendor '{vendor}' with ABI '{abi}'", target=triplet)


def compat_string(triplet: str) -> str:
    """Return the BinaryProvider text form of ``triplet``."""
    return classify_triplet(triplet).render()


_FAMILIES: dict[str, type[Platform]] = {
    cls.family: cls for cls in (Linux, MacOS, FreeBSD, Windows)
}
_GCC_TO_FORTRAN = {label: tag for tag, label in GCC_LABELS.items()}

_DESCRIPTOR_RE = re.compile(r"^(?P<family>\w+)\(:(?P<arch>\w+)(?P<rest>.*)\)$")
_LIBC_RE = re.compile(r"libc=:(\w+)")
_CALL_ABI_RE = re.compile(r"call_abi=:(\w+)")
_COMPILER_ABI_RE = re.compile(r"compiler_abi=CompilerABI\(:(\w+)(?:, :(\w+))?\)")


def parse_descriptor(text: str) -> Platform:
    """Parse a rendered descriptor back into a Platform.

    Unknown Fortran runtime tags render as ``:gcc_any`` and therefore parse
    back without a Fortran tag.

    Raises:
        PlatformError: If ``text`` is not a rendered descriptor

    """
    text = text.strip()
    if text == UnknownPlatform().render():
        return UnknownPlatform()

    match = _DESCRIPTOR_RE.match(text)
    if match is None or match.group("family") not in _FAMILIES:
        raise PlatformError("not a platform descriptor", target=text)

    rest = match.group("rest")
    compiler_abi = None
    abi_match = _COMPILER_ABI_RE.search(rest)
    if abi_match:
        compiler_abi = CompilerABI(
            libgfortran=_GCC_TO_FORTRAN.get(abi_match.group(1)),
            cxxstring_abi=abi_match.group(2),
        )

    family = _FAMILIES[match.group("family")]
    arch = match.group("arch")
    if family is Linux:
        libc_match = _LIBC_RE.search(rest)
        call_abi_match = _CALL_ABI_RE.search(rest)
        return Linux(
            arch,
            libc=libc_match.group(1) if libc_match else "glibc",
            call_abi=call_abi_match.group(1) if call_abi_match else None,
            compiler_abi=compiler_abi,
        )
    return family(arch, compiler_abi=compiler_abi)


def normalize_arch(machine: str) -> str:
    """Map a host machine name (``amd64``, ``arm64``...) to a triplet arch."""
    machine = machine.lower()
    return ARCH_ALIASES.get(machine, machine)


def host_platform() -> Platform:
    """Detect the descriptor of the machine running this process.

    Returns:
        Descriptor of the current host, or UnknownPlatform if the operating
        system is not one of the supported families

    """
    system = _platform.system()
    arch = normalize_arch(_platform.machine())

    if system == "Linux":
        libc_name, _ = _platform.libc_ver()
        libc = "glibc" if libc_name == "glibc" else "musl"
        call_abi = "eabihf" if arch.startswith("armv") else None
        return Linux(arch, libc=libc, call_abi=call_abi)
    if system == "Darwin":
        return MacOS(arch)
    if system == "FreeBSD":
        return FreeBSD(arch)
    if system == "Windows":
        return Windows(arch)
    return UnknownPlatform()
