"""Pytest configuration and fixtures for buildjl tests."""

import logging
import os
import tempfile

# Keep log files and settings.conf out of the user's home directory. Must be
# set before any buildjl module creates its logger.
os.environ.setdefault("BUILDJL_LOG_DIR", tempfile.mkdtemp(prefix="buildjl-logs-"))
os.environ.setdefault(
    "BUILDJL_CONFIG_DIR", tempfile.mkdtemp(prefix="buildjl-config-")
)

from unittest.mock import MagicMock, patch  # noqa: E402

import pytest  # noqa: E402

from buildjl.github import Release, ReleaseAsset  # noqa: E402


@pytest.fixture(autouse=True)
def enable_log_propagation():
    """Enable log propagation for all loggers during tests.

    This allows pytest's caplog fixture to capture logs from all loggers,
    even those created with propagate=False in production code.
    """
    original_propagation = {}
    for name in list(logging.Logger.manager.loggerDict.keys()):
        if name.startswith("buildjl"):
            logger = logging.getLogger(name)
            original_propagation[name] = logger.propagate
            logger.propagate = True

    yield

    for name, propagate_value in original_propagation.items():
        logger = logging.getLogger(name)
        logger.propagate = propagate_value


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch):
    """Never pick up a real token from the environment or keyring."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    with patch("buildjl.auth.keyring.get_password", return_value=None):
        yield


@pytest.fixture
def tarball_contents():
    """Release assets keyed by file name, with their byte content."""
    return {
        "LLVM.v11.0.1.x86_64-linux-gnu-cxx11.tar.gz": b"linux glibc cxx11",
        "LLVM.v11.0.1.x86_64-linux-musl-cxx03.tar.gz": b"linux musl cxx03",
        "LLVM.v11.0.1.x86_64-apple-darwin14.tar.gz": b"macos",
        "LLVM.v11.0.1.i686-w64-mingw32-libgfortran5-cxx11.tar.gz": b"windows",
        "build_LLVM.v11.0.1.jl": b"stray build script",
        "README.md": b"not a tarball",
    }


@pytest.fixture
def fake_client(tarball_contents):
    """GitHubClient stand-in serving ``tarball_contents``."""
    base = "https://github.com/JuliaBinaryWrappers/LLVM_jll.jl/releases/download/LLVM-v11.0.1"
    release = Release(
        tag_name="LLVM-v11.0.1",
        assets=[
            ReleaseAsset(name=name, browser_download_url=f"{base}/{name}")
            for name in tarball_contents
        ],
    )

    def download(url, dest):
        name = url.rsplit("/", 1)[-1]
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(tarball_contents[name])
        return dest

    client = MagicMock()
    client.get_release.return_value = release
    client.download.side_effect = download
    return client


LLVM_DECLARATION = '''\
name = "LLVM"
version = "11.0.1"

sources = ["https://github.com/llvm/llvm-project.git"]
script = "cd $WORKSPACE/srcdir && make install"
platforms = ["x86_64-linux-gnu", "x86_64-apple-darwin14"]

products = [
    LibraryProduct("libLLVM", "libllvm"),
    ExecutableProduct("llvm-config", "llvm_config"),
]

build_tarballs(ARGS, name, version, sources, script, platforms, products, [])
'''


@pytest.fixture
def llvm_declaration(tmp_path):
    """A build_tarballs.py inside an ``LLVM`` recipe directory."""
    recipe = tmp_path / "L" / "LLVM"
    recipe.mkdir(parents=True)
    path = recipe / "build_tarballs.py"
    path.write_text(LLVM_DECLARATION, encoding="utf-8")
    return path
