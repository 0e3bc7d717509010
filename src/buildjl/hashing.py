"""Hash calculation for downloaded tarballs."""

import hashlib
from pathlib import Path

from buildjl.constants import DOWNLOAD_CHUNK_SIZE, HASH_ALGORITHM
from buildjl.logger import get_logger

logger = get_logger(__name__)


class HashCalculator:
    """Compute file digests with chunked reads."""

    def __init__(self, hash_type: str = HASH_ALGORITHM) -> None:
        """Initialize the hash calculator.

        Args:
            hash_type: hashlib algorithm name (e.g. 'sha256')

        Raises:
            ValueError: If the algorithm is not available on this system

        """
        self.hash_type = hash_type.lower()
        if self.hash_type not in hashlib.algorithms_available:
            raise ValueError(f"Hash type {self.hash_type} not available in this system")

    def calculate_file_hash(self, filepath: str | Path) -> str:
        """Calculate a file's digest.

        Args:
            filepath: Path to file to hash

        Returns:
            Digest as lowercase hexadecimal string

        Raises:
            OSError: If the file cannot be opened or read

        Example:
            >>> HashCalculator().calculate_file_hash("foo.v1.0.0.x86_64-linux-gnu.tar.gz")
            '8d969eef6ecad3c29a3a629280e686cf0c3f5d5a86aff3ca12020c923adc6c92'

        """
        hash_func = hashlib.new(self.hash_type)
        with open(filepath, "rb") as f:
            for chunk in iter(lambda: f.read(DOWNLOAD_CHUNK_SIZE), b""):
                hash_func.update(chunk)

        digest = hash_func.hexdigest().lower()
        logger.debug("%s(%s) = %s", self.hash_type, Path(filepath).name, digest)
        return digest
