from cryptography.hazmat.primitives import hashes

from ..errors import HashError


class FileHasher:
    """File digests in the form pacman records them in %BACKUP% (md5 hex)"""

    @staticmethod
    def calculate_file_hash(file_path: str, chunk_size: int = 8192) -> str:
        """Calculate the md5 hex digest of a file"""
        digest = hashes.Hash(hashes.MD5())

        try:
            with open(file_path, 'rb') as f:
                for chunk in iter(lambda: f.read(chunk_size), b""):
                    digest.update(chunk)

            return digest.finalize().hex()
        except (IOError, OSError) as e:
            raise HashError(f"failed to compute hash for {file_path}: {e}") from e
