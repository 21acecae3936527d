from hashlib import sha256


def sha256d(data: bytes) -> bytes:
    """Double SHA256, the hash bitcoin uses for txids and block hashes"""
    return sha256(sha256(data).digest()).digest()
