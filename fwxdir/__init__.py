"""
FWXDIR - Bulk AES-256-GCM encryption for directory trees

This module provides easy-to-use functions for sealing and opening byte blobs,
single files, and whole directories. Every function uses one key derived from
a passphrase; there is no per-file salt, header or version byte.
"""

from .main import *
from .version import __version__

FwxDirError = fwxdir.FwxDirError
ConfigurationError = fwxdir.ConfigurationError
TraversalError = fwxdir.TraversalError
MalformedInput = fwxdir.MalformedInput
AuthenticationFailure = fwxdir.AuthenticationFailure
FileOutcome = fwxdir.FileOutcome
PipelineSummary = fwxdir.PipelineSummary
JobQueue = fwxdir.JobQueue

# ============================================================================
# KEY AND BLOB FUNCTIONS (Passphrase → Key, Bytes → Blob)
# ============================================================================

def derive_key(passphrase: str | bytes):
    """
    Turn a passphrase into the 32-byte AES-256 key.

    Args:
        passphrase: Text (UTF-8 encoded) or raw bytes

    Returns:
        32-byte key (SHA-256 of the passphrase)

    Note:
        - Deterministic: the same passphrase always opens the same files
        - ❗ Single fast hash, no salt or work factor; pick a long passphrase
    """
    return fwxdir.derive_key(passphrase)


def seal(key: bytes, plaintext: bytes):
    """
    Encrypt and authenticate a byte buffer.

    Args:
        key: 32-byte key from derive_key()
        plaintext: Bytes to protect

    Returns:
        nonce (12 bytes) + ciphertext + GCM tag (16 bytes)

    Note:
        - Fresh random nonce on every call, so equal inputs give different blobs
        - No associated data, no header
    """
    return fwxdir.seal(key, plaintext)


def open_blob(key: bytes, blob: bytes):
    """
    Verify and decrypt a blob produced by seal().

    Args:
        key: 32-byte key from derive_key()
        blob: nonce + ciphertext + tag

    Returns:
        Original plaintext bytes

    Raises:
        MalformedInput: blob shorter than the 12-byte nonce
        AuthenticationFailure: wrong key, corrupted, truncated or extended blob
    """
    return fwxdir.open(key, blob)

# ============================================================================
# FILE ENCRYPTION FUNCTIONS (File → .enc File)
# ============================================================================

def encrypt_file(path, key: bytes, atomic: bool = False):
    """
    Seal one file in place.

    Args:
        path: File to encrypt
        key: 32-byte key from derive_key()
        atomic: Write through a temp file + rename before removing the input

    Returns:
        Path of the written ``<path>.enc``

    File format:
        - Encrypt: note.txt → note.txt.enc (removes note.txt)
        - The input is removed only after the output write succeeded
    """
    return fwxdir.encrypt_file(path, key, atomic=atomic)


def decrypt_file(path, key: bytes, atomic: bool = False):
    """
    Open one ``.enc`` file in place.

    Args:
        path: File ending in ``.enc``
        key: 32-byte key from derive_key()
        atomic: Write through a temp file + rename before removing the input

    Returns:
        Path of the restored file (``.enc`` stripped)

    File format:
        - Decrypt: note.txt.enc → note.txt (removes note.txt.enc)
        - On any failure the ``.enc`` file is left exactly as it was
    """
    return fwxdir.decrypt_file(path, key, atomic=atomic)

# ============================================================================
# DIRECTORY PIPELINE
# ============================================================================

def run_pipeline(
    root=".",
    passphrase: str | bytes = "",
    decrypt: bool = False,
    workers: int = 4,
    *,
    sink=None,
    atomic: bool | None = None,
    queue_size: int | None = None
):
    """
    Encrypt (or decrypt) every matching file under a directory.

    Args:
        root: Directory to walk (or a single file)
        passphrase: Non-empty passphrase
        decrypt: False selects .txt/.md files, True selects .enc files
        workers: Number of worker threads (>= 1)
        sink: Callable receiving one FileOutcome per file; defaults to console lines
        atomic: Temp file + rename writes (default: FWXDIR_ATOMIC_WRITE)
        queue_size: Job queue bound (default: workers * FWXDIR_QUEUE_FACTOR)

    Returns:
        PipelineSummary(succeeded, failed, skipped)

    How it works:
        - The caller thread walks the tree and feeds a bounded job queue
        - Worker threads each claim a path, process it, and report it
        - A failed file is reported and the run moves on; nothing is retried

    Raises:
        ConfigurationError: empty passphrase or non-positive worker count
    """
    return fwxdir.run_pipeline(
        root,
        passphrase,
        decrypt,
        workers,
        sink=sink,
        atomic=atomic,
        queue_size=queue_size
    )
