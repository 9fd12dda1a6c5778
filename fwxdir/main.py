# FWXDIR BULK DIRECTORY ENCRYPTION ENGINE ->

import os as _os_module


class fwxdir:
    import concurrent.futures
    import os
    import pathlib
    import queue
    import sys
    import tempfile
    import shutil
    import threading
    import typing
    import colorama
    from cryptography.hazmat.primitives import hashes
    from cryptography.hazmat.primitives.ciphers.aead import AESGCM
    from cryptography.exceptions import InvalidTag

    @staticmethod
    def _env_int(name: str) -> "fwxdir.typing.Optional[int]":
        value = _os_module.getenv(name)
        if not value:
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            return None
        if parsed <= 0:
            return None
        return parsed

    @staticmethod
    def _env_flag(name: str, default: bool = False) -> bool:
        value = _os_module.getenv(name)
        if value is None or value == "":
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    ENGINE_VERSION = "1.0.0"
    KEY_LEN = 32  # AES-256
    AEAD_NONCE_LEN = 12
    AEAD_TAG_LEN = 16
    ENC_SUFFIX = ".enc"
    PLAIN_SUFFIXES = (".txt", ".md")
    DEFAULT_WORKERS = _env_int("FWXDIR_WORKERS") or 4
    QUEUE_FACTOR = _env_int("FWXDIR_QUEUE_FACTOR") or 2
    ATOMIC_WRITE = _env_flag("FWXDIR_ATOMIC_WRITE")
    SUCCESS = "SUCCESS!"
    FAIL = "FAIL!"

    class FwxDirError(Exception):
        """Base class for every error raised by the engine."""

    class ConfigurationError(FwxDirError, ValueError):
        """Run cannot start: missing passphrase or an unusable worker count."""

    class TraversalError(FwxDirError, OSError):
        """A directory (or the root) could not be listed during the walk."""

    class MalformedInput(FwxDirError, ValueError):
        """Input is structurally invalid before any decryption is attempted."""

    class AuthenticationFailure(FwxDirError, ValueError):
        """GCM tag rejected: wrong passphrase, corruption or tampering."""

    class FileOutcome(typing.NamedTuple):
        path: "fwxdir.pathlib.Path"
        error: "fwxdir.typing.Optional[BaseException]" = None

        @property
        def ok(self) -> bool:
            return self.error is None

        @property
        def kind(self) -> str:
            return "OK" if self.error is None else type(self.error).__name__

        @property
        def status(self) -> str:
            return fwxdir.SUCCESS if self.error is None else fwxdir.FAIL

    class PipelineSummary(typing.NamedTuple):
        succeeded: int
        failed: int
        skipped: int

        @property
        def total(self) -> int:
            return self.succeeded + self.failed

    class JobQueue:
        """Bounded single-producer/multi-consumer hand-off of file paths.

        ``close()`` enqueues one sentinel. A consumer that draws it puts it back
        for its siblings and reports end-of-input, so every consumer drains the
        remaining paths before it stops.
        """

        _CLOSED = object()

        def __init__(self, maxsize: int = 0):
            self._queue = fwxdir.queue.Queue(maxsize=max(0, int(maxsize)))
            self._closed = False
            self._lock = fwxdir.threading.Lock()

        @property
        def closed(self) -> bool:
            return self._closed

        def put(self, path) -> None:
            if self._closed:
                raise RuntimeError("Job queue is closed")
            self._queue.put(path)

        def close(self) -> None:
            with self._lock:
                if self._closed:
                    raise RuntimeError("Job queue already closed")
                self._closed = True
            self._queue.put(self._CLOSED)

        def get(self):
            item = self._queue.get()
            if item is self._CLOSED:
                # only one sentinel is ever in flight, so there is always room
                self._queue.put(item)
                return None
            return item

    class _Reporter:
        """Thread-safe status lines for the operator, green/red on a TTY."""

        def __init__(self, stream=None, silent: bool = False):
            self.stream = stream or fwxdir.sys.stdout
            self.silent = silent
            self._lock = fwxdir.threading.Lock()
            self._use_color = bool(getattr(self.stream, "isatty", lambda: False)())
            self.broken = False

        def _emit(self, line: str, color: str = "") -> None:
            if self._use_color and color:
                line = f"{color}{line}{fwxdir.colorama.Style.RESET_ALL}"
            with self._lock:
                if self.broken:
                    return
                try:
                    self.stream.write(line + "\n")
                    self.stream.flush()
                except BrokenPipeError:
                    # reader went away (e.g. `| head`); keep the run going without output
                    self.broken = True

        def report(self, outcome: "fwxdir.FileOutcome") -> None:
            if self.silent:
                return
            Fore = fwxdir.colorama.Fore
            if outcome.ok:
                self._emit(f"Successfully processed file: {outcome.path}", Fore.GREEN)
            elif isinstance(outcome.error, fwxdir.TraversalError):
                reason = outcome.error.strerror or str(outcome.error)
                self._emit(f"Error accessing path {str(outcome.path)!r}: {reason}", Fore.YELLOW)
            else:
                self._emit(
                    f"Failed to process file {outcome.path}: [{outcome.kind}] {outcome.error}",
                    Fore.RED
                )

        def complete(self, summary: "fwxdir.typing.Optional[fwxdir.PipelineSummary]" = None) -> None:
            self._emit("Processing complete.")

    # KEY DERIVATION

    @staticmethod
    def derive_key(passphrase: "str | bytes") -> bytes:
        """Single SHA-256 of the passphrase.

        Fast on purpose: the same passphrase must keep opening existing
        ``.enc`` files, so there is no salt and no work factor. Brute-force
        resistance is therefore only as good as the passphrase.
        """
        if isinstance(passphrase, str):
            passphrase = passphrase.encode("utf-8")
        digest = fwxdir.hashes.Hash(fwxdir.hashes.SHA256())
        digest.update(bytes(passphrase))
        return digest.finalize()

    # CIPHER TRANSFORM

    @staticmethod
    def _check_key(key: bytes) -> None:
        if len(key) != fwxdir.KEY_LEN:
            raise ValueError(f"Key must be {fwxdir.KEY_LEN} bytes, got {len(key)}")

    @staticmethod
    def seal(key: bytes, plaintext: bytes) -> bytes:
        fwxdir._check_key(key)
        nonce = fwxdir.os.urandom(fwxdir.AEAD_NONCE_LEN)
        return nonce + fwxdir.AESGCM(key).encrypt(nonce, plaintext, None)

    @staticmethod
    def open(key: bytes, blob: bytes) -> bytes:
        fwxdir._check_key(key)
        if len(blob) < fwxdir.AEAD_NONCE_LEN:
            raise fwxdir.MalformedInput("ciphertext too short")
        nonce, sealed = blob[:fwxdir.AEAD_NONCE_LEN], blob[fwxdir.AEAD_NONCE_LEN:]
        try:
            return fwxdir.AESGCM(key).decrypt(nonce, sealed, None)
        except fwxdir.InvalidTag as exc:
            raise fwxdir.AuthenticationFailure(
                "authentication failed; wrong key or tampered data"
            ) from exc

    # FILE CODEC

    @staticmethod
    def output_path_for(path, decrypt: bool) -> "fwxdir.pathlib.Path":
        path = fwxdir.pathlib.Path(path)
        suffix = fwxdir.ENC_SUFFIX
        if not decrypt:
            return path.with_name(path.name + suffix)
        if not path.name.endswith(suffix) or path.name == suffix:
            raise fwxdir.MalformedInput(f"{path} does not carry a {suffix} suffix")
        return path.with_name(path.name[:-len(suffix)])

    @staticmethod
    def _write_output(
        output_path: "fwxdir.pathlib.Path",
        data: bytes,
        atomic: bool,
        mode_source: "fwxdir.typing.Optional[fwxdir.pathlib.Path]" = None
    ) -> None:
        if not atomic:
            output_path.write_bytes(data)
            return
        fd, tmp_name = fwxdir.tempfile.mkstemp(
            prefix=f".{output_path.name}.",
            suffix=".tmp",
            dir=output_path.parent
        )
        try:
            with fwxdir.os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                fwxdir.os.fsync(handle.fileno())
            if mode_source is not None:
                fwxdir.shutil.copymode(mode_source, tmp_name)
            fwxdir.os.replace(tmp_name, output_path)
        except BaseException:
            try:
                fwxdir.os.remove(tmp_name)
            except FileNotFoundError:
                pass
            raise

    @staticmethod
    def encrypt_file(path, key: bytes, atomic: bool = False) -> "fwxdir.pathlib.Path":
        path = fwxdir.pathlib.Path(path)
        output_path = fwxdir.output_path_for(path, decrypt=False)
        blob = fwxdir.seal(key, path.read_bytes())
        fwxdir._write_output(output_path, blob, atomic, mode_source=path)
        # delete only once the ciphertext is on disk
        fwxdir.os.remove(path)
        return output_path

    @staticmethod
    def decrypt_file(path, key: bytes, atomic: bool = False) -> "fwxdir.pathlib.Path":
        path = fwxdir.pathlib.Path(path)
        output_path = fwxdir.output_path_for(path, decrypt=True)
        plaintext = fwxdir.open(key, path.read_bytes())
        fwxdir._write_output(output_path, plaintext, atomic, mode_source=path)
        fwxdir.os.remove(path)
        return output_path

    @staticmethod
    def process_file(path, key: bytes, decrypt: bool, *, atomic: bool = False) -> "fwxdir.FileOutcome":
        path = fwxdir.pathlib.Path(path)
        try:
            if decrypt:
                fwxdir.decrypt_file(path, key, atomic=atomic)
            else:
                fwxdir.encrypt_file(path, key, atomic=atomic)
        except KeyboardInterrupt:
            raise
        except Exception as exc:
            return fwxdir.FileOutcome(path, exc)
        return fwxdir.FileOutcome(path)

    # PATH PRODUCER

    @staticmethod
    def selects(path, decrypt: bool) -> bool:
        name = fwxdir.pathlib.Path(path).name
        if decrypt:
            return name.endswith(fwxdir.ENC_SUFFIX)
        return name.endswith(fwxdir.PLAIN_SUFFIXES)

    @staticmethod
    def iter_candidates(
        root,
        decrypt: bool,
        on_error: "fwxdir.typing.Optional[fwxdir.typing.Callable[[BaseException], None]]" = None
    ) -> "fwxdir.typing.Iterator[fwxdir.pathlib.Path]":
        root = fwxdir.pathlib.Path(root)
        if root.is_file():
            if fwxdir.selects(root, decrypt):
                yield root
            return

        def _onerror(exc: OSError) -> None:
            if on_error is None:
                return
            err = fwxdir.TraversalError(exc.errno, exc.strerror or str(exc), exc.filename)
            err.__cause__ = exc
            on_error(err)

        for dirpath, dirnames, filenames in fwxdir.os.walk(root, onerror=_onerror):
            dirnames.sort()
            for name in sorted(filenames):
                candidate = fwxdir.pathlib.Path(dirpath, name)
                if fwxdir.selects(candidate, decrypt):
                    yield candidate

    @staticmethod
    def produce(root, jobs: "fwxdir.JobQueue", decrypt: bool, sink) -> int:
        """Feed matching paths into ``jobs`` and close it; returns traversal errors seen."""
        skipped = 0

        def _on_error(err: "fwxdir.TraversalError") -> None:
            nonlocal skipped
            skipped += 1
            sink(fwxdir.FileOutcome(fwxdir.pathlib.Path(err.filename or root), err))

        try:
            for path in fwxdir.iter_candidates(root, decrypt, on_error=_on_error):
                jobs.put(path)
        finally:
            jobs.close()
        return skipped

    # WORKER POOL

    @staticmethod
    def _worker(jobs: "fwxdir.JobQueue", key: bytes, decrypt: bool, sink, atomic: bool) -> "tuple[int, int]":
        succeeded = failed = 0
        sink_error = None
        while True:
            path = jobs.get()
            if path is None:
                break
            outcome = fwxdir.process_file(path, key, decrypt, atomic=atomic)
            if outcome.ok:
                succeeded += 1
            else:
                failed += 1
            if sink_error is not None:
                continue
            try:
                sink(outcome)
            except Exception as exc:
                # keep draining so the producer never blocks on a full queue
                sink_error = exc
        if sink_error is not None:
            raise sink_error
        return succeeded, failed

    @staticmethod
    def run_pipeline(
        root=".",
        passphrase: "str | bytes" = "",
        decrypt: bool = False,
        workers: int = 4,
        *,
        sink=None,
        atomic: "bool | None" = None,
        queue_size: "int | None" = None
    ) -> "fwxdir.PipelineSummary":
        """Encrypt (or decrypt) every matching file under ``root``.

        Args:
            root: Directory to walk, or a single file.
            passphrase: Non-empty secret; hashed once into the shared key.
            decrypt: Select ``.enc`` files and open them instead of sealing
                ``.txt``/``.md`` files.
            workers: Number of worker threads, at least 1.
            sink: Callable receiving one ``FileOutcome`` per file (and per
                traversal error). Called from worker threads. Defaults to a
                console reporter that also prints the completion line.
            atomic: Write through a temp file + ``os.replace`` before deleting
                the input. Defaults to ``FWXDIR_ATOMIC_WRITE``.
            queue_size: Job queue bound; defaults to ``workers * QUEUE_FACTOR``.

        Returns:
            PipelineSummary with succeeded/failed file counts and the number of
            traversal errors.

        Note:
            Per-file failures never abort the run. Only ConfigurationError is
            raised, and it is raised before any file is touched.
        """
        if not passphrase:
            raise fwxdir.ConfigurationError("The 'key' flag is required.")
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise fwxdir.ConfigurationError(f"Worker count must be a positive integer, got {workers!r}")
        if atomic is None:
            atomic = fwxdir.ATOMIC_WRITE
        if queue_size is None:
            queue_size = workers * fwxdir.QUEUE_FACTOR
        reporter = None
        if sink is None:
            reporter = fwxdir._Reporter()
            sink = reporter.report

        key = fwxdir.derive_key(passphrase)
        jobs = fwxdir.JobQueue(maxsize=queue_size)
        with fwxdir.concurrent.futures.ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="fwxdir-worker"
        ) as executor:
            futures = [
                executor.submit(fwxdir._worker, jobs, key, decrypt, sink, atomic)
                for _ in range(workers)
            ]
            skipped = fwxdir.produce(root, jobs, decrypt, sink)
            counts = [future.result() for future in futures]

        summary = fwxdir.PipelineSummary(
            succeeded=sum(ok for ok, _ in counts),
            failed=sum(bad for _, bad in counts),
            skipped=skipped
        )
        if reporter is not None:
            reporter.complete(summary)
        return summary


def cli(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        prog="fwxdir",
        description="Encrypt or decrypt every .txt/.md (or .enc) file under a directory with AES-256-GCM"
    )
    parser.add_argument(
        "--dir",
        default=".",
        help="Directory path to process (default: current directory)"
    )
    parser.add_argument(
        "--key",
        default="",
        help="Secret key for encryption/decryption (required)"
    )
    parser.add_argument(
        "--decrypt",
        action="store_true",
        help="Decrypt .enc files instead of encrypting .txt/.md files"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=fwxdir.DEFAULT_WORKERS,
        help="Number of worker threads (default: 4, or FWXDIR_WORKERS)"
    )
    parser.add_argument(
        "--atomic",
        action="store_true",
        default=fwxdir.ATOMIC_WRITE,
        help="Write outputs via temp file + rename before removing the input"
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress per-file status lines"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {fwxdir.ENGINE_VERSION}"
    )

    args = parser.parse_args(argv)

    if not args.key:
        print("Error: The 'key' flag is required.")
        return 1

    fwxdir.colorama.just_fix_windows_console()
    reporter = fwxdir._Reporter(silent=args.quiet)
    try:
        summary = fwxdir.run_pipeline(
            args.dir,
            args.key,
            decrypt=args.decrypt,
            workers=args.workers,
            sink=reporter.report,
            atomic=args.atomic
        )
    except fwxdir.ConfigurationError as exc:
        print(f"Error: {exc}")
        return 1
    reporter.complete(summary)
    if reporter.broken:
        # stdout's reader is gone; point fd 1 at devnull so the exit-time flush stays quiet
        devnull = fwxdir.os.open(fwxdir.os.devnull, fwxdir.os.O_WRONLY)
        fwxdir.os.dup2(devnull, fwxdir.sys.stdout.fileno())
    return 0


def main(argv=None) -> int:
    return cli(argv)


__all__ = ["fwxdir", "cli"]


if __name__ == "__main__":
    raise SystemExit(main())
