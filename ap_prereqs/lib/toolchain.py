"""Idempotent, checksum-verified toolchain installation.

An artifact counts as installed when its marker directory (the top-level
folder its archive unpacks to) exists under the install root. Otherwise a
cached archive is reused only if its SHA-256 matches, else it is fetched
again. The archive is extracted into the install root and then removed.
"""

from __future__ import annotations

import hashlib
import logging
import lzma
import os
import shutil
import tarfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import requests

from .command import CommandError, run_cmd

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
PROGRESS_STEP = 64 * 1024 * 1024
DEFAULT_TIMEOUT = 30.0


class FetchError(RuntimeError):
    """Base class for toolchain installation failures."""


class ChecksumMismatch(FetchError):
    def __init__(self, path: Path, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(f"Checksum mismatch for {path}: expected {expected}, got {actual}")


class NetworkError(FetchError):
    pass


class ExtractionError(FetchError):
    pass


class ToolchainPermissionError(FetchError):
    pass


@dataclass(frozen=True)
class ToolchainArtifact:
    name: str
    source_url: str
    local_filename: str
    expected_checksum: Optional[str]
    install_dir: Path
    marker_name: str
    download_dir: Optional[Path] = None

    @property
    def marker_path(self) -> Path:
        return Path(self.install_dir) / self.marker_name

    @property
    def archive_path(self) -> Path:
        return Path(self.download_dir or self.install_dir) / self.local_filename

    @property
    def bin_dir(self) -> Path:
        return self.marker_path / "bin"


def is_installed(path: Path) -> bool:
    return Path(path).is_dir()


def sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


def checksum_matches(path: Path, expected: Optional[str]) -> bool:
    if not expected:
        return False
    return sha256_file(path) == expected.strip().lower()


def _is_writable(path: Path) -> bool:
    # Walk up to the first existing ancestor; that is where mkdir would happen.
    p = Path(path)
    while not p.exists():
        if p.parent == p:
            return False
        p = p.parent
    return os.access(p, os.W_OK)


def download_file(url: str, dest: Path, *, timeout: float = DEFAULT_TIMEOUT) -> Path:
    """Stream url into dest, going through a .part file.

    An interrupted transfer only ever leaves the .part file behind, which the
    next attempt truncates.
    """

    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    part = dest.with_name(dest.name + ".part")

    logger.info("Downloading %s -> %s", url, dest)
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            total = int(response.headers.get("content-length") or 0)
            done = 0
            next_report = PROGRESS_STEP
            with open(part, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    done += len(chunk)
                    if done >= next_report:
                        if total:
                            logger.info("  %d MiB / %d MiB", done >> 20, total >> 20)
                        else:
                            logger.info("  %d MiB", done >> 20)
                        next_report += PROGRESS_STEP
    except requests.RequestException as e:
        raise NetworkError(f"Download of {url} failed: {e}") from e

    part.replace(dest)
    logger.info("Downloaded %d bytes", done)
    return dest


def extract_archive(
    archive: Path,
    dest: Path,
    *,
    use_sudo: bool = False,
    env: Mapping[str, str] | None = None,
) -> None:
    """Unpack a (possibly compressed) tarball into dest."""

    archive = Path(archive)
    dest = Path(dest)
    logger.info("Extracting %s -> %s", archive, dest)

    if use_sudo:
        try:
            run_cmd(["sudo", "mkdir", "-p", str(dest)], env=env)
            run_cmd(["sudo", "tar", "-xf", str(archive), "-C", str(dest)], env=env)
        except CommandError as e:
            raise ExtractionError(f"Extraction of {archive} failed: {e}") from e
        return

    dest.mkdir(parents=True, exist_ok=True)
    extract_kwargs = {"filter": "tar"} if hasattr(tarfile, "tar_filter") else {}
    try:
        with tarfile.open(archive, "r:*") as tar:
            tar.extractall(dest, **extract_kwargs)
    except PermissionError as e:
        raise ToolchainPermissionError(f"Cannot write into {dest}: {e}") from e
    except (tarfile.TarError, EOFError, lzma.LZMAError, zlib.error, OSError) as e:
        raise ExtractionError(f"Extraction of {archive} failed: {e}") from e


def _remove_partial(marker: Path, *, use_sudo: bool, env: Mapping[str, str] | None) -> None:
    """Drop a half-extracted marker directory so the next run starts over."""

    if not marker.exists():
        return
    logger.warning("Removing partially extracted %s", marker)
    if use_sudo:
        run_cmd(["sudo", "rm", "-rf", str(marker)], env=env)
    else:
        shutil.rmtree(marker)


def ensure_installed(
    artifact: ToolchainArtifact,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    verify_download: bool = True,
    allow_sudo: bool = False,
    env: Mapping[str, str] | None = None,
) -> bool:
    """Make sure artifact is extracted under its install dir.

    Returns False when the marker directory was already there (nothing was
    touched), True after a fresh extraction. Raises a FetchError subclass on
    failure; there is no retry.
    """

    if is_installed(artifact.marker_path):
        logger.info("%s already installed at %s", artifact.name, artifact.marker_path)
        return False

    archive = artifact.archive_path

    if not _is_writable(archive.parent):
        raise ToolchainPermissionError(f"Download directory {archive.parent} is not writable")

    use_sudo = False
    if not _is_writable(artifact.install_dir):
        if not allow_sudo:
            raise ToolchainPermissionError(
                f"Install directory {artifact.install_dir} is not writable without elevated privileges"
            )
        use_sudo = True

    download_required = True
    if archive.exists():
        if not artifact.expected_checksum:
            logger.info("%s exists but no checksum is known; downloading again", archive)
        elif checksum_matches(archive, artifact.expected_checksum):
            logger.info("Checksum valid for %s; no need to download again", archive)
            download_required = False
        else:
            logger.info("Checksum invalid for %s; downloading again", archive)
        if download_required:
            archive.unlink()
    else:
        logger.info("%s does not exist; downloading", archive)

    if download_required:
        download_file(artifact.source_url, archive, timeout=timeout)
        if verify_download and artifact.expected_checksum:
            actual = sha256_file(archive)
            if actual != artifact.expected_checksum.strip().lower():
                archive.unlink()
                raise ChecksumMismatch(archive, artifact.expected_checksum, actual)

    try:
        extract_archive(archive, artifact.install_dir, use_sudo=use_sudo, env=env)
    except FetchError:
        _remove_partial(artifact.marker_path, use_sudo=use_sudo, env=env)
        raise
    archive.unlink()

    if not is_installed(artifact.marker_path):
        raise ExtractionError(
            f"{archive.name} did not produce the expected directory {artifact.marker_path}"
        )

    logger.info("%s installed at %s", artifact.name, artifact.marker_path)
    return True
