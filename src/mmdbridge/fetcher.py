"""Download and install MaxMind DB files."""

import gzip
import hashlib
import json
import os
import shutil
import tarfile
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlparse

import requests
from requests.adapters import HTTPAdapter
from tqdm import tqdm
from urllib3.util import Retry

from . import config
from .handle import DatabaseHandle


def calculate_sha256(filepath):
    """Calculate SHA256 hash of a file."""
    hash_sha256 = hashlib.sha256()
    with open(filepath, "rb") as f:
        for chunk in iter(lambda: f.read(4096), b""):
            hash_sha256.update(chunk)
    return hash_sha256.hexdigest()


class DatabaseFetcher:
    """Fetches a database file and installs it into the data directory."""

    MAX_RETRIES = config.MAX_RETRIES
    RETRY_BACKOFF = config.RETRY_BACKOFF
    TIMEOUT = config.TIMEOUT
    CHUNK_SIZE = config.CHUNK_SIZE

    def __init__(self, data_dir=None):
        if data_dir is None:
            data_dir = config.DATA_DIR

        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.database_path = self.data_dir / config.DATABASE_FILENAME
        self.metadata_path = self.data_dir / config.METADATA_FILENAME
        self.download_dir = self.data_dir / "download"

    def _create_session(self):
        session = requests.Session()
        retry = Retry(
            total=self.MAX_RETRIES,
            backoff_factor=self.RETRY_BACKOFF,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        return session

    def _download_file(self, session, url, filepath):
        """Download a file with a progress bar."""
        response = session.get(url, stream=True, timeout=self.TIMEOUT)
        response.raise_for_status()
        total_size = int(response.headers.get("content-length", 0))

        try:
            with (
                open(filepath, "wb") as f,
                tqdm(
                    desc=f"Downloading {filepath.name}",
                    total=total_size,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                ) as pbar,
            ):
                for chunk in response.iter_content(chunk_size=self.CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        pbar.update(len(chunk))
        except requests.exceptions.RequestException:
            if filepath.exists():
                filepath.unlink()
            raise

    def _extract_database(self, archive):
        """Return the path of the .mmdb file inside a downloaded archive.

        Plain files are returned as-is; ``.gz`` files are decompressed and
        tarballs must contain exactly one ``.mmdb`` member.
        """
        name = archive.name.lower()
        target = self.download_dir / config.DATABASE_FILENAME

        if name.endswith((".tar.gz", ".tgz", ".tar")):
            with tarfile.open(archive) as tar:
                members = [
                    m
                    for m in tar.getmembers()
                    if m.isfile() and m.name.endswith(".mmdb")
                ]
                if len(members) != 1:
                    raise ValueError(
                        f"Expected one .mmdb file in {archive.name}, "
                        f"found {len(members)}"
                    )
                source = tar.extractfile(members[0])
                with source, open(target, "wb") as f:
                    shutil.copyfileobj(source, f)
            return target

        if name.endswith(".gz"):
            with gzip.open(archive, "rb") as source, open(target, "wb") as f:
                shutil.copyfileobj(source, f)
            return target

        return archive

    def fetch(self, url, sha256=None, force=False):
        """Download ``url`` and install it as the local database.

        Args:
            url: Location of a ``.mmdb``, ``.mmdb.gz`` or ``.tar.gz`` file
            sha256: Expected hex digest of the downloaded file
            force: Replace an existing database

        Returns:
            dict: Metadata describing the installed database

        Raises:
            ValueError: If the checksum does not match or the archive is unusable
            DatabaseIOError: If the downloaded file is not a valid database
            requests.exceptions.RequestException: If the download fails
        """
        if not force and self.database_path.exists():
            print(f"Database already exists at {self.database_path}, skipping...")
            return self.get_metadata()

        self.download_dir.mkdir(exist_ok=True)
        try:
            filename = Path(urlparse(url).path).name or config.DATABASE_FILENAME
            archive = self.download_dir / filename

            session = self._create_session()
            self._download_file(session, url, archive)

            file_hash = calculate_sha256(archive)
            if sha256 and file_hash != sha256.lower():
                raise ValueError(
                    f"SHA256 mismatch for {filename}: "
                    f"expected {sha256}, got {file_hash}"
                )

            candidate = self._extract_database(archive)
            with DatabaseHandle.open(candidate) as handle:
                db_metadata = handle.metadata()

            os.replace(candidate, self.database_path)
        finally:
            shutil.rmtree(self.download_dir, ignore_errors=True)

        metadata = {
            "download_timestamp": datetime.now(timezone.utc).isoformat(),
            "url": url,
            "file_path": str(self.database_path),
            "file_size": self.database_path.stat().st_size,
            "sha256": file_hash,
            "database_type": db_metadata["database_type"],
            "build_epoch": db_metadata["build_epoch"],
        }
        with open(self.metadata_path, "w", encoding="utf-8") as f:
            json.dump(metadata, f, indent=2)

        print(f"Installed {db_metadata['database_type']} database")
        print("Data stored in: " + str(self.data_dir))
        return metadata

    def get_metadata(self):
        """Get download metadata if available."""
        if self.metadata_path.exists():
            with open(self.metadata_path, encoding="utf-8") as f:
                return json.load(f)
        return None

    def is_data_available(self):
        return self.database_path.exists()
