"""Repository store backed by the ostree command line tool.

Commit objects are immutable, so parsed metadata is cached by hash until a
refresh no longer reaches the commit. Signature verification is re-run on every call since
keyrings and expiry can change between refreshes.
"""

import os
import re
import subprocess
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from common.constants import TIMESTAMP_FORMAT
from common.env import env
from common.logger import get_logger

from .errors import CorruptObjectError, NotFoundError, RepoOpenError
from .models import CommitMetadata, Signature
from .store import RepositoryStore

logger = get_logger(__name__)

COMMIT_HEADER_RE = re.compile(r"^commit ([0-9a-f]{64})$")
SIGNATURE_MADE_RE = re.compile(
    r"^Signature made (?P<date>.+) using (?P<algo>\S+) key ID (?P<key>[0-9A-Fa-f]+)$"
)
SIGNER_RE = re.compile(r'^(?:Good|BAD) signature from "(?P<name>.*?)(?: <(?P<mail>[^>]*)>)?"$')
PRIMARY_KEY_RE = re.compile(r"^Primary key ID (?P<key>[0-9A-Fa-f]+)$")
EXPIRY_RE = re.compile(
    r"^(?P<what>Key|Signature|Primary key) (?P<state>expired|expires) (?P<date>.+)$"
)

# Dates in signature descriptions use the C locale's %c representation
SIGNATURE_DATE_FORMAT = "%a %b %d %H:%M:%S %Y"


def parse_timestamp(value: str, fmt: str = TIMESTAMP_FORMAT) -> datetime | None:
    """Parse an ostree timestamp into an aware UTC datetime, or None."""
    try:
        parsed = datetime.strptime(value.strip(), fmt)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_log_output(output: str) -> dict[str, CommitMetadata]:
    """Parse the commit dumps printed by `ostree log` or `ostree show`.

    Format per commit:
        commit <checksum>
        Parent:  <checksum>            (only if the commit has a parent)
        ContentChecksum:  <checksum>
        Date:  2024-01-01 12:00:00 +0000
        Version: <version>            (optional)

            <subject, indented by four spaces>

            <body, indented by four spaces>

    Returns:
        Mapping of commit hash to parsed metadata. Dumps that lack a
        parseable date are skipped.
    """
    commits: dict[str, CommitMetadata] = {}
    blocks: list[tuple[str, list[str]]] = []

    for line in output.splitlines():
        match = COMMIT_HEADER_RE.match(line)
        if match:
            blocks.append((match.group(1), []))
        elif blocks:
            blocks[-1][1].append(line)

    for commit_hash, lines in blocks:
        metadata = _parse_commit_block(lines)
        if metadata is None:
            logger.debug(f"Skipping unparseable dump of commit {commit_hash}")
            continue
        commits[commit_hash] = metadata

    return commits


def _parse_commit_block(lines: list[str]) -> CommitMetadata | None:
    parent = None
    checksum = ""
    timestamp = None
    version = None
    no_subject = False
    # Runs of indented lines: subject first, then body
    segments: list[list[str]] = []
    previous_indented = False

    for line in lines:
        if line.startswith("    "):
            if not previous_indented:
                segments.append([])
            segments[-1].append(line[4:])
            previous_indented = True
            continue
        previous_indented = False

        if line.startswith("Parent:"):
            parent = line.split(":", 1)[1].strip()
        elif line.startswith("ContentChecksum:"):
            checksum = line.split(":", 1)[1].strip()
        elif line.startswith("Date:"):
            timestamp = parse_timestamp(line.split(":", 1)[1])
        elif line.startswith("Version:"):
            version = line.split(":", 1)[1].strip() or None
        elif line == "(no subject)":
            no_subject = True
        elif line.startswith("<< History beyond") or line.startswith("Found "):
            break

    if timestamp is None:
        return None

    if no_subject:
        segments.insert(0, [])
    subject = "\n".join(segments[0]) if segments else ""
    body = "\n".join(segments[1]) if len(segments) > 1 else ""

    return CommitMetadata(
        parent_hash=parent,
        timestamp=timestamp,
        subject=subject,
        body=body,
        content_checksum=checksum,
        version=version,
    )


def parse_signatures(output: str) -> list[Signature]:
    """Parse the "Found N signature(s)" section of `ostree show`."""
    start = output.find("\nFound ")
    if start == -1 and not output.startswith("Found "):
        return []
    section = output[start + 1 :] if start != -1 else output

    signatures: list[Signature] = []
    current: dict | None = None

    for raw in section.splitlines()[1:]:
        line = raw.strip()
        match = SIGNATURE_MADE_RE.match(line)
        if match:
            if current is not None:
                signatures.append(Signature(**current))
            key = match.group("key")
            current = {
                "fingerprint": key,
                "fingerprint_primary": key,
                "pubkey_algorithm": match.group("algo"),
                "timestamp": parse_timestamp(match.group("date"), SIGNATURE_DATE_FORMAT),
                "key_missing": False,
                "sig_expired": False,
                "key_expired": False,
            }
            continue
        if current is None or not line:
            continue

        if line.startswith("Good signature"):
            current["valid"] = True
            _apply_signer(current, line)
        elif line.startswith("BAD signature"):
            current["valid"] = False
            _apply_signer(current, line)
        elif line.startswith("Can't check signature"):
            current["key_missing"] = True
            current["valid"] = False
        elif "revoked" in line.lower():
            current["key_revoked"] = True
        elif PRIMARY_KEY_RE.match(line):
            current["fingerprint_primary"] = PRIMARY_KEY_RE.match(line).group("key")
        else:
            expiry = EXPIRY_RE.match(line)
            if expiry:
                _apply_expiry(current, expiry)

    if current is not None:
        signatures.append(Signature(**current))
    return signatures


def _apply_signer(current: dict, line: str) -> None:
    match = SIGNER_RE.match(line)
    if match:
        current["username"] = match.group("name")
        current["usermail"] = match.group("mail") or ""


def _apply_expiry(current: dict, match: re.Match) -> None:
    expired = match.group("state") == "expired"
    date = parse_timestamp(match.group("date"), SIGNATURE_DATE_FORMAT)
    what = match.group("what")
    if what == "Signature":
        current["sig_expired"] = expired
        current["expire_timestamp"] = date
    elif what == "Key":
        current["key_expired"] = expired
        current["key_expire_timestamp"] = date
    else:
        current["key_expire_timestamp_primary"] = date


@dataclass
class OstreeCliStore(RepositoryStore):
    """Store that shells out to `ostree --repo=<path>`."""

    repo_path: Path
    ostree_bin: str = field(default_factory=env.ostree_bin)
    timeout: float = field(default_factory=env.ostree_timeout)
    _metadata_cache: dict[str, CommitMetadata] = field(default_factory=dict, repr=False)

    @property
    def path(self) -> Path:
        return self.repo_path

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        """Run one ostree subcommand against the repository.

        Raises:
            RepoOpenError: If the executable is missing or times out
        """
        command = [self.ostree_bin, *args, f"--repo={self.repo_path}"]
        logger.debug(f"Running {' '.join(command)}")
        try:
            return subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
                # Stable, UTC, C-locale dates in describe output
                env={**os.environ, "LC_ALL": "C", "TZ": "UTC"},
            )
        except FileNotFoundError as e:
            raise RepoOpenError(f"ostree executable not found: {self.ostree_bin}") from e
        except subprocess.TimeoutExpired as e:
            raise RepoOpenError(f"ostree {args[0]} timed out after {self.timeout}s") from e

    def open(self) -> None:
        if not (self.repo_path / "config").is_file() or not (self.repo_path / "objects").is_dir():
            raise RepoOpenError(f"Not an OSTree repository: {self.repo_path}")
        result = self._run("refs")
        if result.returncode != 0:
            raise RepoOpenError(
                f"Cannot open repository {self.repo_path}: {result.stderr.strip()}"
            )

    def list_branch_refs(self) -> set[str]:
        result = self._run("refs")
        if result.returncode != 0:
            raise RepoOpenError(f"Listing refs failed: {result.stderr.strip()}")
        return {line.strip() for line in result.stdout.splitlines() if line.strip()}

    def resolve_head(self, name: str) -> str:
        try:
            result = self._run("rev-parse", name)
        except RepoOpenError as e:
            raise NotFoundError(f"Cannot resolve ref {name}: {e}") from e
        if result.returncode != 0:
            raise NotFoundError(f"Cannot resolve ref {name}: {result.stderr.strip()}")
        return result.stdout.strip()

    def load_commit_metadata(self, commit_hash: str) -> CommitMetadata:
        cached = self._metadata_cache.get(commit_hash)
        if cached is not None:
            return cached

        # One log call caches the whole ancestry for the following parent lookups
        try:
            result = self._run("log", commit_hash)
        except RepoOpenError as e:
            raise CorruptObjectError(f"Cannot load commit {commit_hash}: {e}") from e
        self._metadata_cache.update(parse_log_output(result.stdout))

        if commit_hash not in self._metadata_cache:
            raise CorruptObjectError(
                f"Cannot load commit {commit_hash}: {result.stderr.strip() or 'unparseable object'}"
            )
        return self._metadata_cache[commit_hash]

    def retain_commits(self, hashes: set[str]) -> None:
        stale = self._metadata_cache.keys() - hashes
        for commit_hash in stale:
            del self._metadata_cache[commit_hash]
        if stale:
            logger.debug(f"Dropped {len(stale)} cached commits no longer reachable")

    def verify_signatures(self, commit_hash: str) -> list[Signature]:
        try:
            result = self._run("show", commit_hash)
        except RepoOpenError as e:
            logger.warning(f"Signature verification of {commit_hash} failed: {e}")
            return [Signature()]

        if result.returncode != 0:
            logger.warning(
                f"Signature verification of {commit_hash} failed: {result.stderr.strip()}"
            )
            return [Signature()]
        return parse_signatures(result.stdout)
