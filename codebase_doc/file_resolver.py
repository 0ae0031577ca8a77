"""Expands user-supplied paths into the list of files to document."""

import glob
import os
import re
import stat
from datetime import UTC, datetime

from loguru import logger

from .errors import UnsupportedFileTypeError
from .parsers.base import ParserRegistry

MANIFEST_FILENAME = ".document"

IGNORE_DIRS = {"CVS", ".svn", ".git", ".hg", ".bzr"}

_COMMENT = re.compile(r"#.*")


def parse_manifest(text: str) -> list[str]:
    """Strip ``#`` comments and split a manifest into glob patterns."""
    return _COMMENT.sub("", text).split()


def _file_kind(mode: int) -> str:
    kinds = (
        (stat.S_ISFIFO, "fifo"),
        (stat.S_ISSOCK, "socket"),
        (stat.S_ISCHR, "characterSpecial"),
        (stat.S_ISBLK, "blockSpecial"),
    )
    for check, kind in kinds:
        if check(mode):
            return kind
    return "unknown"


class FileSetResolver:
    """Recursive file discovery honoring manifests, exclusions and staleness.

    Paths named at the top level with ``force_doc`` are always documented,
    whatever their extension or age. Files found while recursing into
    directories must be recognized by a parser and newer than the cutoff.
    A ``.document`` manifest inside a directory replaces the default listing
    with the glob patterns it contains.
    """

    def __init__(
        self,
        parsers: ParserRegistry,
        manifest_filename: str = MANIFEST_FILENAME,
        ignore_dirs: set[str] | None = None,
    ):
        self.parsers = parsers
        self.manifest_filename = manifest_filename
        self.ignore_dirs = IGNORE_DIRS if ignore_dirs is None else ignore_dirs

    def resolve(
        self,
        roots: list[str],
        force_doc: bool = False,
        exclude: re.Pattern[str] | None = None,
        cutoff: datetime | None = None,
    ) -> list[str]:
        """Return candidate files under ``roots`` in traversal order."""
        if cutoff is not None and cutoff.tzinfo is None:
            cutoff = cutoff.astimezone()
        return self._resolve(roots, force_doc, exclude, exclude, cutoff)

    def _resolve(
        self,
        roots: list[str],
        force_doc: bool,
        exclude: re.Pattern[str] | None,
        listing_exclude: re.Pattern[str] | None,
        cutoff: datetime | None,
    ) -> list[str]:
        # exclude filters ``roots``; listing_exclude filters directory listings
        file_list: list[str] = []
        for file_name in roots:
            if exclude is not None and exclude.search(file_name):
                logger.debug(f"Excluded {file_name}")
                continue
            try:
                st = os.stat(file_name)
            except OSError:
                continue

            if stat.S_ISREG(st.st_mode):
                if cutoff is not None and not force_doc and self._is_stale(st, cutoff):
                    logger.debug(f"Skipping unchanged {file_name}")
                    continue
                if force_doc or self.parsers.can_parse(file_name):
                    file_list.append(self._normalize(file_name))
            elif stat.S_ISDIR(st.st_mode):
                if os.path.basename(os.path.normpath(file_name)) in self.ignore_dirs:
                    continue
                manifest = os.path.join(file_name, self.manifest_filename)
                if os.path.isfile(manifest):
                    # Paths a manifest names explicitly are not subject to exclusion
                    candidates = self._manifest_candidates(file_name, manifest)
                    file_list.extend(
                        self._resolve(candidates, False, None, listing_exclude, cutoff)
                    )
                else:
                    candidates = sorted(glob.glob(os.path.join(file_name, "*")))
                    file_list.extend(
                        self._resolve(
                            candidates, False, listing_exclude, listing_exclude, cutoff
                        )
                    )
            else:
                raise UnsupportedFileTypeError(file_name, _file_kind(st.st_mode))

        return file_list

    def _manifest_candidates(self, directory: str, manifest: str) -> list[str]:
        """Expand each manifest pattern relative to ``directory``, in order."""
        with open(manifest, encoding="utf-8", errors="replace") as f:
            patterns = parse_manifest(f.read())
        logger.debug(f"Using {len(patterns)} pattern(s) from {manifest}")

        candidates: list[str] = []
        for pattern in patterns:
            candidates.extend(sorted(glob.glob(os.path.join(directory, pattern))))
        return candidates

    @staticmethod
    def _is_stale(st: os.stat_result, cutoff: datetime) -> bool:
        return datetime.fromtimestamp(st.st_mtime, tz=UTC) < cutoff

    @staticmethod
    def _normalize(file_name: str) -> str:
        prefix = "." + os.sep
        while file_name.startswith(prefix) or file_name.startswith("./"):
            file_name = file_name[2:]
        return file_name
