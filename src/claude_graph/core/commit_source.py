"""Read commits from a git repository and merge conversation contexts."""

import json
import logging
import re
from collections import defaultdict
from pathlib import Path
from typing import Dict, List

import git
from git import Repo
from pydantic import ValidationError

from claude_graph.exceptions import CommitSourceError, ContextSourceError
from claude_graph.models.commit import Commit, CommitDetail, FileChange
from claude_graph.models.conversation import ContextRecord

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

SHA_PATTERN = re.compile(r"^[0-9a-f]{7,40}$", re.IGNORECASE)

CHANGE_STATUS = {
    "A": "added",
    "D": "deleted",
    "M": "modified",
    "R": "renamed",
    "T": "modified",
}


def open_repo(repo_path: Path) -> Repo:
    """Open the git repository containing ``repo_path``."""
    try:
        return Repo(repo_path, search_parent_directories=True)
    except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
        raise CommitSourceError(f"Not a git repository: {repo_path}") from e


def branch_tips(repo: Repo) -> Dict[str, List[str]]:
    """Map commit SHAs to the branch names whose tip they are.

    Local heads come first; remote refs are added only when no local branch
    of the same name points at the commit.
    """
    tips: Dict[str, List[str]] = defaultdict(list)
    for head in repo.heads:
        tips[head.commit.hexsha].append(head.name)

    for remote in repo.remotes:
        for ref in remote.refs:
            if ref.remote_head == "HEAD":
                continue
            names = tips[ref.commit.hexsha]
            if ref.remote_head not in names:
                names.append(ref.name)

    return dict(tips)


def load_commits(
    repo_path: Path,
    limit: int = DEFAULT_LIMIT,
    rev: str = "HEAD",
    all_branches: bool = False,
) -> List[Commit]:
    """Load up to ``limit`` commits, newest first.

    Only the first parent of a merge commit is kept.
    """
    repo = open_repo(repo_path)
    tips = branch_tips(repo)
    target = "--all" if all_branches else rev

    try:
        raw_commits = list(repo.iter_commits(target, max_count=limit))
    except (git.exc.GitCommandError, ValueError) as e:
        raise CommitSourceError(f"Cannot read history for '{target}': {e}") from e

    commits = []
    for c in raw_commits:
        if len(c.parents) > 1:
            logger.debug(
                "Merge commit %s: keeping first parent, dropping %s",
                c.hexsha[:7],
                ", ".join(p.hexsha[:7] for p in c.parents[1:]),
            )
        commits.append(
            Commit(
                sha=c.hexsha,
                message=c.message.strip(),
                author_email=c.author.email or "",
                author_name=c.author.name,
                timestamp=c.committed_datetime,
                parent_sha=c.parents[0].hexsha if c.parents else None,
                branches=tips.get(c.hexsha, []),
            )
        )

    logger.debug("Loaded %d commits from %s", len(commits), repo.working_dir)
    return commits


def load_context_map(path: Path) -> Dict[str, ContextRecord]:
    """Load context records keyed by commit SHA.

    Accepts a JSON list of records carrying ``commit_sha``, or a JSON object
    mapping SHAs to records.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ContextSourceError(f"Cannot read contexts file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ContextSourceError(f"Contexts file {path} is not valid JSON: {e}") from e

    if isinstance(raw, dict):
        entries = []
        for sha, record in raw.items():
            if not isinstance(record, dict):
                raise ContextSourceError(
                    f"Context for {sha} in {path} must be a JSON object"
                )
            entries.append({**record, "commit_sha": sha})
        raw = entries
    if not isinstance(raw, list):
        raise ContextSourceError(f"Contexts file {path} must hold a list or object")

    records: Dict[str, ContextRecord] = {}
    for entry in raw:
        try:
            record = ContextRecord.model_validate(entry)
        except ValidationError as e:
            raise ContextSourceError(f"Invalid context record in {path}: {e}") from e
        records[record.commit_sha] = record

    logger.debug("Loaded %d context records from %s", len(records), path)
    return records


def _find_record(sha: str, records: Dict[str, ContextRecord]):
    record = records.get(sha)
    if record is not None:
        return record
    matches = [r for key, r in records.items() if key and sha.startswith(key)]
    return matches[0] if len(matches) == 1 else None


def attach_contexts(
    commits: List[Commit], records: Dict[str, ContextRecord]
) -> List[Commit]:
    """Return copies of ``commits`` carrying their conversation contexts.

    Records keyed by an abbreviated SHA match when the prefix is unambiguous.
    """
    merged = []
    for commit in commits:
        record = _find_record(commit.sha, records)
        if record is None:
            merged.append(commit)
            continue
        merged.append(
            commit.model_copy(update={"conversation_context": record.to_context()})
        )
    return merged


def _file_statuses(commit) -> Dict[str, str]:
    """Map paths touched by ``commit`` to their status against the first parent."""
    if not commit.parents:
        return {}
    statuses = {}
    for diff in commit.parents[0].diff(commit):
        path = diff.b_path or diff.a_path
        statuses[path] = CHANGE_STATUS.get(diff.change_type, "modified")
    return statuses


def _patch_text(repo: Repo, commit) -> str:
    if commit.parents:
        return repo.git.diff(commit.parents[0].hexsha, commit.hexsha)
    return repo.git.diff_tree(commit.hexsha, patch=True, root=True, no_commit_id=True)


def commit_detail(repo_path: Path, sha: str, patch: bool = False) -> CommitDetail:
    """Load author, parents, file stats and optionally the patch of one commit.

    ``sha`` may be abbreviated down to 7 hex characters.
    """
    if not sha or not SHA_PATTERN.match(sha):
        raise CommitSourceError(f"Invalid commit SHA format: {sha!r}")

    repo = open_repo(repo_path)
    try:
        commit = repo.commit(sha.lower())
    except (git.exc.BadName, git.exc.BadObject, ValueError) as e:
        raise CommitSourceError(f"Commit not found: {sha}") from e

    statuses = _file_statuses(commit)
    default_status = "modified" if commit.parents else "added"
    files = [
        FileChange(
            path=path,
            status=statuses.get(path, default_status),
            additions=counts.get("insertions", 0),
            deletions=counts.get("deletions", 0),
        )
        for path, counts in sorted(commit.stats.files.items())
    ]
    total = commit.stats.total

    subject, _, body = commit.message.strip().partition("\n")
    return CommitDetail(
        sha=commit.hexsha,
        short_sha=commit.hexsha[:7],
        subject=subject,
        body=body.strip(),
        author_name=commit.author.name or "",
        author_email=commit.author.email or "",
        committer_name=commit.committer.name or "",
        committer_email=commit.committer.email or "",
        authored_at=commit.authored_datetime,
        committed_at=commit.committed_datetime,
        parent_shas=[p.hexsha for p in commit.parents],
        tree_sha=commit.tree.hexsha,
        files_changed=total.get("files", len(files)),
        insertions=total.get("insertions", 0),
        deletions=total.get("deletions", 0),
        files=files,
        patch=_patch_text(repo, commit) if patch else None,
    )
