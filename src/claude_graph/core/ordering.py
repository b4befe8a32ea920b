"""Depth and lane assignment for commit graphs.

All functions here take the commit list the engine received and never
modify it. Parent links that point outside the list, or back at the commit
itself, are treated as absent: such commits are roots.
"""

import logging
from collections import deque
from typing import Dict, List, Optional

from claude_graph.models.commit import Commit

logger = logging.getLogger(__name__)

BRANCH_DECORATIONS = ("HEAD -> ", "origin/")


def unique_commits(commits: List[Commit]) -> List[Commit]:
    """Drop duplicate SHAs, keeping the first position and the last record."""
    by_sha: Dict[str, Commit] = {}
    for commit in commits:
        by_sha[commit.sha] = commit
    return list(by_sha.values())


def resolve_parent(commit: Commit, by_sha: Dict[str, Commit]) -> Optional[str]:
    """Return the parent SHA if it names another commit in the set."""
    parent = commit.parent_sha
    if parent and parent != commit.sha and parent in by_sha:
        return parent
    return None


def build_children(commits: List[Commit]) -> Dict[str, List[str]]:
    """Map each SHA to its children in discovery (input) order."""
    by_sha = {c.sha: c for c in commits}
    children: Dict[str, List[str]] = {c.sha: [] for c in commits}
    for commit in commits:
        parent = resolve_parent(commit, by_sha)
        if parent:
            children[parent].append(commit.sha)
    return children


def assign_depths(
    commits: List[Commit], positions: Optional[Dict[str, int]] = None
) -> Dict[str, int]:
    """Assign each commit its distance from the nearest root.

    Breadth-first from every root at once; a commit is final on first visit.
    Commits no root reaches (cycles) get their input position, taken from
    ``positions`` when the caller deduplicated the list first.
    """
    positions = positions or {}
    by_sha = {c.sha: c for c in commits}
    children = build_children(commits)

    depths: Dict[str, int] = {}
    queue = deque(
        (c.sha, 0) for c in commits if resolve_parent(c, by_sha) is None
    )
    while queue:
        sha, depth = queue.popleft()
        if sha in depths:
            continue
        depths[sha] = depth
        for child in children[sha]:
            if child not in depths:
                queue.append((child, depth + 1))

    for index, commit in enumerate(commits):
        if commit.sha not in depths:
            fallback = positions.get(commit.sha, index)
            logger.debug(
                "Commit %s is unreachable from any root, using depth %d",
                commit.sha,
                fallback,
            )
            depths[commit.sha] = fallback

    return depths


def topological_order(commits: List[Commit]) -> List[Commit]:
    """Order commits parent-before-child.

    Depth-first from each commit in input order, parent first, so independent
    chains keep their relative input order. Iterative to survive long
    histories; the visited set breaks cycles.
    """
    by_sha = {c.sha: c for c in commits}
    visited = set()
    ordered: List[Commit] = []

    for start in commits:
        if start.sha in visited:
            continue
        # Walk up to the first visited ancestor, then emit top-down
        chain = []
        sha: Optional[str] = start.sha
        while sha is not None and sha not in visited:
            visited.add(sha)
            commit = by_sha[sha]
            chain.append(commit)
            sha = resolve_parent(commit, by_sha)
        ordered.extend(reversed(chain))

    return ordered


def primary_branch(commit: Commit) -> Optional[str]:
    """First branch name of a commit with ref decorations stripped."""
    if not commit.branches:
        return None
    name = commit.branches[0]
    for decoration in BRANCH_DECORATIONS:
        name = name.replace(decoration, "")
    return name.strip() or None


def assign_lanes(
    ordered: List[Commit], children: Dict[str, List[str]]
) -> Dict[str, int]:
    """Assign lanes walking commits in topological order.

    An only child, or the first child at a branch point, keeps its parent's
    lane; later siblings get fresh lanes. Commits without an assigned parent
    reuse the lane bound to their branch name, or take a fresh one.
    """
    by_sha = {c.sha: c for c in ordered}
    lanes: Dict[str, int] = {}
    branch_lanes: Dict[str, int] = {}
    next_lane = 0

    for commit in ordered:
        branch = primary_branch(commit)
        parent = resolve_parent(commit, by_sha)

        if parent is not None and parent in lanes:
            siblings = children.get(parent, [])
            if siblings.index(commit.sha) > 0:
                lane = next_lane
                next_lane += 1
            else:
                lane = lanes[parent]
        elif branch is not None and branch in branch_lanes:
            lane = branch_lanes[branch]
        else:
            lane = next_lane
            next_lane += 1

        lanes[commit.sha] = lane
        if branch is not None and branch not in branch_lanes:
            branch_lanes[branch] = lane

    return lanes
