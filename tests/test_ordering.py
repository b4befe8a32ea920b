"""Tests for depth and lane assignment."""

import random

from claude_graph.core.ordering import (
    assign_depths,
    assign_lanes,
    build_children,
    primary_branch,
    topological_order,
    unique_commits,
)
from claude_graph.models.commit import Commit


def make_commit(sha, parent=None, branches=None):
    """Helper to build a bare commit."""
    return Commit(sha=sha, message=f"commit {sha}", parent_sha=parent, branches=branches or [])


def lanes_for(commits):
    return assign_lanes(topological_order(commits), build_children(commits))


def test_depths_follow_parent_chain_in_any_order():
    """Test depth is one more than the parent's, whatever the input order."""
    commits = [
        make_commit("c", "b"),
        make_commit("e", "d"),
        make_commit("a"),
        make_commit("d", "c"),
        make_commit("b", "a"),
    ]
    depths = assign_depths(commits)
    assert depths == {"a": 0, "b": 1, "c": 2, "d": 3, "e": 4}


def test_depths_empty_and_single():
    """Test empty input and a lone commit."""
    assert assign_depths([]) == {}
    assert assign_depths([make_commit("a")]) == {"a": 0}


def test_dangling_and_self_parent_are_roots():
    """Test parents outside the set, or the commit itself, make roots."""
    commits = [make_commit("a", "missing"), make_commit("b", "b"), make_commit("c", "b")]
    depths = assign_depths(commits)
    assert depths == {"a": 0, "b": 0, "c": 1}


def test_cycle_falls_back_to_input_position():
    """Test commits in a cycle get their input index and the call terminates."""
    commits = [make_commit("root"), make_commit("x", "y"), make_commit("y", "x")]
    depths = assign_depths(commits)
    assert depths == {"root": 0, "x": 1, "y": 2}


def test_unique_commits_keeps_first_position_last_record():
    """Test duplicate SHAs collapse to the last record at the first slot."""
    commits = [make_commit("a"), make_commit("b"), make_commit("a", "b")]
    result = unique_commits(commits)
    assert [c.sha for c in result] == ["a", "b"]
    assert result[0].parent_sha == "b"


def test_topological_order_puts_parents_first():
    """Test parents precede children and independent chains keep input order."""
    commits = [
        make_commit("x2", "x1"),
        make_commit("y1"),
        make_commit("x1"),
        make_commit("y2", "y1"),
    ]
    ordered = [c.sha for c in topological_order(commits)]
    assert ordered == ["x1", "x2", "y1", "y2"]


def test_topological_order_handles_cycles():
    """Test a two-commit cycle is emitted once per commit."""
    commits = [make_commit("a", "b"), make_commit("b", "a")]
    ordered = [c.sha for c in topological_order(commits)]
    assert sorted(ordered) == ["a", "b"]
    assert len(ordered) == 2


def test_long_history_does_not_hit_recursion_limit():
    """Test a chain much longer than the recursion limit."""
    commits = [make_commit("c0")]
    commits += [make_commit(f"c{i}", f"c{i - 1}") for i in range(1, 5000)]
    commits.reverse()

    ordered = topological_order(commits)
    assert ordered[0].sha == "c0"
    assert ordered[-1].sha == "c4999"
    assert assign_depths(commits)["c4999"] == 4999
    assert set(lanes_for(commits).values()) == {0}


def test_primary_branch_strips_decorations():
    """Test ref decorations are removed from the first branch name."""
    assert primary_branch(make_commit("a", branches=["HEAD -> main", "dev"])) == "main"
    assert primary_branch(make_commit("a", branches=["origin/feature"])) == "feature"
    assert primary_branch(make_commit("a")) is None


def test_single_child_inherits_lane():
    """Test a straight chain stays in one lane."""
    commits = [make_commit("a"), make_commit("b", "a"), make_commit("c", "b")]
    assert lanes_for(commits) == {"a": 0, "b": 0, "c": 0}


def test_branch_point_fans_out():
    """Test first child keeps the lane and later siblings get fresh lanes."""
    commits = [
        make_commit("root"),
        make_commit("b", "root"),
        make_commit("c", "root"),
        make_commit("d", "root"),
        make_commit("c2", "c"),
    ]
    lanes = lanes_for(commits)
    assert lanes["root"] == 0
    assert lanes["b"] == 0
    assert lanes["c"] == 1
    assert lanes["d"] == 2
    assert lanes["c2"] == 1


def test_roots_reuse_lane_bound_to_branch():
    """Test roots claiming the same branch name share a lane."""
    commits = [
        make_commit("a", branches=["HEAD -> main"]),
        make_commit("b", branches=["feature"]),
        make_commit("c", branches=["origin/main"]),
        make_commit("d"),
    ]
    lanes = lanes_for(commits)
    assert lanes["a"] == lanes["c"] == 0
    assert lanes["b"] == 1
    assert lanes["d"] == 2


def test_roots_without_branch_get_fresh_lanes():
    """Test unrelated roots never share a lane."""
    commits = [make_commit("a"), make_commit("b"), make_commit("c")]
    assert sorted(lanes_for(commits).values()) == [0, 1, 2]


def test_depth_and_lane_properties_on_random_tree():
    """Test depth and lane invariants hold on a shuffled random tree."""
    rng = random.Random(7)
    commits = [make_commit("n0")]
    for i in range(1, 80):
        commits.append(make_commit(f"n{i}", f"n{rng.randrange(i)}"))
    rng.shuffle(commits)

    depths = assign_depths(commits)
    lanes = lanes_for(commits)
    children = build_children(commits)

    assert set(depths) == {c.sha for c in commits}
    for commit in commits:
        if commit.parent_sha:
            assert depths[commit.sha] == depths[commit.parent_sha] + 1

    for parent, kids in children.items():
        if len(kids) == 1:
            assert lanes[kids[0]] == lanes[parent]
        elif len(kids) > 1:
            kept = [k for k in kids if lanes[k] == lanes[parent]]
            assert kept == [kids[0]]
            fresh = [lanes[k] for k in kids[1:]]
            assert len(set(fresh)) == len(fresh)
