"""Tests for merging the tentative planning tree into the layout."""

from branch_graph.core.layout.engine import compute_layout
from branch_graph.models.branch import LayoutRequest, NodeKind, TentativeEdge, TentativeTask
from branch_graph.models.layout import BranchLayout

TASKS = (
    TentativeTask(id="t1", title="Add login page"),
    TentativeTask(id="t2", title="Write tests"),
    TentativeTask(id="t3", title="Docs", branch_name="docs/login"),
)


def _layout(tasks=TASKS, edges=(("t1", "t2"), ("t1", "t3")), base="feat") -> BranchLayout:
    request = LayoutRequest.build(
        ["main", "feat"],
        [("main", "feat")],
        default_branch="main",
        tentative_nodes=tasks,
        tentative_edges=edges,
        tentative_base_branch=base,
    )
    return compute_layout(request)


def test_display_name_slugs_title() -> None:
    task = TentativeTask(id="x", title="  Fix: the BIG bug!! ")
    assert task.display_name == "task/fix-the-big-bug"
    assert TentativeTask(id="abcdef123456", title="!!!").display_name == "task/abcdef12"
    assert TentativeTask(id="x", title="a" * 40).display_name == "task/" + "a" * 30


def test_tentative_tasks_start_after_primary_columns() -> None:
    layout = _layout()
    login = layout.node("task/add-login-page")
    tests = layout.node("task/write-tests")
    docs = layout.node("docs/login")
    assert login is not None and tests is not None and docs is not None
    # First child shares the parent's column, the next one gets a new column.
    assert (login.column, tests.column, docs.column) == (1, 1, 2)
    assert (login.depth, tests.depth, docs.depth) == (2, 3, 3)
    assert login.kind is NodeKind.TENTATIVE
    assert login.title == "Add login page"


def test_tentative_rows_hang_below_base_branch() -> None:
    layout = _layout()
    feat = layout.node("feat")
    login = layout.node("task/add-login-page")
    tests = layout.node("task/write-tests")
    assert feat is not None and login is not None and tests is not None
    assert login.y == feat.y + feat.height + 28
    assert tests.y == login.y + login.height + 28


def test_width_pass_covers_tentative_columns() -> None:
    layout = _layout()
    login = layout.node("task/add-login-page")
    docs = layout.node("docs/login")
    assert login is not None and docs is not None
    assert login.x == 20 + 200 + 40
    assert docs.x == login.x + 200 + 40


def test_tentative_edges_are_flagged() -> None:
    layout = _layout()
    tentative = [(e.parent, e.child) for e in layout.edges if e.tentative]
    assert tentative == [
        ("feat", "task/add-login-page"),
        ("task/add-login-page", "task/write-tests"),
        ("task/add-login-page", "docs/login"),
    ]
    assert all(not e.designed for e in layout.edges if e.tentative)
    assert [(e.parent, e.child) for e in layout.edges if not e.tentative] == [("main", "feat")]


def test_task_colliding_with_real_branch_is_not_laid_out() -> None:
    tasks = (TentativeTask(id="t1", title="Feature", branch_name="feat"),)
    layout = _layout(tasks=tasks, edges=())
    assert [n.id for n in layout.nodes] == ["main", "feat"]


def test_parent_cycle_stops_gracefully() -> None:
    tasks = (TentativeTask(id="t1", title="One"), TentativeTask(id="t2", title="Two"))
    layout = _layout(tasks=tasks, edges=(("t1", "t2"), ("t2", "t1")))
    one = layout.node("task/one")
    two = layout.node("task/two")
    assert one is not None and two is not None
    assert {one.depth, two.depth} == {2, 3}
    assert one.column == two.column == 1


def test_missing_base_branch_hangs_from_first_node() -> None:
    layout = _layout(tasks=TASKS[:1], edges=(), base="nope")
    login = layout.node("task/add-login-page")
    assert login is not None
    assert login.depth == 1
    assert login.parent_branch == "main"


def test_no_base_branch_means_no_tentative_tree() -> None:
    layout = _layout(base=None)
    assert all(n.kind is NodeKind.REAL for n in layout.nodes)


def test_tentative_only_input_is_laid_out() -> None:
    request = LayoutRequest.build(
        [],
        [],
        default_branch="main",
        tentative_nodes=[TentativeTask(id="t1", title="Solo")],
        tentative_edges=[TentativeEdge("t1", "t1")],
        tentative_base_branch="main",
    )
    layout = compute_layout(request)
    solo = layout.node("task/solo")
    assert solo is not None
    assert (solo.column, solo.depth, solo.y) == (0, 1, 20)
    assert layout.edges == ()


def test_children_of_colliding_task_are_not_laid_out() -> None:
    tasks = (
        TentativeTask(id="t1", title="Feature", branch_name="feat"),
        TentativeTask(id="t2", title="Child"),
        TentativeTask(id="t3", title="Grandchild"),
    )
    layout = _layout(tasks=tasks, edges=(("t1", "t2"), ("t2", "t3")))
    assert [n.id for n in layout.nodes] == ["main", "feat"]
    assert not any(e.tentative for e in layout.edges)


def test_child_of_unknown_task_is_not_a_root() -> None:
    tasks = (TentativeTask(id="t1", title="Root"), TentativeTask(id="t2", title="Child"))
    layout = _layout(tasks=tasks, edges=(("ghost", "t2"),))
    assert layout.node("task/root") is not None
    assert layout.node("task/child") is None


def test_shown_parent_wins_over_unknown_parent() -> None:
    tasks = (TentativeTask(id="t1", title="Root"), TentativeTask(id="t2", title="Child"))
    layout = _layout(tasks=tasks, edges=(("ghost", "t2"), ("t1", "t2")))
    child = layout.node("task/child")
    assert child is not None
    assert child.parent_branch == "task/root"
