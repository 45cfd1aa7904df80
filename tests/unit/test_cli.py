"""Tests for the branch-graph CLI."""

import json
from pathlib import Path

from typer.testing import CliRunner

from branch_graph.cli import app

runner = CliRunner()


def test_layout_prints_nodes(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["layout", str(snapshot_file)])
    assert result.exit_code == 0
    assert "Canvas 720x182, 4 nodes" in result.stdout
    assert "col=1" in result.stdout


def test_layout_marks_unfocused(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["layout", str(snapshot_file), "--separator", "2"])
    assert result.exit_code == 0
    lines = [line for line in result.stdout.splitlines() if "[unfocused]" in line]
    assert len(lines) == 1
    assert lines[0].strip().startswith("c ")


def test_layout_json(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["layout", str(snapshot_file), "--json", "--separator", "1"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["rootSiblings"] == ["a", "b", "c"]
    flags = {n["id"]: n["unfocused"] for n in data["nodes"]}
    assert flags == {"main": False, "a": False, "b": True, "c": True}


def test_drag_reorders_columns(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["drag", str(snapshot_file), "b", "--to", "640"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["siblingOrder"] == {"main": ["a", "c", "b"]}
    assert data["separatorChanges"] == []


def test_drag_past_last_column_moves_separator(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["drag", str(snapshot_file), "b", "--to", "700"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["siblingOrder"] == {"main": ["a", "c", "b"]}
    assert data["separatorChanges"] == [2]
    assert data["focusSeparatorIndex"] == 2


def test_drag_write_persists_order(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["drag", str(snapshot_file), "b", "--to", "640", "--write"])
    assert result.exit_code == 0
    saved = json.loads(snapshot_file.read_text())
    assert saved["siblingOrder"] == {"main": ["a", "c", "b"]}

    layout = runner.invoke(app, ["layout", str(snapshot_file), "--json"])
    xs = {n["id"]: n["x"] for n in json.loads(layout.stdout)["nodes"]}
    assert xs["a"] < xs["c"] < xs["b"]


def test_drag_unknown_branch_fails(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["drag", str(snapshot_file), "nope", "--to", "0"])
    assert result.exit_code == 1


def test_separator_drag_reports_each_step(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["separator", str(snapshot_file), "--to", "240"])
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["separatorChanges"] == [2, 1]
    assert data["focusSeparatorIndex"] == 1


def test_reparent_creates_edge(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["reparent", str(snapshot_file), "c", "a", "--write"])
    assert result.exit_code == 0
    saved = json.loads(snapshot_file.read_text())
    edges = {(e["parent"], e["child"]) for e in saved["edges"]}
    assert ("a", "c") in edges
    assert ("main", "c") not in edges


def test_reparent_onto_current_parent_fails(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["reparent", str(snapshot_file), "a", "main"])
    assert result.exit_code == 1


def test_reparent_unknown_parent_fails(snapshot_file: Path) -> None:
    result = runner.invoke(app, ["reparent", str(snapshot_file), "c", "nope"])
    assert result.exit_code == 1


def test_replay_events(snapshot_file: Path, tmp_path: Path) -> None:
    events = tmp_path / "events.json"
    events.write_text(
        json.dumps(
            [
                {"type": "down-column", "node": "a", "x": 120, "y": 110},
                {"type": "move", "x": 370, "y": 110},
                {"type": "up"},
            ]
        )
    )
    result = runner.invoke(app, ["replay", str(snapshot_file), str(events)])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["siblingOrder"] == {"main": ["b", "a", "c"]}


def test_missing_snapshot_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["layout", str(tmp_path / "missing.json")])
    assert result.exit_code == 1


def test_cyclic_snapshot_fails(tmp_path: Path) -> None:
    path = tmp_path / "cyclic.json"
    path.write_text(
        json.dumps(
            {
                "defaultBranch": "main",
                "nodes": ["main", "a", "b"],
                "edges": [
                    {"parent": "main", "child": "a"},
                    {"parent": "a", "child": "b"},
                    {"parent": "b", "child": "a"},
                ],
            }
        )
    )
    result = runner.invoke(app, ["layout", str(path)])
    assert result.exit_code == 1
