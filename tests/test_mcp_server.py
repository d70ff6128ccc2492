"""Tests for MCP server tool functions."""
import json

from devsim import codec
from devsim.config import SimulationConfig, default_config
from devsim.engine import Engine
from devsim.runtime import SimulationRuntime

from devsim.mcp.server import (
    _GameHolder,
    _tool_accept_project,
    _tool_assign_developer,
    _tool_get_developers,
    _tool_get_game_info,
    _tool_get_game_state,
    _tool_get_projects,
    _tool_hire_developer,
    _tool_load_game,
    _tool_new_game,
    _tool_research,
    _tool_save_game,
    _tool_set_speed,
    _tool_unassign_developer,
    _tool_upgrade_office,
    _tool_wait,
    create_server,
)


class _FailingEngine(Engine):
    def tick(self, state, ctx):
        raise RuntimeError("disk on fire")


def _make_holder(seed: int = 1) -> _GameHolder:
    config = default_config()
    return _GameHolder(
        config=config,
        runtime=SimulationRuntime(config=config, seed=seed),
        seed=seed,
    )


# ── get_game_info ────────────────────────────────────────────────────


class TestGetGameInfo:
    def test_returns_expected_structure(self):
        result = _tool_get_game_info(_make_holder())
        assert result["name"] == "DevSim Tycoon"
        assert len(result["project_types"]) == 6
        assert len(result["technologies"]) == 4
        assert len(result["offices"]) == 4
        assert result["speeds"] == [1, 2, 5, 10]

    def test_technology_fields(self):
        result = _tool_get_game_info(_make_holder())
        techs = {t["id"]: t for t in result["technologies"]}
        assert techs["agile"]["cost"] == 10_000
        assert techs["agile"]["level"] == 5

    def test_achievements_listed(self):
        result = _tool_get_game_info(_make_holder())
        ids = [a["id"] for a in result["achievements"]]
        assert "first_project" in ids


# ── get_game_state ───────────────────────────────────────────────────


class TestGetGameState:
    def test_initial_values(self):
        result = _tool_get_game_state(_make_holder())
        assert result["time"] == 0.0
        assert result["tick"] == 0
        assert result["paused"] is False
        assert result["company"]["name"] == "DevSim Studios"
        assert result["company"]["cash"] == 50_000.0
        assert result["company"]["level"] == 1
        assert result["market"]["trending"] == "web_app"
        assert result["technologies"] == []

    def test_notifications_drained(self):
        holder = _make_holder()
        holder.runtime.hire_developer()
        first = _tool_get_game_state(holder)
        assert any(n["severity"] == "success" for n in first["notifications"])
        second = _tool_get_game_state(holder)
        assert second["notifications"] == []


def test_get_projects_and_developers():
    holder = _make_holder()
    projects = _tool_get_projects(holder)
    assert len(projects["available"]) == 5
    assert projects["active"] == []
    assert projects["completed"] == 0
    assert projects["failed"] == 0

    devs = _tool_get_developers(holder)["developers"]
    assert [d["id"] for d in devs] == ["dev-6", "dev-7"]
    assert all(d["project"] is None for d in devs)


# ── Actions ──────────────────────────────────────────────────────────


class TestAcceptProject:
    def test_success(self):
        holder = _make_holder()
        result = _tool_accept_project(holder, "project-1", ["dev-6"])
        assert result["success"] is True
        assert result["project"]["status"] == "active"
        assert result["project"]["team"] == ["dev-6"]
        assert holder.runtime.state.company.cash == 49_000.0

    def test_unknown_project(self):
        result = _tool_accept_project(_make_holder(), "project-99")
        assert result["success"] is False
        assert result["error"] == "UnknownEntity"
        assert "project-99" in result["reason"]

    def test_busy_developer(self):
        holder = _make_holder()
        _tool_accept_project(holder, "project-1", ["dev-6"])
        result = _tool_accept_project(holder, "project-2", ["dev-6"])
        assert result["error"] == "RequirementNotMet"

    def test_rejection_reported_as_notification(self):
        holder = _make_holder()
        _tool_accept_project(holder, "project-99")
        notes = _tool_get_game_state(holder)["notifications"]
        assert notes[-1]["severity"] == "error"


def test_assign_and_unassign():
    holder = _make_holder()
    _tool_accept_project(holder, "project-1", ["dev-6"])
    assert _tool_assign_developer(holder, "dev-7", "project-1") == {"success": True}
    assert holder.runtime.state.developers["dev-7"].assigned_project_id == "project-1"

    assert _tool_unassign_developer(holder, "dev-7") == {"success": True}
    again = _tool_unassign_developer(holder, "dev-7")
    assert again["success"] is False
    assert again["error"] == "RequirementNotMet"


def test_assign_to_board_project_rejected():
    result = _tool_assign_developer(_make_holder(), "dev-6", "project-2")
    assert result["error"] == "RequirementNotMet"


def test_hire_developer():
    holder = _make_holder()
    cost = holder.runtime.hire_cost()
    result = _tool_hire_developer(holder)
    assert result["success"] is True
    assert result["developer_id"] in holder.runtime.state.developers
    assert holder.runtime.state.company.cash == 50_000.0 - cost


def test_research_requires_level():
    result = _tool_research(_make_holder(), "agile")
    assert result["success"] is False
    assert result["error"] == "RequirementNotMet"


def test_research_unknown_technology():
    assert _tool_research(_make_holder(), "blockchain")["error"] == "UnknownEntity"


def test_upgrade_office_insufficient_funds():
    result = _tool_upgrade_office(_make_holder())
    assert result["error"] == "InsufficientFunds"


def test_upgrade_office():
    holder = _make_holder()
    holder.runtime.state.company.cash = 60_000.0
    result = _tool_upgrade_office(holder)
    assert result == {"success": True, "office_level": 2}
    assert holder.runtime.state.company.max_developers == 8


def test_set_speed():
    holder = _make_holder()
    assert _tool_set_speed(holder, 5)["success"] is True
    assert holder.runtime.clock.speed == 5
    assert _tool_set_speed(holder, 3)["error"] == "InvalidConfiguration"


# ── wait ─────────────────────────────────────────────────────────────


class TestWait:
    def test_advances_time(self):
        holder = _make_holder()
        _tool_set_speed(holder, 10)
        result = _tool_wait(holder, 10)
        assert result["waited"] == 10
        assert result["ticks"] == 10
        assert result["time"] == 10.0
        assert result["completed"] == 0

    def test_rejects_non_positive(self):
        assert _tool_wait(_make_holder(), 0) == {"error": "Seconds must be positive"}

    def test_rejects_too_long(self):
        assert "error" in _tool_wait(_make_holder(), 4000)

    def test_paused(self):
        holder = _make_holder()
        holder.runtime.pause()
        assert _tool_wait(holder, 5) == {"error": "Game is paused"}
        assert holder.runtime.state.clock.tick_index == 0

    def test_reports_new_achievements(self):
        holder = _make_holder()
        holder.runtime.state.company.cash = 2_000_000.0
        _tool_set_speed(holder, 10)
        result = _tool_wait(holder, 1)
        assert "millionaire" in result["new_achievements"]

    def test_failed_tick_reported(self):
        holder = _make_holder()
        holder.runtime.engines.append(_FailingEngine())
        result = _tool_wait(holder, 1)
        assert result["success"] is False
        assert result["error"] == "TickAborted"
        assert holder.runtime.state.clock.tick_index == 0


# ── Persistence ──────────────────────────────────────────────────────


class TestSaveLoad:
    def test_round_trip(self):
        holder = _make_holder()
        _tool_accept_project(holder, "project-1", ["dev-6"])
        holder.runtime.run_ticks(50)
        saved = _tool_save_game(holder)
        assert saved["success"] is True
        assert json.loads(saved["save"])["version"] == codec.SAVE_VERSION

        other = _make_holder(seed=9)
        loaded = _tool_load_game(other, saved["save"])
        assert loaded["success"] is True
        assert other.runtime.state == holder.runtime.state

    def test_loaded_runtime_still_reports_notifications(self):
        holder = _make_holder()
        _tool_load_game(holder, _tool_save_game(_make_holder())["save"])
        holder.runtime.hire_developer()
        assert _tool_get_game_state(holder)["notifications"]

    def test_bad_save(self):
        holder = _make_holder()
        before = holder.runtime
        result = _tool_load_game(holder, "{broken")
        assert result["success"] is False
        assert result["error"] == "DecodeError"
        assert holder.runtime is before

    def test_newer_version_rejected(self):
        result = _tool_load_game(_make_holder(), json.dumps({"version": 3}))
        assert result["error"] == "VersionMismatch"

    def test_disallowed_speed_rejected(self):
        blob = codec.encode(_make_holder().runtime.state)
        blob["clock"]["speed"] = 3
        result = _tool_load_game(_make_holder(), json.dumps(blob))
        assert result["error"] == "InvalidConfiguration"


class TestNewGame:
    def test_resets_state(self):
        holder = _make_holder()
        holder.runtime.hire_developer()
        holder.runtime.run_ticks(10)
        result = _tool_new_game(holder)
        assert result["success"] is True
        assert holder.runtime.state.clock.tick_index == 0
        assert len(holder.runtime.state.developers) == 2

    def test_same_seed_same_board(self):
        holder = _make_holder(seed=4)
        board = [p.name for p in holder.runtime.state.available]
        _tool_new_game(holder)
        assert [p.name for p in holder.runtime.state.available] == board

    def test_new_seed(self):
        holder = _make_holder(seed=4)
        _tool_new_game(holder, seed=11)
        assert holder.seed == 11
        assert holder.runtime.state.rng.seed == 11


def test_create_server():
    server = create_server(SimulationConfig(), seed=3)
    assert server.name == "DevSim: DevSim Tycoon"
