"""MCP server wrapping SimulationRuntime for interactive playtesting."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mcp.server.fastmcp import FastMCP

from devsim import codec
from devsim.config import SimulationConfig
from devsim.errors import DevSimError
from devsim.events import Event, Notification
from devsim.runtime import SimulationRuntime

# Maximum simulated seconds per wait() call (one simulated hour)
_MAX_WAIT = 3600
# Notifications kept between get_game_state() calls
_MAX_NOTIFICATIONS = 50


@dataclass
class _GameHolder:
    """Holds the active configuration and runtime."""

    config: SimulationConfig
    runtime: SimulationRuntime
    seed: int | None = None
    notifications: list[Notification] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._listen()

    def _listen(self) -> None:
        self.runtime.bus.subscribe(Notification, self._on_notification)

    def _on_notification(self, event: Event) -> None:
        self.notifications.append(event)
        del self.notifications[:-_MAX_NOTIFICATIONS]

    def replace(self, runtime: SimulationRuntime) -> None:
        self.runtime = runtime
        self.notifications = []
        self._listen()

    def drain(self) -> list[dict[str, str]]:
        out = [{"severity": n.severity.value, "text": n.text} for n in self.notifications]
        self.notifications = []
        return out


def _project_summary(p: Any) -> dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "client": p.client,
        "type": p.type,
        "difficulty": p.difficulty,
        "requirements": dict(sorted(p.requirements.items())),
        "progress": round(p.progress, 1),
        "quality": round(p.quality, 1),
        "bugs": p.bug_count,
        "reward": p.reward,
        "deadline": round(p.deadline, 1),
        "team": sorted(p.assigned_developer_ids),
        "status": p.status.value,
    }


def _error(exc: DevSimError) -> dict[str, Any]:
    return {"success": False, "error": type(exc).__name__, "reason": str(exc)}


# ── Tool logic functions (testable without MCP protocol) ────────────


def _tool_get_game_info(holder: _GameHolder) -> dict[str, Any]:
    cfg = holder.config
    return {
        "name": cfg.name,
        "skills": list(cfg.skills),
        "project_types": [
            {"id": p.id, "display_name": p.display_name, "base_reward": p.base_reward}
            for p in cfg.project_types
        ],
        "technologies": [
            {"id": t.id, "display_name": t.display_name, "cost": t.cost, "level": t.level}
            for t in cfg.technologies
        ],
        "offices": [
            {"level": o.level, "display_name": o.display_name,
             "max_developers": o.max_developers, "cost": o.cost}
            for o in cfg.offices
        ],
        "achievements": [
            {"id": a.id, "name": a.name, "description": a.description}
            for a in holder.runtime.achievement_engine.catalog
        ],
        "speeds": list(cfg.clock.speed_multipliers),
    }


def _tool_get_game_state(holder: _GameHolder) -> dict[str, Any]:
    runtime = holder.runtime
    state = runtime.state
    company = state.company
    return {
        "time": round(state.now, 2),
        "tick": state.clock.tick_index,
        "speed": state.clock.speed,
        "paused": state.clock.paused,
        "company": {
            "name": company.name,
            "cash": round(company.cash, 2),
            "reputation": company.reputation,
            "level": company.level,
            "xp": company.xp,
            "office_level": company.office_level,
            "max_developers": company.max_developers,
            "monthly_expenses": round(company.monthly_expenses, 2),
            "completed_projects": company.completed_project_count,
            "failed_projects": company.failed_project_count,
            "total_revenue": company.total_revenue,
        },
        "market": {
            "demand_multiplier": round(state.market.demand_multiplier, 3),
            "trending": state.market.trending_category,
            "economy": state.market.economy_health.value,
        },
        "technologies": sorted(company.unlocked_technologies),
        "achievements": sorted(company.unlocked_achievements),
        "hire_cost": runtime.hire_cost(),
        "notifications": holder.drain(),
    }


def _tool_get_projects(holder: _GameHolder) -> dict[str, Any]:
    state = holder.runtime.state
    return {
        "available": [_project_summary(p) for p in state.available],
        "active": [_project_summary(p) for p in state.iter_active()],
        "completed": len(state.completed_projects()),
        "failed": len(state.failed_projects()),
    }


def _tool_get_developers(holder: _GameHolder) -> dict[str, Any]:
    devs = []
    for dev_id, d in sorted(holder.runtime.state.developers.items()):
        devs.append({
            "id": dev_id,
            "name": d.name,
            "level": d.level,
            "specialty": d.specialty,
            "skills": {k: round(v, 1) for k, v in sorted(d.skills.items())},
            "energy": round(d.energy, 1),
            "mood": round(d.mood, 1),
            "stress": round(d.stress, 1),
            "salary": d.salary,
            "project": d.assigned_project_id,
            "burnout_risk": d.burnout_risk,
        })
    return {"developers": devs}


def _tool_accept_project(
    holder: _GameHolder, project_id: str, developer_ids: list[str] | None = None
) -> dict[str, Any]:
    try:
        project = holder.runtime.accept_project(project_id, developer_ids)
    except DevSimError as exc:
        return _error(exc)
    return {"success": True, "project": _project_summary(project)}


def _tool_assign_developer(
    holder: _GameHolder, developer_id: str, project_id: str
) -> dict[str, Any]:
    try:
        holder.runtime.assign_developer(developer_id, project_id)
    except DevSimError as exc:
        return _error(exc)
    return {"success": True}


def _tool_unassign_developer(holder: _GameHolder, developer_id: str) -> dict[str, Any]:
    try:
        holder.runtime.unassign_developer(developer_id)
    except DevSimError as exc:
        return _error(exc)
    return {"success": True}


def _tool_hire_developer(holder: _GameHolder) -> dict[str, Any]:
    try:
        dev = holder.runtime.hire_developer()
    except DevSimError as exc:
        return _error(exc)
    return {"success": True, "developer_id": dev.id, "name": dev.name, "salary": dev.salary}


def _tool_research(holder: _GameHolder, technology_id: str) -> dict[str, Any]:
    try:
        tech = holder.runtime.research_technology(technology_id)
    except DevSimError as exc:
        return _error(exc)
    return {"success": True, "technology": tech.id}


def _tool_upgrade_office(holder: _GameHolder) -> dict[str, Any]:
    try:
        level = holder.runtime.upgrade_office()
    except DevSimError as exc:
        return _error(exc)
    return {"success": True, "office_level": level}


def _tool_set_speed(holder: _GameHolder, speed: float) -> dict[str, Any]:
    try:
        holder.runtime.set_speed(speed)
    except DevSimError as exc:
        return _error(exc)
    return {"success": True, "speed": speed}


def _tool_wait(holder: _GameHolder, seconds: float) -> dict[str, Any]:
    if seconds <= 0:
        return {"error": "Seconds must be positive"}
    if seconds > _MAX_WAIT:
        return {"error": f"Cannot wait more than {_MAX_WAIT} simulated seconds per call"}

    runtime = holder.runtime
    if runtime.clock.paused:
        return {"error": "Game is paused"}
    state = runtime.state
    completed_before = state.company.completed_project_count
    failed_before = state.company.failed_project_count
    achievements_before = set(state.company.unlocked_achievements)

    try:
        ticks = runtime.run_for(seconds)
    except DevSimError as exc:
        return _error(exc)

    company = state.company
    result: dict[str, Any] = {
        "waited": seconds,
        "ticks": ticks,
        "time": round(state.now, 2),
        "cash": round(company.cash, 2),
        "completed": company.completed_project_count - completed_before,
        "failed": company.failed_project_count - failed_before,
    }
    new_achievements = sorted(company.unlocked_achievements - achievements_before)
    if new_achievements:
        result["new_achievements"] = new_achievements
    return result


def _tool_save_game(holder: _GameHolder) -> dict[str, Any]:
    return {"success": True, "save": codec.dumps(holder.runtime.state)}


def _tool_load_game(holder: _GameHolder, save: str) -> dict[str, Any]:
    try:
        runtime = SimulationRuntime(config=holder.config, state=codec.loads(save))
    except DevSimError as exc:
        return _error(exc)
    holder.replace(runtime)
    return {"success": True, "time": round(runtime.state.now, 2)}


def _tool_new_game(holder: _GameHolder, seed: int | None = None) -> dict[str, Any]:
    holder.seed = seed if seed is not None else holder.seed
    holder.replace(SimulationRuntime(config=holder.config, seed=holder.seed))
    return {"success": True, "message": "Game reset to initial state"}


# ── Server factory ──────────────────────────────────────────────────


def create_server(config: SimulationConfig, seed: int | None = None) -> FastMCP:
    """Create an MCP server wrapping a SimulationRuntime for the given config."""
    holder = _GameHolder(
        config=config,
        runtime=SimulationRuntime(config=config, seed=seed),
        seed=seed,
    )

    mcp = FastMCP(
        name=f"DevSim: {config.name}",
    )

    @mcp.tool()
    def get_game_info() -> dict[str, Any]:
        """Get static catalogs: skills, project types, technologies, offices, achievements."""
        return _tool_get_game_info(holder)

    @mcp.tool()
    def get_game_state() -> dict[str, Any]:
        """Get company, market and clock state plus notifications since the last call."""
        return _tool_get_game_state(holder)

    @mcp.tool()
    def get_projects() -> dict[str, Any]:
        """List available and active projects."""
        return _tool_get_projects(holder)

    @mcp.tool()
    def get_developers() -> dict[str, Any]:
        """List developers with skills, energy, mood, stress and assignment."""
        return _tool_get_developers(holder)

    @mcp.tool()
    def accept_project(project_id: str, developer_ids: list[str] | None = None) -> dict[str, Any]:
        """Accept a project from the board. Without developer_ids the team is picked automatically."""
        return _tool_accept_project(holder, project_id, developer_ids)

    @mcp.tool()
    def assign_developer(developer_id: str, project_id: str) -> dict[str, Any]:
        """Add a free developer to an active project."""
        return _tool_assign_developer(holder, developer_id, project_id)

    @mcp.tool()
    def unassign_developer(developer_id: str) -> dict[str, Any]:
        """Take a developer off their project."""
        return _tool_unassign_developer(holder, developer_id)

    @mcp.tool()
    def hire_developer() -> dict[str, Any]:
        """Hire a new developer at the current hiring cost."""
        return _tool_hire_developer(holder)

    @mcp.tool()
    def research(technology_id: str) -> dict[str, Any]:
        """Research a technology."""
        return _tool_research(holder, technology_id)

    @mcp.tool()
    def upgrade_office() -> dict[str, Any]:
        """Move to the next office level."""
        return _tool_upgrade_office(holder)

    @mcp.tool()
    def set_speed(speed: float) -> dict[str, Any]:
        """Change the game speed multiplier."""
        return _tool_set_speed(holder, speed)

    @mcp.tool()
    def wait(seconds: float) -> dict[str, Any]:
        """Advance simulated time by the given seconds (max 3600)."""
        return _tool_wait(holder, seconds)

    @mcp.tool()
    def save_game() -> dict[str, Any]:
        """Return the current state as a JSON save string."""
        return _tool_save_game(holder)

    @mcp.tool()
    def load_game(save: str) -> dict[str, Any]:
        """Replace the current game with a JSON save string."""
        return _tool_load_game(holder, save)

    @mcp.tool()
    def new_game(seed: int | None = None) -> dict[str, Any]:
        """Reset the game to initial state."""
        return _tool_new_game(holder, seed)

    return mcp
