"""JSON-compatible save format for SimulationState.

A save is a plain dict of JSON types. Every field missing from a blob takes
its default, so older saves of the current version keep loading as fields
are added. Version 1 saves (camelCase keys, date deadlines) are migrated.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

from devsim.entities import (
    Company,
    Developer,
    EconomyHealth,
    Feature,
    MarketState,
    Project,
    ProjectStatus,
    Stats,
)
from devsim.errors import DecodeError, VersionMismatch
from devsim.rng import RandomSource
from devsim.state import ClockState, SimulationState

logger = logging.getLogger(__name__)

SAVE_VERSION = 2
SUPPORTED_VERSIONS = (1, 2)

# Simulated seconds granted to v1 projects whose deadline was a calendar date
V1_DEADLINE_GRACE = 300.0


# ── Encoding ─────────────────────────────────────────────────────────


def _encode_company(c: Company) -> dict[str, Any]:
    return {
        "name": c.name,
        "cash": c.cash,
        "reputation": c.reputation,
        "level": c.level,
        "xp": c.xp,
        "office_level": c.office_level,
        "max_developers": c.max_developers,
        "completed_project_count": c.completed_project_count,
        "failed_project_count": c.failed_project_count,
        "total_revenue": c.total_revenue,
        "monthly_expenses": c.monthly_expenses,
    }


def _encode_project(p: Project) -> dict[str, Any]:
    return {
        "id": p.id,
        "type": p.type,
        "name": p.name,
        "client": p.client,
        "difficulty": p.difficulty,
        "requirements": dict(sorted(p.requirements.items())),
        "features": [
            {"name": f.name, "complexity": f.complexity, "implemented": f.implemented}
            for f in p.features
        ],
        "progress": p.progress,
        "quality": p.quality,
        "bug_count": p.bug_count,
        "reward": p.reward,
        "reputation_reward": p.reputation_reward,
        "deadline": p.deadline,
        "assigned_developer_ids": sorted(p.assigned_developer_ids),
        "status": p.status.value,
        "final_reward": p.final_reward,
        "closed_at": p.closed_at,
    }


def _encode_developer(d: Developer) -> dict[str, Any]:
    return {
        "id": d.id,
        "name": d.name,
        "skills": dict(sorted(d.skills.items())),
        "specialty": d.specialty,
        "personality": d.personality,
        "level": d.level,
        "experience": d.experience,
        "energy": d.energy,
        "mood": d.mood,
        "stress": d.stress,
        "salary": d.salary,
        "assigned_project_id": d.assigned_project_id,
        "burnout_risk": d.burnout_risk,
    }


def encode(state: SimulationState) -> dict[str, Any]:
    """Serialize *state* into a dict of JSON types."""
    return {
        "version": SAVE_VERSION,
        "timestamp": time.time(),
        "company": _encode_company(state.company),
        "market": {
            "demand_multiplier": state.market.demand_multiplier,
            "trending_category": state.market.trending_category,
            "economy_health": state.market.economy_health.value,
        },
        "clock": {
            "speed": state.clock.speed,
            "paused": state.clock.paused,
            "tick_index": state.clock.tick_index,
            "sim_time": state.clock.sim_time,
        },
        "projects": {
            "available": [_encode_project(p) for p in state.available],
            "active": {pid: _encode_project(p) for pid, p in sorted(state.active.items())},
            "completed": [_encode_project(p) for p in state.archive],
        },
        "developers": {
            did: _encode_developer(d) for did, d in sorted(state.developers.items())
        },
        "technologies": sorted(state.company.unlocked_technologies),
        "achievements": sorted(state.company.unlocked_achievements),
        "stats": {
            "total_bugs_created": state.stats.total_bugs_created,
            "perfect_projects": state.stats.perfect_projects,
            "bug_free_projects": state.stats.bug_free_projects,
            "total_expenses_paid": state.stats.total_expenses_paid,
            "developers_hired": state.stats.developers_hired,
            "months_elapsed": state.stats.months_elapsed,
        },
        "settings": dict(state.settings),
        "rng": {"seed": state.rng.seed, "state": state.rng.get_state()},
        "next_id": state.next_id,
        "month_elapsed": state.month_elapsed,
    }


def dumps(state: SimulationState, indent: int | None = None) -> str:
    return json.dumps(encode(state), indent=indent)


# ── Decoding ─────────────────────────────────────────────────────────


def _section(blob: dict[str, Any], key: str) -> dict[str, Any]:
    value = blob.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DecodeError(f"Save field {key!r} must be an object, got {type(value).__name__}")
    return value


def _decode_company(
    data: dict[str, Any], technologies: list[str], achievements: list[str]
) -> Company:
    d = Company()
    return Company(
        name=str(data.get("name", d.name)),
        cash=float(data.get("cash", d.cash)),
        reputation=int(data.get("reputation", d.reputation)),
        level=int(data.get("level", d.level)),
        xp=int(data.get("xp", d.xp)),
        office_level=int(data.get("office_level", d.office_level)),
        max_developers=int(data.get("max_developers", d.max_developers)),
        unlocked_technologies=set(technologies),
        unlocked_achievements=set(achievements),
        completed_project_count=int(
            data.get("completed_project_count", d.completed_project_count)
        ),
        failed_project_count=int(data.get("failed_project_count", d.failed_project_count)),
        total_revenue=float(data.get("total_revenue", d.total_revenue)),
        monthly_expenses=float(data.get("monthly_expenses", d.monthly_expenses)),
    )


def _decode_project(data: dict[str, Any]) -> Project:
    final_reward = data.get("final_reward")
    closed_at = data.get("closed_at")
    return Project(
        id=str(data["id"]),
        type=str(data["type"]),
        name=str(data.get("name", "")),
        client=str(data.get("client", "")),
        difficulty=int(data.get("difficulty", 1)),
        requirements={str(k): int(v) for k, v in data.get("requirements", {}).items()},
        features=[
            Feature(
                name=str(f.get("name", "")),
                complexity=int(f.get("complexity", 1)),
                implemented=bool(f.get("implemented", False)),
            )
            for f in data.get("features", [])
        ],
        progress=float(data.get("progress", 0.0)),
        quality=float(data.get("quality", 0.0)),
        bug_count=int(data.get("bug_count", 0)),
        reward=float(data.get("reward", 0.0)),
        reputation_reward=int(data.get("reputation_reward", 0)),
        deadline=float(data.get("deadline", 0.0)),
        assigned_developer_ids={str(i) for i in data.get("assigned_developer_ids", [])},
        status=ProjectStatus(data.get("status", ProjectStatus.AVAILABLE.value)),
        final_reward=None if final_reward is None else float(final_reward),
        closed_at=None if closed_at is None else float(closed_at),
    )


def _decode_developer(data: dict[str, Any]) -> Developer:
    d = Developer(id="")
    assigned = data.get("assigned_project_id")
    return Developer(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        skills={str(k): float(v) for k, v in data.get("skills", {}).items()},
        specialty=str(data.get("specialty", "")),
        personality=str(data.get("personality", "")),
        level=int(data.get("level", d.level)),
        experience=float(data.get("experience", d.experience)),
        energy=float(data.get("energy", d.energy)),
        mood=float(data.get("mood", d.mood)),
        stress=float(data.get("stress", d.stress)),
        salary=int(data.get("salary", d.salary)),
        assigned_project_id=None if assigned is None else str(assigned),
        burnout_risk=bool(data.get("burnout_risk", d.burnout_risk)),
    )


def _decode_speed(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise DecodeError(f"Clock speed must be a positive number, got {value!r}")
    return value


def _decode_rng(data: Any) -> RandomSource:
    if not data:
        return RandomSource()
    seed = data.get("seed")
    if data.get("state") is None:
        return RandomSource(seed)
    return RandomSource.from_state(data["state"], seed)


def _decode_v2(blob: dict[str, Any]) -> SimulationState:
    market_data = _section(blob, "market")
    clock_data = _section(blob, "clock")
    projects = _section(blob, "projects")
    stats_data = _section(blob, "stats")
    dm = MarketState()
    dc = ClockState()
    ds = Stats()

    active = {
        str(pid): _decode_project(p) for pid, p in projects.get("active", {}).items()
    }
    return SimulationState(
        company=_decode_company(
            _section(blob, "company"),
            list(blob.get("technologies", [])),
            list(blob.get("achievements", [])),
        ),
        market=MarketState(
            demand_multiplier=float(
                market_data.get("demand_multiplier", dm.demand_multiplier)
            ),
            trending_category=str(
                market_data.get("trending_category", dm.trending_category)
            ),
            economy_health=EconomyHealth(
                market_data.get("economy_health", dm.economy_health.value)
            ),
        ),
        stats=Stats(
            total_bugs_created=int(stats_data.get("total_bugs_created", ds.total_bugs_created)),
            perfect_projects=int(stats_data.get("perfect_projects", ds.perfect_projects)),
            bug_free_projects=int(stats_data.get("bug_free_projects", ds.bug_free_projects)),
            total_expenses_paid=float(
                stats_data.get("total_expenses_paid", ds.total_expenses_paid)
            ),
            developers_hired=int(stats_data.get("developers_hired", ds.developers_hired)),
            months_elapsed=int(stats_data.get("months_elapsed", ds.months_elapsed)),
        ),
        clock=ClockState(
            speed=_decode_speed(clock_data.get("speed", dc.speed)),
            paused=bool(clock_data.get("paused", dc.paused)),
            tick_index=int(clock_data.get("tick_index", dc.tick_index)),
            sim_time=float(clock_data.get("sim_time", dc.sim_time)),
        ),
        available=[_decode_project(p) for p in projects.get("available", [])],
        active=active,
        archive=[_decode_project(p) for p in projects.get("completed", [])],
        developers={
            str(did): _decode_developer(d)
            for did, d in _section(blob, "developers").items()
        },
        rng=_decode_rng(blob.get("rng")),
        next_id=int(blob.get("next_id", 1)),
        month_elapsed=float(blob.get("month_elapsed", 0.0)),
        settings=dict(_section(blob, "settings")),
    )


# ── Migration ────────────────────────────────────────────────────────


def _migrate_project_v1(p: dict[str, Any], status: ProjectStatus) -> dict[str, Any]:
    deadline = p.get("deadline", 0.0)
    return {
        "id": str(p["id"]),
        "type": p["type"],
        "name": p.get("name", ""),
        "client": p.get("client", ""),
        "difficulty": int(p.get("difficulty", 1)),
        "requirements": p.get("requirements", {}),
        "features": p.get("features", []),
        "progress": p.get("progress", 0.0),
        "quality": p.get("quality", 0.0),
        "bug_count": p.get("bugs", 0),
        "reward": p.get("reward", 0.0),
        "reputation_reward": p.get("reputation", 0),
        "deadline": deadline if isinstance(deadline, (int, float)) else V1_DEADLINE_GRACE,
        "assigned_developer_ids": [str(i) for i in p.get("assignedDevs", [])],
        "status": (
            ProjectStatus.FAILED.value if p.get("failed") else status.value
        ),
    }


def migrate_v1(blob: dict[str, Any]) -> dict[str, Any]:
    """Translate a version 1 save into the current layout."""
    company = _section(blob, "company")
    market = _section(blob, "market")
    projects = _section(blob, "projects")
    stats = _section(blob, "stats")

    achievements = [
        a["id"] if isinstance(a, dict) else a for a in blob.get("achievements", [])
    ]
    return {
        "version": SAVE_VERSION,
        "company": {
            "name": company.get("name", Company().name),
            "cash": company.get("money", 0.0),
            "reputation": company.get("reputation", 50),
            "level": company.get("level", 1),
            "xp": company.get("xp", 0),
            "office_level": company.get("officeLevel", 1),
            "max_developers": company.get("maxDevelopers", 4),
            "completed_project_count": company.get("completedProjects", 0),
            "failed_project_count": company.get("failedProjects", 0),
            "total_revenue": company.get("totalRevenue", 0.0),
            "monthly_expenses": company.get("monthlyExpenses", 0.0),
        },
        "market": {
            "demand_multiplier": market.get("demandMultiplier", 1.0),
            "trending_category": market.get("trendingTech", "web_app"),
            "economy_health": market.get("economyHealth", "stable"),
        },
        "clock": {
            "speed": blob.get("speed", 1),
            "paused": blob.get("paused", False),
            "tick_index": blob.get("tickCount", 0),
        },
        "projects": {
            "available": [
                _migrate_project_v1(p, ProjectStatus.AVAILABLE)
                for p in projects.get("available", [])
            ],
            "active": {
                str(pid): _migrate_project_v1(p, ProjectStatus.ACTIVE)
                for pid, p in projects.get("active", {}).items()
            },
            "completed": [
                _migrate_project_v1(p, ProjectStatus.COMPLETED)
                for p in projects.get("completed", [])
            ],
        },
        "developers": {
            str(did): {
                "id": str(d.get("id", did)),
                "name": d.get("name", ""),
                "skills": d.get("skills", {}),
                "specialty": d.get("specialty", ""),
                "personality": d.get("personality", ""),
                "level": d.get("level", 1),
                "experience": d.get("experience", 0.0),
                "energy": d.get("energy", 100.0),
                "mood": d.get("mood", 80.0),
                "stress": d.get("stress", 20.0),
                "salary": d.get("salary", 0),
                "assigned_project_id": (
                    None if d.get("currentProject") is None else str(d["currentProject"])
                ),
            }
            for did, d in _section(blob, "developers").items()
        },
        "technologies": list(company.get("technologies", [])),
        "achievements": achievements,
        "stats": {
            "total_bugs_created": stats.get("totalBugsCreated", 0),
            "perfect_projects": stats.get("perfectProjects", 0),
        },
        "settings": _section(blob, "settings"),
    }


def decode(blob: Any) -> SimulationState:
    """Rebuild a SimulationState from an encoded blob.

    Raises VersionMismatch for unknown or newer versions and DecodeError
    for anything else that cannot be read.
    """
    if not isinstance(blob, dict):
        raise DecodeError(f"Save must be a JSON object, got {type(blob).__name__}")
    version = blob.get("version")
    if isinstance(version, bool) or version not in SUPPORTED_VERSIONS:
        raise VersionMismatch(version, SAVE_VERSION)

    try:
        if version == 1:
            logger.info("Migrating version 1 save")
            blob = migrate_v1(blob)
        return _decode_v2(blob)
    except DecodeError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"Malformed save: {exc!r}") from exc


def loads(text: str) -> SimulationState:
    try:
        blob = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Save is not valid JSON: {exc}") from exc
    return decode(blob)


# ── Files ────────────────────────────────────────────────────────────


def write_save(path: str | Path, state: SimulationState) -> None:
    with open(str(path), "w") as f:
        json.dump(encode(state), f, indent=2)


def read_save(path: str | Path) -> SimulationState:
    with open(str(path)) as f:
        return loads(f.read())
