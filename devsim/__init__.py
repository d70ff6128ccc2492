# devsim: software-studio tycoon simulation engine & automated balance simulation

from devsim._types import compare
from devsim.errors import (
    DevSimError,
    InvalidConfiguration,
    InsufficientFunds,
    CapacityExceeded,
    RequirementNotMet,
    UnknownEntity,
    DecodeError,
    VersionMismatch,
    TickAborted,
)
from devsim.events import (
    EventBus,
    Event,
    Severity,
    EnergyChanged,
    ResourceChanged,
    ProjectStarted,
    ProjectCompleted,
    ProjectFailed,
    DeveloperHired,
    DeveloperLeveledUp,
    AchievementUnlocked,
    MarketShifted,
    CompanyLeveledUp,
    Notification,
)
from devsim.rng import RandomSource
from devsim.cost_scaling import CostScaling
from devsim.bonus import BonusKind, combined_multiplier
from devsim.catalog import ProjectTypeDef, TechnologyDef, OfficeDef, MarketEventDef
from devsim.config import SimulationConfig, default_config, load_config
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
from devsim.state import ClockState, SimulationState
from devsim.factory import EntityFactory
from devsim.clock import SimTickEvent, SimulationClock
from devsim.engine import Engine, TickContext
from devsim.projects import ProjectEngine
from devsim.developers import DeveloperEngine
from devsim.market import MarketEngine
from devsim.economy import EconomyLedger
from devsim.requirement import Requirement, Req
from devsim.view import StateView
from devsim.achievement import AchievementDef, AchievementEngine, default_achievements
from devsim.codec import SAVE_VERSION
from devsim.runtime import SimulationRuntime
from devsim.terminal import TerminalCondition, Terminal, SimulationContext
from devsim.strategy import (
    Strategy,
    Idle,
    GreedyContractor,
    ScriptedActions,
    CustomStrategy,
)
from devsim.metrics import MetricsCollector
from devsim.simulation import Simulation
from devsim.report import SimulationReport, build_report
from devsim.formatting import format_text_report

__all__ = [
    "compare",
    # Errors
    "DevSimError",
    "InvalidConfiguration",
    "InsufficientFunds",
    "CapacityExceeded",
    "RequirementNotMet",
    "UnknownEntity",
    "DecodeError",
    "VersionMismatch",
    "TickAborted",
    # Events
    "EventBus",
    "Event",
    "Severity",
    "EnergyChanged",
    "ResourceChanged",
    "ProjectStarted",
    "ProjectCompleted",
    "ProjectFailed",
    "DeveloperHired",
    "DeveloperLeveledUp",
    "AchievementUnlocked",
    "MarketShifted",
    "CompanyLeveledUp",
    "Notification",
    # Randomness and cost
    "RandomSource",
    "CostScaling",
    "BonusKind",
    "combined_multiplier",
    # Catalog and configuration
    "ProjectTypeDef",
    "TechnologyDef",
    "OfficeDef",
    "MarketEventDef",
    "SimulationConfig",
    "default_config",
    "load_config",
    # Data model
    "Company",
    "Developer",
    "EconomyHealth",
    "Feature",
    "MarketState",
    "Project",
    "ProjectStatus",
    "Stats",
    "ClockState",
    "SimulationState",
    # Engines
    "EntityFactory",
    "SimTickEvent",
    "SimulationClock",
    "Engine",
    "TickContext",
    "ProjectEngine",
    "DeveloperEngine",
    "MarketEngine",
    "EconomyLedger",
    # Achievements
    "Requirement",
    "Req",
    "StateView",
    "AchievementDef",
    "AchievementEngine",
    "default_achievements",
    # Persistence
    "SAVE_VERSION",
    # Runtime
    "SimulationRuntime",
    # Terminal
    "TerminalCondition",
    "Terminal",
    "SimulationContext",
    # Strategy
    "Strategy",
    "Idle",
    "GreedyContractor",
    "ScriptedActions",
    "CustomStrategy",
    # Simulation
    "MetricsCollector",
    "Simulation",
    "SimulationReport",
    "build_report",
    "format_text_report",
]
