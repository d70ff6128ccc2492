"""Static game catalogs: project types, skills, technologies, offices, names."""

from __future__ import annotations

from dataclasses import dataclass, field

from devsim.bonus import BonusKind


@dataclass(frozen=True)
class ProjectTypeDef:
    """A project category and the skills its contracts ask for."""

    id: str
    display_name: str = ""
    base_reward: float = 1.0
    complexity: float = 1.0
    skills: tuple[str, ...] = ()
    name_words: tuple[str, ...] = ()


@dataclass(frozen=True)
class TechnologyDef:
    """A researchable technology with multiplicative bonuses."""

    id: str
    display_name: str = ""
    cost: float = 0.0
    level: int = 1
    bonuses: dict[BonusKind, float] = field(default_factory=dict)


@dataclass(frozen=True)
class OfficeDef:
    level: int
    display_name: str = ""
    max_developers: int = 4
    cost: float = 0.0


@dataclass(frozen=True)
class MarketEventDef:
    """A random market event.

    demand_delta is added to the demand multiplier (then clamped);
    trending, if set, becomes the trending category.
    """

    id: str
    message: str
    demand_delta: float = 0.0
    trending: str | None = None


SKILLS: tuple[str, ...] = (
    "frontend",
    "backend",
    "mobile",
    "database",
    "devops",
    "testing",
    "ui_ux",
    "ai_ml",
)

PROJECT_TYPES: tuple[ProjectTypeDef, ...] = (
    ProjectTypeDef(
        "web_app", "Web App", 1.0, 1.0,
        ("frontend", "backend", "database"),
        ("Dashboard", "Analytics", "CRM", "CMS"),
    ),
    ProjectTypeDef(
        "mobile_app", "Mobile App", 1.2, 1.3,
        ("mobile", "ui_ux", "backend"),
        ("Fitness", "Social", "Shopping", "Travel"),
    ),
    ProjectTypeDef(
        "game", "Game", 1.5, 1.8,
        ("frontend", "ui_ux", "testing"),
        ("Quest", "Battle", "Adventure", "Puzzle"),
    ),
    ProjectTypeDef(
        "api", "API", 0.8, 0.9,
        ("backend", "database", "devops"),
        ("Data", "Integration", "Service", "Gateway"),
    ),
    ProjectTypeDef(
        "desktop_app", "Desktop App", 1.1, 1.2,
        ("frontend", "backend", "testing"),
        ("Editor", "Manager", "Studio", "Workspace"),
    ),
    ProjectTypeDef(
        "ai_tool", "AI Tool", 2.0, 2.5,
        ("ai_ml", "backend", "database"),
        ("Assistant", "Analyzer", "Predictor", "Optimizer"),
    ),
)

TECHNOLOGIES: tuple[TechnologyDef, ...] = (
    TechnologyDef(
        "agile", "Agile Development", 10_000, 5,
        {BonusKind.PRODUCTIVITY: 1.2},
    ),
    TechnologyDef(
        "ci_cd", "CI/CD Pipeline", 15_000, 10,
        {BonusKind.QUALITY: 1.3, BonusKind.BUG_RATE: 0.8},
    ),
    TechnologyDef(
        "cloud", "Cloud Infrastructure", 20_000, 15,
        {BonusKind.SCALABILITY: 1.5},
    ),
    TechnologyDef(
        "ai_assist", "AI Code Assistant", 30_000, 20,
        {BonusKind.PRODUCTIVITY: 1.5},
    ),
)

OFFICES: tuple[OfficeDef, ...] = (
    OfficeDef(1, "Garage Startup", 4, 0),
    OfficeDef(2, "Small Office", 8, 50_000),
    OfficeDef(3, "Tech Hub", 16, 150_000),
    OfficeDef(4, "Corporate Tower", 32, 500_000),
)

MARKET_EVENTS: tuple[MarketEventDef, ...] = (
    MarketEventDef("tech_boom", "Tech boom! Project demand increased!", 0.2),
    MarketEventDef(
        "economic_downturn", "Economic downturn affects project budgets", -0.2
    ),
    MarketEventDef(
        "new_framework", "New framework released - web projects in demand",
        0.0, "web_app",
    ),
    MarketEventDef(
        "security_breach", "Major security breach - API hardening in demand",
        0.05, "api",
    ),
    MarketEventDef(
        "ai_revolution", "AI revolution - AI projects paying premium",
        0.1, "ai_tool",
    ),
)

DEVELOPER_NAMES: tuple[str, ...] = (
    "Alex", "Jordan", "Taylor", "Casey", "Morgan", "Riley", "Quinn", "Sage",
    "Blake", "Drew", "Avery", "Reese", "Cameron", "Finley", "Emerson", "River",
)

PERSONALITIES: tuple[str, ...] = (
    "perfectionist", "innovator", "team_player", "lone_wolf",
    "speedster", "methodical", "creative", "analytical",
)

PROJECT_NAME_PREFIXES: tuple[str, ...] = (
    "Super", "Ultra", "Mega", "Hyper", "Next", "Future", "Smart", "Pro",
    "Elite", "Prime", "Alpha", "Beta", "Cloud", "Quantum", "Digital", "Cyber",
)

PROJECT_NAME_SUFFIXES: tuple[str, ...] = (
    "Manager", "Tracker", "System", "Platform", "Suite", "Hub", "Portal", "Engine",
    "Framework", "Solution", "Tool", "App", "Connect", "Link", "Base", "Core",
)

CLIENT_NAMES: tuple[str, ...] = (
    "TechCorp", "Digital Dynamics", "StartupHub", "Innovation Labs", "FutureSoft",
    "CloudWorks", "DataFlow Inc", "CyberSolutions", "WebMasters Co", "AppFactory",
    "CodeCraft", "DevHouse", "ByteBuilders", "PixelPerfect", "SystemSync",
)

FEATURE_NAMES: tuple[str, ...] = (
    "User Authentication", "Dashboard", "Analytics", "Reporting", "API Integration",
    "Real-time Updates", "Mobile Responsive", "Data Export", "Search Functionality",
    "Notifications", "Dark Mode", "Multi-language", "Payment Processing",
    "Social Sharing",
)
