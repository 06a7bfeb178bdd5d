"""Achievement definitions — one-time unlocks checked against game state.

Each achievement names a condition and a threshold; the evaluator in
``clickfluencer.engine.achievements`` reads the matching value off the
state. Unlocks are permanent: prestige keeps them, only a full reset clears
them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

HOUR_MS = 60 * 60 * 1000


class AchievementCategory(Enum):
    PROGRESSION = "progression"
    CURRENCY = "currency"
    GENERATORS = "generators"
    CLICKS = "clicks"
    PRESTIGE = "prestige"
    META = "meta"
    HIDDEN = "hidden"


class AchievementCondition(Enum):
    """What an achievement's threshold is compared against."""

    TOTAL_CLICKS = "total_clicks"
    CLICK_POWER = "click_power"
    TOTAL_CREDS_EARNED = "total_creds_earned"
    AWARDS_EARNED = "awards_earned"
    PRESTIGE_POINTS = "prestige_points"
    NOTORIETY = "notoriety"
    GENERATORS_PURCHASED = "generators_purchased"
    UPGRADES_PURCHASED = "upgrades_purchased"
    ALL_GENERATORS_UNLOCKED = "all_generators_unlocked"
    PRESTIGE_COUNT = "prestige_count"
    PRESTIGE_EXACT = "prestige_exact"
    THEMES_UNLOCKED = "themes_unlocked"
    ALL_THEMES_UNLOCKED = "all_themes_unlocked"
    PLAY_TIME = "play_time"
    SESSION_COUNT = "session_count"
    # Granted by the engine on start, never by the state check
    RETURN_AFTER = "return_after"


@dataclass(frozen=True)
class AchievementDef:
    """Definition of a single achievement."""

    id: str
    name: str
    description: str
    category: AchievementCategory
    icon: str
    condition: AchievementCondition
    threshold: float = 0.0
    # Hidden achievements are not listed until unlocked
    hidden: bool = False


ALL_ACHIEVEMENTS: dict[str, AchievementDef] = {}


def _register(category: AchievementCategory, *achievements: tuple) -> None:
    for ach_id, name, description, icon, condition, threshold in achievements:
        ALL_ACHIEVEMENTS[ach_id] = AchievementDef(
            id=ach_id,
            name=name,
            description=description,
            category=category,
            icon=icon,
            condition=condition,
            threshold=threshold,
            hidden=category is AchievementCategory.HIDDEN,
        )


C = AchievementCondition

_register(
    AchievementCategory.PROGRESSION,
    ("first_click", "First Click", "Click your first post", "👆", C.TOTAL_CLICKS, 1),
    ("first_generator", "Content Creator", "Purchase your first generator", "📸", C.GENERATORS_PURCHASED, 1),
    ("first_upgrade", "Self Improvement", "Purchase your first upgrade", "🔧", C.UPGRADES_PURCHASED, 1),
    ("first_prestige", "Fresh Start", "Perform your first prestige", "🔄", C.PRESTIGE_COUNT, 1),
    ("unlock_all_generators", "Full Creator Suite", "Unlock all generator types", "🎬", C.ALL_GENERATORS_UNLOCKED, 0),
    # Dark, Light and one premium theme
    ("first_theme", "Style Points", "Unlock your first premium theme", "🎨", C.THEMES_UNLOCKED, 3),
    ("theme_master", "Fashion Icon", "Unlock all themes", "👑", C.ALL_THEMES_UNLOCKED, 0),
    ("notorious", "Notorious", "Reach 100 Notoriety", "😎", C.NOTORIETY, 100),
)

_register(
    AchievementCategory.CURRENCY,
    ("hundred_creds", "Rising Star", "Reach 100 creds", "⭐", C.TOTAL_CREDS_EARNED, 100),
    ("thousand_creds", "Trending Topic", "Reach 1,000 creds", "📈", C.TOTAL_CREDS_EARNED, 1_000),
    ("million_creds", "Influencer Status", "Reach 1 million creds", "💫", C.TOTAL_CREDS_EARNED, 1e6),
    ("billion_creds", "Mega Influencer", "Reach 1 billion creds", "🌟", C.TOTAL_CREDS_EARNED, 1e9),
    ("trillion_creds", "Legendary Status", "Reach 1 trillion creds", "✨", C.TOTAL_CREDS_EARNED, 1e12),
    ("first_award", "Lucky Drop", "Collect your first Award", "💎", C.AWARDS_EARNED, 1),
    ("collector", "Award Collector", "Collect 100 Awards", "💰", C.AWARDS_EARNED, 100),
    ("award_hoarder", "Award Hoarder", "Collect 1,000 Awards", "🏆", C.AWARDS_EARNED, 1_000),
    ("prestige_unlocked", "Prestige Unlocked", "Gain your first prestige point", "🔱", C.PRESTIGE_POINTS, 1),
    ("prestige_power", "Prestige Power", "Accumulate 10 prestige points", "⚡", C.PRESTIGE_POINTS, 10),
    ("prestige_titan", "Prestige Titan", "Accumulate 100 prestige points", "👹", C.PRESTIGE_POINTS, 100),
)

_register(
    AchievementCategory.GENERATORS,
    ("ten_generators", "Content Farm I", "Own 10 total generators", "🏭", C.GENERATORS_PURCHASED, 10),
    ("fifty_generators", "Content Farm II", "Own 50 total generators", "🏗️", C.GENERATORS_PURCHASED, 50),
    ("hundred_generators", "Content Farm III", "Own 100 total generators", "🏢", C.GENERATORS_PURCHASED, 100),
    ("twohundred_generators", "Content Farm IV", "Own 200 total generators", "🏙️", C.GENERATORS_PURCHASED, 200),
    ("ten_upgrades", "Optimizer I", "Purchase 10 upgrades", "🔧", C.UPGRADES_PURCHASED, 10),
    ("twentyfive_upgrades", "Optimizer II", "Purchase 25 upgrades", "⚙️", C.UPGRADES_PURCHASED, 25),
    ("fifty_upgrades", "Optimizer III", "Purchase 50 upgrades", "🛠️", C.UPGRADES_PURCHASED, 50),
    ("hundred_upgrades", "Optimizer IV", "Purchase 100 upgrades", "⚡", C.UPGRADES_PURCHASED, 100),
)

_register(
    AchievementCategory.CLICKS,
    ("hundred_clicks", "Click Enthusiast I", "Click 100 times", "👆", C.TOTAL_CLICKS, 100),
    ("thousand_clicks", "Click Enthusiast II", "Click 1,000 times", "👆", C.TOTAL_CLICKS, 1_000),
    ("tenthousand_clicks", "Click Enthusiast III", "Click 10,000 times", "👆", C.TOTAL_CLICKS, 10_000),
    ("hundredthousand_clicks", "Click Enthusiast IV", "Click 100,000 times", "👆", C.TOTAL_CLICKS, 100_000),
    ("click_power_10", "Click Master I", "Reach 10 click power", "💪", C.CLICK_POWER, 10),
    ("click_power_100", "Click Master II", "Reach 100 click power", "💪", C.CLICK_POWER, 100),
    ("click_power_1000", "Click Master III", "Reach 1,000 click power", "💪", C.CLICK_POWER, 1_000),
    ("click_power_10000", "Click Master IV", "Reach 10,000 click power", "💪", C.CLICK_POWER, 10_000),
)

_register(
    AchievementCategory.PRESTIGE,
    ("prestige_5", "Prestige Novice", "Reach prestige level 5", "🔰", C.PRESTIGE_COUNT, 5),
    ("prestige_10", "Prestige Veteran", "Reach prestige level 10", "🎖️", C.PRESTIGE_COUNT, 10),
    ("prestige_25", "Prestige Master", "Reach prestige level 25", "🏅", C.PRESTIGE_COUNT, 25),
    ("prestige_50", "Prestige Legend", "Reach prestige level 50", "🥇", C.PRESTIGE_COUNT, 50),
)

_register(
    AchievementCategory.META,
    ("playtime_1hour", "Getting Started", "Play for 1 hour", "⏱️", C.PLAY_TIME, HOUR_MS),
    ("playtime_10hours", "Dedicated Player", "Play for 10 hours", "⌛", C.PLAY_TIME, 10 * HOUR_MS),
    ("playtime_24hours", "Full Day Grind", "Play for 24 hours", "📅", C.PLAY_TIME, 24 * HOUR_MS),
    ("playtime_100hours", "Century Club", "Play for 100 hours", "💯", C.PLAY_TIME, 100 * HOUR_MS),
    ("sessions_10", "Regular Visitor", "Start 10 game sessions", "🚪", C.SESSION_COUNT, 10),
    ("sessions_50", "Frequent Flyer", "Start 50 game sessions", "🔄", C.SESSION_COUNT, 50),
    ("sessions_100", "Daily Ritual", "Start 100 game sessions", "📆", C.SESSION_COUNT, 100),
)

_register(
    AchievementCategory.HIDDEN,
    ("nice", "Nice.", "Reach 69 or higher click power", "😏", C.CLICK_POWER, 69),
    ("prestigious_fool", "Prestigious Fool", "Reach exactly prestige level 42", "🤪", C.PRESTIGE_EXACT, 42),
    ("welcome_back", "Welcome Back…?", "Return after being away for more than 24 hours", "🕰️",
     C.RETURN_AFTER, 24 * HOUR_MS),
)

del C
