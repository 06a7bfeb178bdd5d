"""Save migrations — bring older save documents up to the current schema.

Steps run in ascending version order, and only for documents older than
the step. Each step looks for the legacy shape it knows about, rewrites it
in place on a copy, records what changed and stamps its version. A
document that is already current passes through untouched.

History:

* 0.2.3  followers/shards/reputation became creds/awards/prestige.
* 0.4.0  session stats, player settings, the notoriety fields and the
         achievement unlock map.
* 1.0.0  snake_case keys and tagged upgrade records.
"""

from __future__ import annotations

import copy
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from clickfluencer.engine.errors import MigrationError
from clickfluencer.engine.game_state import GAME_VERSION

logger = logging.getLogger(__name__)

Doc = dict[str, Any]

_VERSION_RE = re.compile(r"^v?(\d+)\.(\d+)\.(\d+)$")


def parse_version(version: Any) -> tuple[int, int, int]:
    """``"1.0.0"`` or ``"v0.4.0"`` → ``(1, 0, 0)``. A missing version is pre-history."""
    if version is None or version == "":
        return (0, 0, 0)
    if not isinstance(version, str):
        raise MigrationError(f"Unreadable save version: {version!r}")
    match = _VERSION_RE.match(version.strip())
    if not match:
        raise MigrationError(f"Unreadable save version: {version!r}")
    major, minor, patch = (int(part) for part in match.groups())
    return (major, minor, patch)


@dataclass
class MigrationReport:
    """What ``migrate`` did to a document."""

    from_version: str
    to_version: str
    changes: list[str] = field(default_factory=list)
    steps: list[str] = field(default_factory=list)

    @property
    def migrated(self) -> bool:
        return bool(self.steps)


@dataclass(frozen=True)
class Migration:
    version: str
    description: str
    apply: Callable[[Doc], list[str]]

    @property
    def key(self) -> tuple[int, int, int]:
        return parse_version(self.version)


# ── 0.2.3: currency renames ───────────────────────────────────────

_CURRENCY_RENAMES = (
    ("followers", "creds"),
    ("shards", "awards"),
    ("reputation", "prestige"),
)

_STATS_RENAMES = (
    ("totalFollowersEarned", "totalCredsEarned"),
    ("shardsEarned", "awardsEarned"),
)


def _rename(d: Doc, old: str, new: str, label: str, changes: list[str]) -> None:
    if old not in d:
        return
    value = d.pop(old)
    # A document holding both keys keeps the newer one
    d.setdefault(new, value)
    changes.append(f"{label}{old} → {label}{new}")


def _migrate_0_2_3(doc: Doc) -> list[str]:
    changes: list[str] = []
    for old, new in _CURRENCY_RENAMES:
        _rename(doc, old, new, "", changes)

    stats = doc.get("stats")
    if isinstance(stats, dict):
        for old, new in _STATS_RENAMES:
            _rename(stats, old, new, "stats.", changes)

    generators = doc.get("generators")
    if isinstance(generators, list):
        renamed = 0
        for g in generators:
            if isinstance(g, dict) and "baseFollowersPerSecond" in g:
                g.setdefault("baseCredsPerSecond", g.pop("baseFollowersPerSecond"))
                renamed += 1
        if renamed:
            changes.append(f"generators[].baseFollowersPerSecond → baseCredsPerSecond ({renamed})")
    return changes


# ── 0.4.0: defaults and notoriety ─────────────────────────────────

_STATS_DEFAULTS_040: dict[str, Any] = {
    "totalClicks": 0,
    "totalCredsEarned": 0,
    "totalGeneratorsPurchased": 0,
    "totalUpgradesPurchased": 0,
    "prestigeCount": 0,
    "awardsEarned": 0,
    "cachesFound": 0,
    "totalNotorietyEarned": 0,
    "playTime": 0,
    "sessionCount": 1,
}

_SETTINGS_DEFAULTS_040: dict[str, Any] = {
    "autoSave": True,
    "showNotifications": True,
    "soundEnabled": True,
    "offlineProgressEnabled": True,
}


def _level_map(items: list[Any]) -> dict[str, int]:
    """``[{"id": "smm", "level": 2}, ...]`` → ``{"smm": 2}``."""
    levels: dict[str, int] = {}
    for item in items:
        if not isinstance(item, dict) or "id" not in item:
            continue
        raw = item.get("level", item.get("count", item.get("currentLevel", 0)))
        levels[str(item["id"])] = int(raw or 0)
    return levels


def _unlock_map(items: list[Any], fallback_time: Any) -> dict[str, float]:
    """``[{"id": "nice", "unlocked": true, "unlockedAt": 5}, ...]`` → ``{"nice": 5.0}``.

    Locked entries are dropped; an unlock with no timestamp gets ``fallback_time``.
    """
    unlocked: dict[str, float] = {}
    for item in items:
        if not isinstance(item, dict) or "id" not in item or not item.get("unlocked"):
            continue
        when = item.get("unlockedAt")
        unlocked[str(item["id"])] = float(when if when is not None else fallback_time or 0)
    return unlocked


def _migrate_0_4_0(doc: Doc) -> list[str]:
    changes: list[str] = []

    stats = doc.get("stats")
    if not isinstance(stats, dict):
        stats = {}
        doc["stats"] = stats
        changes.append("Added stats")
    for key, default in _STATS_DEFAULTS_040.items():
        if key not in stats:
            stats[key] = default
            changes.append(f"Added stats.{key}")
    fallback_time = doc.get("lastSaveTime", 0)
    for key in ("lastTickTime", "runStartTime"):
        if key not in stats:
            stats[key] = fallback_time
            changes.append(f"Added stats.{key}")

    settings = doc.get("settings")
    if not isinstance(settings, dict):
        settings = {}
        doc["settings"] = settings
        changes.append("Added settings")
    for key, default in _SETTINGS_DEFAULTS_040.items():
        if key not in settings:
            settings[key] = default
            changes.append(f"Added settings.{key}")

    if "notoriety" not in doc:
        doc["notoriety"] = 0
        changes.append("Added notoriety")

    for key in ("notorietyGenerators", "notorietyUpgrades"):
        value = doc.get(key)
        if value is None:
            doc[key] = {}
            changes.append(f"Added {key}")
        elif isinstance(value, list):
            doc[key] = _level_map(value)
            changes.append(f"{key} list → id map")

    achievements = doc.get("achievements")
    if achievements is None:
        doc["achievements"] = {}
        changes.append("Added achievements")
    elif isinstance(achievements, list):
        doc["achievements"] = _unlock_map(achievements, fallback_time)
        changes.append("achievements list → id map")

    return changes


# ── 1.0.0: snake_case and tagged upgrades ─────────────────────────

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")

# Records whose keys are field names (id-keyed maps are left alone)
_RECORD_LISTS = ("generators", "upgrades", "themes", "activeEvents")
_RECORD_DICTS = ("stats", "settings")

_LEGACY_EVENT_EFFECTS = {
    "followerMultiplier": "production",
    "credMultiplier": "production",
    "productionMultiplier": "production",
    "generatorMultiplier": "generator",
    "clickMultiplier": "click",
}


def snake_case(name: str) -> str:
    return _CAMEL_RE.sub(r"_\1", name).lower()


def _snake_keys(d: Doc) -> tuple[Doc, int]:
    out: Doc = {}
    renamed = 0
    for key, value in d.items():
        new_key = snake_case(key)
        if new_key != key:
            renamed += 1
        # Newer snake_case key wins over its camelCase twin
        if new_key in out and new_key != key:
            continue
        out[new_key] = value
    return out, renamed


def _tag_upgrade(record: Doc) -> Doc:
    """Turn a widened upgrade record into a tagged one."""
    if "kind" in record:
        return record
    tagged: Doc = {"id": record.get("id")}
    if "tier" in record or "max_tier" in record:
        tier = record.get("tier")
        if tier is None:
            tier = record.get("max_tier", 0) if record.get("purchased") else 0
        tagged.update(kind="tiered", tier=int(tier))
    elif "current_level" in record or "level" in record:
        level = record.get("current_level", record.get("level", 0))
        tagged.update(kind="infinite", level=int(level or 0))
    else:
        tagged.update(kind="one_shot", purchased=bool(record.get("purchased", False)))
    return tagged


def _flatten_event(record: Doc) -> Doc:
    effect = record.get("effect")
    if isinstance(effect, dict):
        record["multiplier"] = effect.get("multiplier", 1)
        record["effect"] = _LEGACY_EVENT_EFFECTS.get(effect.get("type", ""), "production")
    if "duration" in record and "duration_ms" not in record:
        record["duration_ms"] = record.pop("duration")
    record.pop("active", None)
    return record


def _migrate_1_0_0(doc: Doc) -> list[str]:
    changes: list[str] = []
    renamed_total = 0

    top, renamed = _snake_keys(doc)
    renamed_total += renamed
    doc.clear()
    doc.update(top)

    for key in _RECORD_DICTS:
        value = doc.get(key)
        if isinstance(value, dict):
            doc[key], renamed = _snake_keys(value)
            renamed_total += renamed

    for key in _RECORD_LISTS:
        value = doc.get(snake_case(key))
        if not isinstance(value, list):
            continue
        records = []
        for item in value:
            if isinstance(item, dict):
                item, renamed = _snake_keys(item)
                renamed_total += renamed
            records.append(item)
        doc[snake_case(key)] = records

    if renamed_total:
        changes.append(f"camelCase → snake_case ({renamed_total} keys)")

    upgrades = doc.get("upgrades")
    if isinstance(upgrades, list):
        widened = [u for u in upgrades if isinstance(u, dict) and "kind" not in u]
        if widened:
            doc["upgrades"] = [_tag_upgrade(u) if isinstance(u, dict) else u for u in upgrades]
            changes.append(f"upgrades → tagged records ({len(widened)})")

    events = doc.get("active_events")
    if isinstance(events, list):
        legacy = [e for e in events if isinstance(e, dict) and isinstance(e.get("effect"), dict)]
        if legacy:
            doc["active_events"] = [_flatten_event(e) if isinstance(e, dict) else e for e in events]
            changes.append(f"active_events effect → flat fields ({len(legacy)})")

    return changes


MIGRATIONS: tuple[Migration, ...] = (
    Migration("0.2.3", "Currency renames", _migrate_0_2_3),
    Migration("0.4.0", "Session stats, settings and notoriety", _migrate_0_4_0),
    Migration("1.0.0", "snake_case keys and tagged upgrades", _migrate_1_0_0),
)


def migrate(doc: Doc) -> tuple[Doc, MigrationReport]:
    """Return a migrated copy of ``doc`` and a report of what changed.

    Raises MigrationError for unreadable versions, for documents written
    by a newer game than this one and for legacy fields a step cannot read.
    """
    if not isinstance(doc, dict):
        raise MigrationError(f"Save document must be an object, got {type(doc).__name__}")

    raw_version = doc.get("version")
    current = parse_version(raw_version)
    if current > parse_version(GAME_VERSION):
        raise MigrationError(
            f"Save version {raw_version} is newer than supported version {GAME_VERSION}"
        )

    report = MigrationReport(from_version=str(raw_version or "pre-0.2.3"), to_version=str(raw_version))
    migrated = copy.deepcopy(doc)
    for step in sorted(MIGRATIONS, key=lambda m: m.key):
        if current >= step.key:
            continue
        try:
            changes = step.apply(migrated)
        except (TypeError, ValueError, AttributeError) as exc:
            raise MigrationError(f"Save could not be migrated to {step.version}: {exc}") from exc
        migrated["version"] = step.version
        current = step.key
        report.steps.append(step.version)
        report.changes.extend(changes)
        logger.info("Save migrated to %s: %s", step.version, ", ".join(changes) or "no changes")

    report.to_version = migrated.get("version", GAME_VERSION)
    return migrated, report
