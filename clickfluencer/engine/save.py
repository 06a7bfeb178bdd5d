"""Save/load — GameState to and from a versioned JSON document.

Roster entries persist only what changes during play (counts, tiers,
flags). Names, prices and rates are rehydrated from the data tables, so a
balance change reaches old saves automatically.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from typing import Any

from clickfluencer.data.achievements import ALL_ACHIEVEMENTS
from clickfluencer.data.events import EventEffect
from clickfluencer.data.upgrades import InfiniteUpgrade, OneShotUpgrade, TieredUpgrade, Upgrade
from clickfluencer.engine.errors import ClickfluencerError, MigrationError, SaveFormatError
from clickfluencer.engine.game_state import (
    GAME_VERSION,
    ActiveEvent,
    GameState,
    Settings,
    Statistics,
    create_initial_state,
    frozen_map,
)
from clickfluencer.engine.migrations import MigrationReport, migrate
from clickfluencer.engine.storage import ByteStore

logger = logging.getLogger(__name__)

SAVE_KEY = "clickfluencer_save"


@dataclass(frozen=True)
class SaveResult:
    success: bool
    message: str = ""


@dataclass(frozen=True)
class LoadResult:
    success: bool
    state: GameState | None = None
    message: str = ""
    migration: MigrationReport | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)


# ── Serialisation helpers ────────────────────────────────────────


def _upgrade_to_dict(u: Upgrade) -> dict:
    d: dict[str, Any] = {"id": u.id, "kind": u.kind}
    if isinstance(u, TieredUpgrade):
        d["tier"] = u.tier
    elif isinstance(u, InfiniteUpgrade):
        d["level"] = u.level
    else:
        d["purchased"] = u.purchased
    return d


def state_to_dict(state: GameState) -> dict:
    s = state
    return {
        "version": GAME_VERSION,
        "creds": s.creds,
        "awards": s.awards,
        "prestige": s.prestige,
        "notoriety": s.notoriety,
        "generators": [
            {"id": g.id, "count": g.count, "unlocked": g.unlocked} for g in s.generators
        ],
        "upgrades": [_upgrade_to_dict(u) for u in s.upgrades],
        "themes": [
            {"id": t.id, "unlocked": t.unlocked, "active": t.active} for t in s.themes
        ],
        "notoriety_generators": dict(s.notoriety_generators),
        "notoriety_upgrades": dict(s.notoriety_upgrades),
        "active_events": [
            {
                "id": e.id,
                "name": e.name,
                "description": e.description,
                "effect": e.effect.value,
                "multiplier": e.multiplier,
                "duration_ms": e.duration_ms,
                "end_time": e.end_time,
            }
            for e in s.active_events
        ],
        "achievements": dict(s.achievements),
        "stats": {
            "total_clicks": s.stats.total_clicks,
            "total_creds_earned": s.stats.total_creds_earned,
            "total_generators_purchased": s.stats.total_generators_purchased,
            "total_upgrades_purchased": s.stats.total_upgrades_purchased,
            "prestige_count": s.stats.prestige_count,
            "awards_earned": s.stats.awards_earned,
            "caches_found": s.stats.caches_found,
            "total_notoriety_earned": s.stats.total_notoriety_earned,
            "play_time": s.stats.play_time,
            "last_tick_time": s.stats.last_tick_time,
            "run_start_time": s.stats.run_start_time,
            "session_count": s.stats.session_count,
        },
        "settings": {
            "auto_save": s.settings.auto_save,
            "show_notifications": s.settings.show_notifications,
            "sound_enabled": s.settings.sound_enabled,
            "offline_progress_enabled": s.settings.offline_progress_enabled,
        },
        "last_save_time": s.last_save_time,
    }


def _records_by_id(d: dict, key: str) -> dict[str, dict]:
    records = d.get(key, [])
    if not isinstance(records, list):
        raise SaveFormatError(f"{key} must be a list")
    by_id: dict[str, dict] = {}
    for rec in records:
        if not isinstance(rec, dict) or "id" not in rec:
            raise SaveFormatError(f"{key} entries must be objects with an id")
        by_id[str(rec["id"])] = rec
    return by_id


def _drop_unknown(kind: str, saved: dict, known: set[str], warnings: list[str]) -> None:
    for item_id in sorted(set(saved) - known):
        message = f"Dropped unknown {kind} {item_id!r} from save"
        logger.warning(message)
        warnings.append(message)


def _restore_upgrade(base: Upgrade, rec: dict | None) -> Upgrade:
    if rec is None:
        return base
    if isinstance(base, TieredUpgrade):
        tier = rec.get("tier")
        if tier is None:
            tier = base.max_tier if rec.get("purchased") else 0
        return replace(base, tier=max(0, min(int(tier), base.max_tier)))
    if isinstance(base, InfiniteUpgrade):
        return replace(base, level=max(0, int(rec.get("level", 0))))
    if isinstance(base, OneShotUpgrade):
        purchased = rec.get("purchased")
        if purchased is None:
            purchased = int(rec.get("tier", rec.get("level", 0)) or 0) > 0
        return replace(base, purchased=bool(purchased))
    return base


def _restore_levels(kind: str, saved: Any, defaults: dict, warnings: list[str]) -> dict[str, int]:
    if not isinstance(saved, dict):
        raise SaveFormatError(f"{kind} must be an id → level object")
    _drop_unknown(kind, saved, set(defaults), warnings)
    return {key: max(0, int(saved.get(key, default))) for key, default in defaults.items()}


def _restore_stats(base: Statistics, saved: dict) -> Statistics:
    """Cast each known counter to its declared type; an uncastable value raises."""
    fields = Statistics.__dataclass_fields__
    values: dict[str, Any] = {}
    for key, value in saved.items():
        if key not in fields:
            continue
        cast = int if fields[key].type in ("int", int) else float
        values[key] = cast(value)
    return replace(base, **values)


def _restore_achievements(saved: Any, warnings: list[str]) -> dict[str, float]:
    if not isinstance(saved, dict):
        raise SaveFormatError("achievements must be an id → unlock time object")
    _drop_unknown("achievement", saved, set(ALL_ACHIEVEMENTS), warnings)
    return {key: float(saved[key]) for key in ALL_ACHIEVEMENTS if key in saved}


def _restore_event(rec: dict) -> ActiveEvent:
    return ActiveEvent(
        id=str(rec["id"]),
        name=rec.get("name", rec["id"]),
        description=rec.get("description", ""),
        effect=EventEffect(rec.get("effect", "production")),
        multiplier=float(rec.get("multiplier", 1.0)),
        duration_ms=float(rec.get("duration_ms", 0.0)),
        end_time=float(rec.get("end_time", 0.0)),
    )


def dict_to_state(d: dict, warnings: list[str] | None = None) -> GameState:
    """Rebuild a GameState from a current-version document.

    Unknown roster ids are dropped (and noted in ``warnings``); missing ones
    keep their defaults. Structural problems raise SaveFormatError.
    """
    if warnings is None:
        warnings = []
    try:
        return _build_state(d, warnings)
    except (TypeError, ValueError, KeyError) as exc:
        raise SaveFormatError(f"Malformed save field: {exc}") from exc


def _build_state(d: dict, warnings: list[str]) -> GameState:
    if not isinstance(d, dict):
        raise SaveFormatError("Save document must be an object")

    base = create_initial_state(now=d.get("last_save_time", 0.0))

    saved_gens = _records_by_id(d, "generators")
    _drop_unknown("generator", saved_gens, {g.id for g in base.generators}, warnings)
    generators = tuple(
        replace(
            g,
            count=max(0, int(saved_gens[g.id].get("count", 0))),
            unlocked=bool(saved_gens[g.id].get("unlocked", g.unlocked)),
        )
        if g.id in saved_gens
        else g
        for g in base.generators
    )

    saved_upgrades = _records_by_id(d, "upgrades")
    _drop_unknown("upgrade", saved_upgrades, {u.id for u in base.upgrades}, warnings)
    upgrades = tuple(_restore_upgrade(u, saved_upgrades.get(u.id)) for u in base.upgrades)

    saved_themes = _records_by_id(d, "themes")
    _drop_unknown("theme", saved_themes, {t.id for t in base.themes}, warnings)
    themes = tuple(
        replace(
            t,
            unlocked=bool(saved_themes[t.id].get("unlocked", t.unlocked)),
            active=bool(saved_themes[t.id].get("active", False)),
        )
        if t.id in saved_themes
        else t
        for t in base.themes
    )
    active = [t for t in themes if t.active and t.unlocked]
    if len(active) != 1:
        # Exactly one theme is worn; fall back to the first unlocked one
        keep = active[0].id if active else next(t.id for t in themes if t.unlocked or t.cost == 0)
        themes = tuple(
            replace(t, active=t.id == keep, unlocked=t.unlocked or t.id == keep) for t in themes
        )

    events = d.get("active_events", [])
    if not isinstance(events, list):
        raise SaveFormatError("active_events must be a list")

    stats_d = d.get("stats", {})
    settings_d = d.get("settings", {})
    if not isinstance(stats_d, dict) or not isinstance(settings_d, dict):
        raise SaveFormatError("stats and settings must be objects")
    settings_fields = Settings.__dataclass_fields__

    return replace(
        base,
        creds=max(0.0, float(d.get("creds", 0.0))),
        awards=max(0, int(d.get("awards", 0))),
        prestige=max(0.0, float(d.get("prestige", 0.0))),
        notoriety=max(0.0, float(d.get("notoriety", 0.0))),
        generators=generators,
        upgrades=upgrades,
        themes=themes,
        notoriety_generators=frozen_map(
            _restore_levels("notoriety_generators", d.get("notoriety_generators", {}),
                            dict(base.notoriety_generators), warnings)
        ),
        notoriety_upgrades=frozen_map(
            _restore_levels("notoriety_upgrades", d.get("notoriety_upgrades", {}),
                            dict(base.notoriety_upgrades), warnings)
        ),
        active_events=tuple(_restore_event(e) for e in events),
        achievements=frozen_map(_restore_achievements(d.get("achievements", {}), warnings)),
        stats=_restore_stats(base.stats, stats_d),
        settings=replace(
            base.settings,
            **{k: bool(v) for k, v in settings_d.items() if k in settings_fields},
        ),
        version=GAME_VERSION,
        last_save_time=float(d.get("last_save_time", 0.0)),
    )


def serialize_state(state: GameState, pretty: bool = False) -> bytes:
    indent = 2 if pretty else None
    return json.dumps(state_to_dict(state), indent=indent).encode("utf-8")


def _decode(text: str | bytes) -> LoadResult:
    """Parse, migrate and rehydrate one document."""
    try:
        doc = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Corrupt save: %s", exc)
        return LoadResult(False, message=f"Corrupt save data: {exc}")

    try:
        migrated, report = migrate(doc)
    except MigrationError as exc:
        logger.warning("Save migration refused: %s", exc)
        return LoadResult(False, message=str(exc))

    warnings: list[str] = []
    try:
        state = dict_to_state(migrated, warnings)
    except SaveFormatError as exc:
        logger.warning("Invalid save: %s", exc)
        return LoadResult(False, message=str(exc), migration=report)

    return LoadResult(True, state=state, migration=report, warnings=tuple(warnings))


# ── Public API ───────────────────────────────────────────────────


def save_state(store: ByteStore, state: GameState, key: str = SAVE_KEY) -> SaveResult:
    """Persist a state. Failures are reported, never raised."""
    try:
        store.set(key, serialize_state(state))
    except (ClickfluencerError, OSError) as exc:
        logger.warning("Save failed: %s", exc)
        return SaveResult(False, f"Could not save: {exc}")
    return SaveResult(True, "Game saved.")


def load_state(store: ByteStore, key: str = SAVE_KEY) -> LoadResult:
    """Load, migrate and rehydrate the saved state, if any."""
    try:
        raw = store.get(key)
    except (ClickfluencerError, OSError) as exc:
        logger.warning("Load failed: %s", exc)
        return LoadResult(False, message=f"Could not load: {exc}")
    if raw is None:
        return LoadResult(False, message="No save found.")
    return _decode(raw)


def delete_save(store: ByteStore, key: str = SAVE_KEY) -> SaveResult:
    try:
        store.delete(key)
    except (ClickfluencerError, OSError) as exc:
        logger.warning("Delete failed: %s", exc)
        return SaveResult(False, f"Could not delete save: {exc}")
    return SaveResult(True, "Save deleted.")


def export_save(state: GameState, pretty: bool = True) -> str:
    """Human-shareable copy of the save document."""
    return serialize_state(state, pretty=pretty).decode("utf-8")


def import_save(text: str) -> LoadResult:
    return _decode(text)
