"""
Journey Store: the only writer of the journey document.

Every mutation follows the same path:
    validate -> compute the new values -> commit them -> persist

Validation and computation happen before anything is assigned, so a
rejected call leaves the state untouched. Persistence failures never undo
a committed mutation: the in-memory state stays authoritative and the
store reports itself as not durable until the next successful write.

Derived values (tree growth, glow, particle density) are recomputed as an
explicit step after every entry and again when a document is loaded.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from src.journey import growth
from src.journey.analyzer import TextAnalyzer
from src.journey.lexicon import NEUTRAL_EMOTION
from src.journey.models import (
    DEFAULT_TITLE,
    BondedSpirit,
    JournalEntry,
    JourneyState,
    Milestone,
    Realm,
    empty_themes,
)
from src.journey.runes import RuneAssigner
from src.journey.schemas import parse_document
from src.journey.storage import StorageAdapter, encode_document
from src.lib.exceptions import CorruptPersistedState, InvalidEntry, StorageUnavailable

logger = structlog.get_logger(__name__)

# Per-action rewards
ENTRY_SPIRIT_ENERGY = 10
ENTRY_REALM_AFFINITY = 5
BOND_SPIRIT_ENERGY = 25

_SPIRIT_RESERVED_KEYS = frozenset(
    {"id", "name", "type", "kind", "attributes", "bondedAt", "bonded_at", "bondStrength", "bond_strength"}
)


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _optional_text(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidEntry(f"entry {field_name} must be text")
    return _utf8(value.strip(), f"entry {field_name}", InvalidEntry)


def _utf8(value: str, what: str, error: type[Exception] = ValueError) -> str:
    """Return value unchanged if it can be written as UTF-8."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise error(f"{what} is not valid UTF-8 text: {exc.reason}") from None
    return value


class JourneyStore:
    """Owns the canonical JourneyState and its persistence.

    Usage:
        store = JourneyStore.open(JsonFileStorage(data_dir))
        entry = store.add_entry("Today I learned to be brave", emotion="strength")
    """

    def __init__(
        self,
        state: JourneyState,
        storage: StorageAdapter,
        *,
        analyzer: TextAnalyzer | None = None,
        rune_assigner: RuneAssigner | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[str], str] = _new_id,
    ) -> None:
        self._state = state
        self._storage = storage
        self._analyzer = analyzer or TextAnalyzer()
        self._runes = rune_assigner or RuneAssigner(self._analyzer)
        self._clock = clock
        self._id_factory = id_factory
        self._durable = True
        self._last_storage_error: str | None = None
        self._recovered_from_corruption = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @classmethod
    def open(
        cls,
        storage: StorageAdapter,
        *,
        analyzer: TextAnalyzer | None = None,
        rune_assigner: RuneAssigner | None = None,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[str], str] = _new_id,
    ) -> JourneyStore:
        """Restore the saved journey, or begin a new one.

        A document that cannot be parsed or validated is replaced by a
        fresh journey (recovered_from_corruption is set). If the storage
        cannot be read at all, a fresh journey is kept in memory and the
        store starts out not durable.
        """
        state: JourneyState | None = None
        recovered = False
        read_error: str | None = None

        try:
            raw = storage.load()
        except CorruptPersistedState as exc:
            logger.warning("journey_document_corrupt", key=storage.key, error=str(exc))
            raw, recovered = None, True
        except StorageUnavailable as exc:
            logger.warning("journey_storage_unreadable", key=storage.key, error=str(exc))
            raw, read_error = None, str(exc)

        if raw is not None:
            try:
                state = parse_document(raw)
            except CorruptPersistedState as exc:
                logger.warning("journey_document_corrupt", key=storage.key, error=str(exc))
                recovered = True

        created = state is None
        if state is None:
            state = JourneyState.new(journey_id=id_factory("journey"), created_at=clock())

        store = cls(
            state,
            storage,
            analyzer=analyzer,
            rune_assigner=rune_assigner,
            clock=clock,
            id_factory=id_factory,
        )
        store._recovered_from_corruption = recovered

        if created:
            logger.info(
                "journey_created",
                journey_id=state.journey_id,
                recovered=recovered,
            )
            if read_error is not None:
                store._durable = False
                store._last_storage_error = read_error
            else:
                store._persist()
        else:
            store._reconcile()
            logger.info(
                "journey_restored",
                journey_id=state.journey_id,
                total_entries=state.total_entries,
            )
        return store

    def _reconcile(self) -> None:
        """Re-derive cached counters of a loaded document from its entries."""
        state = self._state
        replayed = empty_themes()
        for entry in state.entries:
            for theme, score in entry.themes.items():
                replayed[theme] = replayed.get(theme, 0) + score

        if state.total_entries != len(state.entries) or state.themes != replayed:
            logger.warning(
                "journey_counters_repaired",
                journey_id=state.journey_id,
                stored_total=state.total_entries,
                entries=len(state.entries),
            )
            state.total_entries = len(state.entries)
            state.themes = replayed

        state.apply_growth(growth.snapshot(state.total_entries))

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> JourneyState:
        """The live document. Read-only for callers; mutate through the store."""
        return self._state

    @property
    def storage(self) -> StorageAdapter:
        return self._storage

    @property
    def analyzer(self) -> TextAnalyzer:
        return self._analyzer

    @property
    def durable(self) -> bool:
        """False while the latest state has not reached storage."""
        return self._durable

    @property
    def last_storage_error(self) -> str | None:
        return self._last_storage_error

    @property
    def recovered_from_corruption(self) -> bool:
        """True if the saved journey was unreadable and a new one was started."""
        return self._recovered_from_corruption

    def now(self) -> datetime:
        return self._clock()

    def document(self) -> dict[str, Any]:
        """A detached copy of the persisted document."""
        return self._state.to_dict()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_entry(
        self,
        content: str,
        title: str | None = None,
        emotion: str | None = None,
        rune: str | None = None,
    ) -> JournalEntry:
        """Inscribe a new journal entry.

        Args:
            content: Entry text; must contain something besides whitespace
            title: Optional title (default "Untitled Memory")
            emotion: Optional emotion tag (default "neutral")
            rune: Optional glyph; derived from themes/emotion when omitted

        Returns:
            The created, immutable JournalEntry

        Raises:
            InvalidEntry: If content is empty or whitespace-only, or a field
                is not text. Nothing is changed in that case.
        """
        if not isinstance(content, str) or not content.strip():
            logger.info("journey_entry_rejected", reason="empty_content")
            raise InvalidEntry("entry content must not be empty")

        text = _utf8(content.strip(), "entry content", InvalidEntry)
        entry_title = _optional_text(title, "title") or DEFAULT_TITLE
        entry_emotion = _optional_text(emotion, "emotion").lower() or NEUTRAL_EMOTION
        entry_rune = _optional_text(rune, "rune")

        state = self._state
        themes = self._analyzer.analyze(text)
        if not entry_rune:
            entry_rune = self._runes.assign(text, entry_emotion, themes)

        entry = JournalEntry(
            id=self._id_factory("entry"),
            timestamp=self._clock(),
            realm=state.active_realm,
            title=entry_title,
            content=text,
            emotion=entry_emotion,
            rune=entry_rune,
            themes=themes,
        )

        cumulative = dict(state.themes)
        for theme, score in themes.items():
            cumulative[theme] = cumulative.get(theme, 0) + score
        total = state.total_entries + 1
        snap = growth.snapshot(total)
        realm_key = state.active_realm.value
        affinities = dict(state.realm_affinities)
        affinities[realm_key] = affinities.get(realm_key, 0) + ENTRY_REALM_AFFINITY

        # Commit
        state.entries.append(entry)
        state.total_entries = total
        state.themes = cumulative
        state.apply_growth(snap)
        state.spirit_energy += ENTRY_SPIRIT_ENERGY
        state.realm_affinities = affinities
        state.last_entry_date = entry.timestamp

        logger.info(
            "journey_entry_added",
            journey_id=state.journey_id,
            entry_id=entry.id,
            realm=realm_key,
            rune=entry.rune,
            total_entries=total,
            tree_growth=snap.tree_growth,
        )
        self._persist()
        return entry

    def change_realm(self, realm: Realm | str) -> None:
        """Make a realm active, unlocking it on the first visit.

        Raises:
            ValueError: If the realm name is unknown
        """
        try:
            target = Realm(str(realm).strip().lower())
        except ValueError:
            raise ValueError(f"unknown realm: {realm!r}") from None

        state = self._state
        if target == state.active_realm and target in state.unlocked_realms:
            return

        newly_unlocked = target not in state.unlocked_realms
        if newly_unlocked:
            state.unlocked_realms = [*state.unlocked_realms, target]
        state.active_realm = target

        logger.info(
            "journey_realm_changed",
            journey_id=state.journey_id,
            realm=target.value,
            newly_unlocked=newly_unlocked,
        )
        self._persist()

    def bond_spirit(self, spirit: Mapping[str, Any]) -> bool:
        """Bond a spirit companion.

        Bonding is idempotent by spirit id: a second bond with the same id
        changes nothing.

        Args:
            spirit: Mapping with at least "id"; "name", "type" and
                "attributes" are recognised, other keys join the attributes

        Returns:
            True if the spirit was newly bonded

        Raises:
            ValueError: If the spirit has no id or its attributes cannot be
                stored as JSON
        """
        raw_id = spirit.get("id")
        spirit_id = str(raw_id).strip() if raw_id is not None else ""
        if not spirit_id:
            raise ValueError("spirit must have an id")

        state = self._state
        if state.is_bonded(spirit_id):
            logger.debug("journey_spirit_already_bonded", spirit_id=spirit_id)
            return False

        attributes = dict(spirit.get("attributes") or {})
        attributes.update(
            {key: value for key, value in spirit.items() if key not in _SPIRIT_RESERVED_KEYS}
        )
        try:
            encoded = encode_document(attributes)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"spirit attributes must be JSON-serializable: {exc}") from exc
        _utf8(encoded, "spirit attributes")

        bonded = BondedSpirit(
            id=_utf8(spirit_id, "spirit id"),
            name=_utf8(str(spirit.get("name") or ""), "spirit name"),
            kind=_utf8(str(spirit.get("type") or spirit.get("kind") or ""), "spirit type"),
            attributes=attributes,
            bonded_at=self._clock(),
        )
        state.bonded_spirits = [*state.bonded_spirits, bonded]
        state.spirit_energy += BOND_SPIRIT_ENERGY

        logger.info(
            "journey_spirit_bonded",
            journey_id=state.journey_id,
            spirit_id=spirit_id,
            spirit_energy=state.spirit_energy,
        )
        self._persist()
        return True

    def unlock_legend(self, legend_id: str) -> bool:
        """Unlock a legend; returns False if it was already unlocked."""
        legend = str(legend_id or "").strip()
        if not legend:
            raise ValueError("legend id must not be empty")
        _utf8(legend, "legend id")

        state = self._state
        if legend in state.unlocked_legends:
            return False

        state.unlocked_legends = [*state.unlocked_legends, legend]
        logger.info("journey_legend_unlocked", journey_id=state.journey_id, legend_id=legend)
        self._persist()
        return True

    def achieve_milestone(self, milestone: Mapping[str, Any] | str) -> bool:
        """Record a milestone; returns False if it was already achieved.

        Args:
            milestone: Milestone id, or a mapping with "id" (falls back to
                "name") and optional "name"/"description"
        """
        if isinstance(milestone, str):
            milestone = {"id": milestone}
        milestone_id = str(milestone.get("id") or milestone.get("name") or "").strip()
        if not milestone_id:
            raise ValueError("milestone must have an id")

        state = self._state
        if state.has_milestone(milestone_id):
            return False

        record = Milestone(
            id=_utf8(milestone_id, "milestone id"),
            name=_utf8(str(milestone.get("name") or milestone_id), "milestone name"),
            description=_utf8(str(milestone.get("description") or ""), "milestone description"),
            achieved_at=self._clock(),
        )
        state.achieved_milestones = [*state.achieved_milestones, record]
        logger.info(
            "journey_milestone_achieved",
            journey_id=state.journey_id,
            milestone_id=milestone_id,
        )
        self._persist()
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(self) -> bool:
        """Write the whole document; failures are reported, never raised."""
        try:
            self._storage.save(self._state.to_dict())
        except StorageUnavailable as exc:
            self._durable = False
            self._last_storage_error = str(exc)
            logger.warning(
                "journey_persist_failed",
                journey_id=self._state.journey_id,
                key=self._storage.key,
                error=str(exc),
            )
            return False

        if not self._durable:
            logger.info("journey_persist_recovered", journey_id=self._state.journey_id)
        self._durable = True
        self._last_storage_error = None
        return True
