"""Pydantic models for canonical dexgraph records."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer

DamageClass = Literal["physical", "special", "status"]
LearnMethod = Literal["level-up", "machine", "egg", "tutor", "other"]


# --- Detail record models ---


class Ailment(BaseModel):
    """Status ailment a move may inflict."""

    name: str
    chance: Optional[int] = None


class MoveMeta(BaseModel):
    """Secondary move mechanics taken from the first meta row."""

    crit_rate: int = 0
    drain: int = 0
    flinch_chance: int = 0
    healing: int = 0
    min_hits: Optional[int] = None
    max_hits: Optional[int] = None
    ailment: Optional[Ailment] = None


class StatChange(BaseModel):
    """Stage change a move applies to one stat."""

    change: int
    stat: str


class MoveDetail(BaseModel):
    """Learnable move with display metadata."""

    name: str
    localized_name: str
    type: str
    power: Optional[int] = None
    accuracy: Optional[int] = None
    pp: Optional[int] = None
    priority: int = 0
    damage_class: DamageClass
    learn_method: LearnMethod
    level: Optional[int] = None
    generation: Optional[int] = None
    description: Optional[str] = None
    meta: Optional[MoveMeta] = None
    effect_chance: Optional[int] = None
    stat_changes: List[StatChange] = Field(default_factory=list)


class StatEntry(BaseModel):
    """Base stat value and EV yield."""

    name: str
    localized_name: str
    base_stat: int
    effort: int = 0


class AbilityEntry(BaseModel):
    """Ability slot with its localized name and description."""

    name: str = Field(description="Localized ability name")
    slug: str
    is_hidden: bool
    slot: int
    description: Optional[str] = None


class VersionDetail(BaseModel):
    """Held-item rarity in one game version."""

    rarity: int
    version: str


class HeldItemGroup(BaseModel):
    """Held item grouped by localized name across game versions."""

    name: str = Field(description="Localized item name (group key)")
    item: str = Field(description="Raw item identifier")
    version_details: List[VersionDetail] = Field(default_factory=list)


class PokemonForm(BaseModel):
    """Alternate form such as a regional or mega variant."""

    id: int
    name: str
    slug: str
    is_default: bool


class PokemonDetail(BaseModel):
    """Canonical detail record for one Pokemon."""

    id: int
    name: str
    height: int = 0
    weight: int = 0
    base_experience: Optional[int] = None
    types: List[str] = Field(description="Localized type names")
    type_names: List[str] = Field(description="Raw type identifiers")
    moves: List[str] = Field(description="Localized move names")
    move_details: List[MoveDetail]
    stats: List[StatEntry]
    abilities: List[AbilityEntry]
    sprite: str = Field(description="Animated front sprite URL")
    sprites: Dict[str, Any]
    held_items: List[HeldItemGroup]
    special_forms: List[PokemonForm] = Field(
        description="Alternate forms; empty when only the default form exists"
    )
    species_id: Optional[int] = None
    generation_id: Optional[int] = None
    evolution_chain_id: Optional[int] = None


# --- Species record models ---


class Variety(BaseModel):
    """Pokemon belonging to a species."""

    id: int
    name: str
    is_default: bool


class SpeciesRecord(BaseModel):
    """Canonical species record."""

    id: int
    name: str
    localized_name: str
    localized_genus: str
    capture_rate: int = 0
    base_happiness: Optional[int] = None
    gender_rate: int = -1
    hatch_counter: Optional[int] = None
    is_baby: bool = False
    is_legendary: bool = False
    is_mythical: bool = False
    egg_groups: List[str] = Field(description="Localized egg group names")
    habitat: str = ""
    growth_rate: str = ""
    color: str = ""
    shape: str = ""
    generation: str = ""
    generation_id: Optional[int] = None
    evolution_chain_id: Optional[int] = None
    flavor_text: str = Field(description="One randomly chosen entry in the requested language")
    varieties: List[Variety] = Field(default_factory=list)


# --- Evolution models ---


class EvolutionEndpoint(BaseModel):
    """One side of an evolution edge."""

    id: int
    name: str
    sprite: str = ""


class EvolutionTrigger(BaseModel):
    """Conditions that cause an evolution, plus a readable summary."""

    text: str
    type: Optional[str] = None
    min_level: Optional[int] = None
    item: Optional[str] = None
    held_item: Optional[str] = None
    trade_species_id: Optional[int] = None
    min_happiness: Optional[int] = None
    min_beauty: Optional[int] = None
    min_affection: Optional[int] = None
    time_of_day: Optional[str] = None
    location: Optional[str] = None
    known_move: Optional[str] = None
    known_move_type: Optional[str] = None
    gender: Optional[int] = None
    needs_overworld_rain: Optional[bool] = None
    turn_upside_down: Optional[bool] = None
    relative_physical_stats: Optional[int] = None

    @model_serializer(mode="wrap")
    def _omit_unset(self, handler):
        # Conditions that do not apply are left out rather than sent as null.
        return {key: value for key, value in handler(self).items() if value is not None}


class EvolutionEdge(BaseModel):
    """One directed evolution transition; dumps as ``from``/``to`` with by_alias."""

    model_config = ConfigDict(populate_by_name=True)

    from_: EvolutionEndpoint = Field(alias="from")
    to: EvolutionEndpoint
    trigger: Optional[EvolutionTrigger] = None

    @model_serializer(mode="wrap")
    def _omit_missing_trigger(self, handler):
        data = handler(self)
        if data.get("trigger") is None:
            data.pop("trigger", None)
        return data


# --- Related species and aggregate outputs ---


class RelatedPokemon(BaseModel):
    """Sibling species from the same generation."""

    id: int
    slug: str
    name: str = Field(description="Localized species name")
    sprite: Optional[str] = None


class PokemonSprite(BaseModel):
    """Pokemon name and sprites looked up by id."""

    id: int
    name: str
    sprites: Optional[Dict[str, Any]] = None


class PokemonProfile(BaseModel):
    """Everything the detail view needs for one Pokemon."""

    detail: PokemonDetail
    species: Optional[SpeciesRecord] = None
    evolution: List[EvolutionEdge] = Field(default_factory=list)
    related: List[RelatedPokemon] = Field(default_factory=list)
