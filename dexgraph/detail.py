"""Normalize raw GraphQL Pokemon detail rows into canonical records."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from . import api, config
from .localization import DEFAULT_LANGUAGE, resolve_with_fallback
from .models import (
    AbilityEntry,
    Ailment,
    DamageClass,
    HeldItemGroup,
    LearnMethod,
    MoveDetail,
    MoveMeta,
    PokemonDetail,
    PokemonForm,
    StatChange,
    StatEntry,
    VersionDetail,
)

DAMAGE_CLASSES = {"physical", "special", "status"}
LEARN_METHODS = {"level-up", "machine", "egg", "tutor"}

# Sub-path of the animated Black/White sprites under the image base.
ANIMATED_SPRITE_PATH = "versions/generation-v/black-white/animated"


def generate_fallback_sprites(pokemon_id: int, image_base: str = config.POKEMON_IMAGE) -> Dict[str, Any]:
    """Synthesize a sprite set from the numeric id.

    Args:
        pokemon_id: National dex id used in sprite file names.
        image_base: Base URL of the sprite repository.

    Returns:
        Sprite mapping shaped like the API's, with female variants set to None.
    """
    base = image_base.rstrip("/")
    animated = f"{base}/{ANIMATED_SPRITE_PATH}"
    return {
        "front_default": f"{base}/{pokemon_id}.png",
        "back_default": f"{base}/back/{pokemon_id}.png",
        "front_shiny": f"{base}/shiny/{pokemon_id}.png",
        "back_shiny": f"{base}/back/shiny/{pokemon_id}.png",
        "front_female": None,
        "front_shiny_female": None,
        "back_female": None,
        "back_shiny_female": None,
        "versions": {
            "generation-v": {
                "black-white": {
                    "animated": {
                        "front_default": f"{animated}/{pokemon_id}.gif",
                        "back_default": f"{animated}/back/{pokemon_id}.gif",
                        "front_shiny": f"{animated}/shiny/{pokemon_id}.gif",
                        "back_shiny": f"{animated}/back/shiny/{pokemon_id}.gif",
                        "front_female": None,
                        "front_shiny_female": None,
                        "back_female": None,
                        "back_shiny_female": None,
                    }
                }
            }
        },
    }


def classify_damage(move: Mapping[str, Any]) -> DamageClass:
    """Return the move's damage class.

    The power-based fallback is a heuristic for rows missing a class; it is not
    a type-based classification.
    """
    class_name = ((move.get("movedamageclass") or {}).get("name") or "").lower()
    if class_name in DAMAGE_CLASSES:
        return class_name  # type: ignore[return-value]
    if not move.get("power"):
        return "status"
    return "physical"


def classify_learn_method(entry: Mapping[str, Any]) -> LearnMethod:
    """Return how the move is learned, inferring one when the source omits it."""
    method = (entry.get("movelearnmethod") or {}).get("name")
    if method:
        return method if method in LEARN_METHODS else "other"  # type: ignore[return-value]
    # Fallback only: without a method name, a positive level means level-up.
    level = entry.get("level")
    if level and level > 0:
        return "level-up"
    return "machine"


def clean_description(text: Optional[str]) -> Optional[str]:
    """Replace form feeds/newlines with spaces, collapse whitespace, trim."""
    return api.collapse_whitespace(text) or None


def pick_flavor_text(entries: Optional[List[Mapping[str, Any]]], language_id: int) -> Optional[str]:
    """Pick a flavor text in the requested language, then English, then the first row."""
    if not entries:
        return None
    for wanted in (language_id, DEFAULT_LANGUAGE):
        for entry in entries:
            if entry.get("language_id") == wanted and entry.get("flavor_text"):
                return entry["flavor_text"]
    return entries[0].get("flavor_text")


def extract_meta(move: Mapping[str, Any]) -> Optional[MoveMeta]:
    """Build the meta block from the first meta row, if present."""
    rows = move.get("movemeta") or []
    if not rows:
        return None
    meta = rows[0]
    ailment = None
    ailment_name = (meta.get("movemetaailment") or {}).get("name")
    if ailment_name and ailment_name != "none":
        ailment = Ailment(
            name=ailment_name,
            chance=meta.get("ailment_chance") or move.get("move_effect_chance"),
        )
    return MoveMeta(
        crit_rate=meta.get("crit_rate") or 0,
        drain=meta.get("drain") or 0,
        flinch_chance=meta.get("flinch_chance") or 0,
        healing=meta.get("healing") or 0,
        min_hits=meta.get("min_hits"),
        max_hits=meta.get("max_hits"),
        ailment=ailment,
    )


def _move_detail(entry: Mapping[str, Any], language_id: int) -> MoveDetail:
    move = entry.get("move") or {}
    return MoveDetail(
        name=move.get("name", ""),
        localized_name=resolve_with_fallback(move.get("movenames"), language_id, move.get("name", "")),
        type=(move.get("type") or {}).get("name") or "normal",
        power=move.get("power"),
        accuracy=move.get("accuracy"),
        pp=move.get("pp"),
        priority=move.get("priority") or 0,
        damage_class=classify_damage(move),
        learn_method=classify_learn_method(entry),
        level=entry.get("level") or None,
        generation=(move.get("generation") or {}).get("id") or None,
        description=clean_description(pick_flavor_text(move.get("moveflavortexts"), language_id)),
        meta=extract_meta(move),
        effect_chance=move.get("move_effect_chance"),
        stat_changes=[
            StatChange(change=row.get("change", 0), stat=(row.get("stat") or {}).get("name", ""))
            for row in move.get("movemetastatchanges") or []
        ],
    )


def group_held_items(rows: Optional[List[Mapping[str, Any]]], language_id: int) -> List[HeldItemGroup]:
    """Group held-item rows by localized item name, in first-seen order."""
    groups: Dict[str, HeldItemGroup] = {}
    for row in rows or []:
        item = row.get("item") or {}
        raw_name = item.get("name", "")
        display_name = resolve_with_fallback(item.get("itemnames"), language_id, raw_name)
        if display_name not in groups:
            groups[display_name] = HeldItemGroup(name=display_name, item=raw_name)
        groups[display_name].version_details.append(
            VersionDetail(
                rarity=row.get("rarity") or 0,
                version=(row.get("version") or {}).get("name", ""),
            )
        )
    # dicts keep insertion order, so groups follow the raw list.
    return list(groups.values())


def normalize_detail(
    raw: Mapping[str, Any],
    language_id: int = DEFAULT_LANGUAGE,
    image_base: str = config.POKEMON_IMAGE,
) -> PokemonDetail:
    """Flatten one Pokemon's nested query result into a canonical record.

    Args:
        raw: A single ``pokemon`` row from ``getPokemonDetail``.
        language_id: Requested display language.
        image_base: Base URL used when sprites must be synthesized.

    Returns:
        The canonical detail record. Missing sections degrade to empty values.
    """
    pokemon_id = raw["id"]
    parsed = api.first_sprites(raw.get("pokemonsprites"))
    sprites = parsed if parsed and parsed.get("front_default") else generate_fallback_sprites(pokemon_id, image_base)

    type_rows = [slot.get("type") or {} for slot in raw.get("pokemontypes") or []]
    move_rows = raw.get("pokemonmoves") or []
    move_details = [_move_detail(entry, language_id) for entry in move_rows]

    stats = [
        StatEntry(
            name=(row.get("stat") or {}).get("name", ""),
            localized_name=resolve_with_fallback(
                (row.get("stat") or {}).get("statnames"),
                language_id,
                (row.get("stat") or {}).get("name", ""),
            ),
            base_stat=row.get("base_stat") or 0,
            effort=row.get("effort") or 0,
        )
        for row in raw.get("pokemonstats") or []
    ]

    abilities = []
    for row in raw.get("pokemonabilities") or []:
        ability = row.get("ability") or {}
        abilities.append(
            AbilityEntry(
                name=resolve_with_fallback(ability.get("abilitynames"), language_id, ability.get("name", "")),
                slug=ability.get("name", ""),
                is_hidden=bool(row.get("is_hidden")),
                slot=row.get("slot") or 0,
                description=clean_description(pick_flavor_text(ability.get("abilityflavortexts"), language_id)),
            )
        )

    forms = [
        PokemonForm(
            id=form["id"],
            name=resolve_with_fallback(form.get("pokemonformnames"), language_id, form.get("name", "")),
            slug=form.get("name", ""),
            is_default=bool(form.get("is_default")),
        )
        for form in raw.get("pokemonforms") or []
    ]

    species = raw.get("pokemonspecy") or {}
    return PokemonDetail(
        id=pokemon_id,
        name=raw.get("name", ""),
        height=raw.get("height") or 0,
        weight=raw.get("weight") or 0,
        base_experience=raw.get("base_experience"),
        types=[resolve_with_fallback(t.get("typenames"), language_id, t.get("name", "")) for t in type_rows],
        type_names=[t.get("name", "") for t in type_rows],
        moves=[detail.localized_name for detail in move_details],
        move_details=move_details,
        stats=stats,
        abilities=abilities,
        sprite=f"{image_base.rstrip('/')}/{ANIMATED_SPRITE_PATH}/{pokemon_id}.gif",
        sprites=sprites,
        held_items=group_held_items(raw.get("pokemonhelditemsByPokemonId"), language_id),
        # A lone default form is not special.
        special_forms=forms if len(forms) > 1 else [],
        species_id=species.get("id"),
        generation_id=(species.get("generation") or {}).get("id"),
        evolution_chain_id=species.get("evolution_chain_id"),
    )
