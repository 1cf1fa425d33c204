"""Evolution family resolution into a flat edge list."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from . import api
from .models import EvolutionEdge, EvolutionEndpoint, EvolutionTrigger

logger = logging.getLogger(__name__)

ItemNameFetcher = Callable[[List[int]], Awaitable[Dict[int, str]]]


def _spaced(slug: str) -> str:
    return slug.replace("-", " ")


def collect_held_item_ids(species_list: List[Mapping[str, Any]]) -> List[int]:
    """Return the distinct held-item ids referenced by any evolution row, sorted."""
    ids = {
        row["held_item_id"]
        for species in species_list
        for row in species.get("pokemonevolutions") or []
        if row.get("held_item_id")
    }
    return sorted(ids)


def build_trigger(row: Mapping[str, Any], held_item_names: Mapping[int, str]) -> Optional[EvolutionTrigger]:
    """Describe one evolution-detail row.

    Fields are checked in a fixed order and each present one contributes a
    phrase; the phrases are joined with ", ".

    Args:
        row: One ``pokemonevolutions`` entry.
        held_item_names: Resolved held-item names keyed by item id.

    Returns:
        The trigger, or None when no condition produced a phrase.
    """
    trigger = EvolutionTrigger(text="")
    parts: List[str] = []

    trigger_name = (row.get("evolutiontrigger") or {}).get("name")
    if trigger_name:
        # The trigger type is recorded but has no phrase of its own.
        trigger.type = trigger_name

    if row.get("min_level"):
        trigger.min_level = row["min_level"]
        parts.append(f"Level {row['min_level']}")

    item = (row.get("item") or {}).get("name")
    if item:
        trigger.item = item
        parts.append(f"Use {_spaced(item)}")

    held_item_id = row.get("held_item_id")
    if held_item_id:
        held_name = held_item_names.get(held_item_id)
        if held_name:
            trigger.held_item = held_name
            parts.append(f"Trade Holding {_spaced(held_name)}")
        else:
            parts.append("Trade holding item")

    trade_species_id = row.get("trade_species_id")
    if trigger_name == "trade" and not held_item_id and not trade_species_id:
        parts.append("Trade")

    if trade_species_id:
        trigger.trade_species_id = trade_species_id
        parts.append("Trade for specific Pokémon")

    if row.get("min_happiness"):
        trigger.min_happiness = row["min_happiness"]
        parts.append(f"Happiness {row['min_happiness']}+")

    if row.get("min_beauty"):
        trigger.min_beauty = row["min_beauty"]
        parts.append(f"Beauty {row['min_beauty']}+")

    if row.get("min_affection"):
        trigger.min_affection = row["min_affection"]
        parts.append(f"Affection {row['min_affection']}+")

    if row.get("time_of_day"):
        trigger.time_of_day = row["time_of_day"]
        parts.append(row["time_of_day"])

    location = (row.get("location") or {}).get("name")
    if location:
        trigger.location = location
        parts.append(f"at {_spaced(location)}")

    known_move = (row.get("move") or {}).get("name")
    if known_move:
        trigger.known_move = known_move
        parts.append(f"knowing {_spaced(known_move)}")

    known_move_type = (row.get("type") or {}).get("name")
    if known_move_type:
        trigger.known_move_type = known_move_type
        parts.append(f"knowing {known_move_type}-type move")

    gender_id = row.get("gender_id")
    if gender_id is not None:
        trigger.gender = gender_id
        parts.append("Female" if gender_id == 1 else "Male")

    if row.get("needs_overworld_rain"):
        trigger.needs_overworld_rain = True
        parts.append("in rain")

    if row.get("turn_upside_down"):
        trigger.turn_upside_down = True
        parts.append("upside down")

    relative = row.get("relative_physical_stats")
    if relative is not None:
        trigger.relative_physical_stats = relative
        if relative == 1:
            parts.append("Atk > Def")
        elif relative == -1:
            parts.append("Def > Atk")
        else:
            parts.append("Atk = Def")

    if not parts:
        return None
    trigger.text = ", ".join(parts)
    return trigger


def _endpoint(species: Mapping[str, Any]) -> EvolutionEndpoint:
    # Prefer the default Pokemon's id (sprite ids) over the species id.
    pokemon = (species.get("pokemons") or [{}])[0] or {}
    sprites = api.first_sprites(pokemon.get("pokemonsprites"))
    return EvolutionEndpoint(
        id=pokemon.get("id") or species["id"],
        name=species.get("name", ""),
        sprite=(sprites or {}).get("front_default") or "",
    )


def build_edges(
    species_list: List[Mapping[str, Any]],
    held_item_names: Mapping[int, str],
) -> List[EvolutionEdge]:
    """Walk the parent-pointer list and emit one edge per evolution-detail row.

    Species whose parent is absent from the list are skipped; a species with
    no detail rows yields a single edge without a trigger.
    """
    # Index by id so each parent lookup is a dict hit.
    by_id: Dict[int, Mapping[str, Any]] = {species["id"]: species for species in species_list}
    edges: List[EvolutionEdge] = []

    for species in species_list:
        parent_id = species.get("evolves_from_species_id")
        if not parent_id:
            continue
        parent = by_id.get(parent_id)
        if parent is None:
            logger.debug("Skipping %s: parent species %s not in chain", species.get("name"), parent_id)
            continue

        source = _endpoint(parent)
        target = _endpoint(species)
        rows = species.get("pokemonevolutions") or []
        if not rows:
            edges.append(EvolutionEdge(from_=source, to=target))
            continue
        for row in rows:
            edges.append(
                EvolutionEdge(from_=source, to=target, trigger=build_trigger(row, held_item_names))
            )
    return edges


async def resolve_evolution_chain(
    chain: Optional[Mapping[str, Any]],
    fetch_item_names: ItemNameFetcher,
) -> List[EvolutionEdge]:
    """Resolve a fetched evolution family into a flat, ordered edge list.

    Args:
        chain: ``evolutionchain`` row with its ``pokemonspecies`` list.
        fetch_item_names: Coroutine resolving item ids to display names; it is
            awaited at most once per chain.

    Returns:
        Evolution edges in species order.
    """
    if not chain:
        return []
    species_list = chain.get("pokemonspecies") or []

    # One batched lookup shared by every edge that references a held item.
    held_item_ids = collect_held_item_ids(species_list)
    held_item_names: Dict[int, str] = {}
    if held_item_ids:
        held_item_names = await fetch_item_names(held_item_ids)

    return build_edges(species_list, held_item_names)
