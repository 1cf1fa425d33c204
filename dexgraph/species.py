"""Species normalization."""

from __future__ import annotations

import random
from typing import Any, Mapping

from . import api
from .localization import DEFAULT_LANGUAGE, resolve_with_fallback
from .models import SpeciesRecord, Variety


def choose_flavor_text(raw: Mapping[str, Any], language_id: int, rng: random.Random | Any = random) -> str:
    """Pick one flavor text in the requested language uniformly at random.

    Args:
        raw: Species row carrying ``pokemonspeciesflavortexts``.
        language_id: Requested language id.
        rng: Random source exposing ``choice``; pass a seeded Random to pin it.

    Returns:
        Cleaned flavor text, or "" when the language has no entries.
    """
    candidates = [
        entry
        for entry in raw.get("pokemonspeciesflavortexts") or []
        if entry.get("language_id") == language_id
    ]
    if not candidates:
        return ""
    return api.format_flavor_text(rng.choice(candidates).get("flavor_text"))


def normalize_species(
    raw: Mapping[str, Any],
    language_id: int = DEFAULT_LANGUAGE,
    rng: random.Random | Any = random,
) -> SpeciesRecord:
    """Flatten a ``pokemonspecies`` row into a canonical species record.

    The flavor text is re-rolled on every call, so repeated calls may differ.
    """
    name = raw.get("name", "")
    # Species names carry the genus, so look the row up directly rather than
    # through resolve_with_fallback.
    names = raw.get("pokemonspeciesnames") or []
    name_row = next((n for n in names if n.get("language_id") == language_id), None)
    generation = raw.get("generation") or {}

    return SpeciesRecord(
        id=raw["id"],
        name=name,
        localized_name=(name_row or {}).get("name") or resolve_with_fallback(names, language_id, name),
        localized_genus=(name_row or {}).get("genus") or "",
        capture_rate=raw.get("capture_rate") or 0,
        base_happiness=raw.get("base_happiness"),
        # -1 marks genderless species in PokeAPI.
        gender_rate=raw["gender_rate"] if raw.get("gender_rate") is not None else -1,
        hatch_counter=raw.get("hatch_counter"),
        is_baby=bool(raw.get("is_baby")),
        is_legendary=bool(raw.get("is_legendary")),
        is_mythical=bool(raw.get("is_mythical")),
        egg_groups=[
            resolve_with_fallback(
                (group.get("egggroup") or {}).get("egggroupnames"),
                language_id,
                (group.get("egggroup") or {}).get("name", ""),
            )
            for group in raw.get("pokemonegggroups") or []
        ],
        habitat=(raw.get("pokemonhabitat") or {}).get("name") or "",
        growth_rate=(raw.get("growthrate") or {}).get("name") or "",
        color=(raw.get("pokemoncolor") or {}).get("name") or "",
        shape=(raw.get("pokemonshape") or {}).get("name") or "",
        generation=generation.get("name") or "",
        generation_id=generation.get("id"),
        evolution_chain_id=raw.get("evolution_chain_id"),
        flavor_text=choose_flavor_text(raw, language_id, rng),
        varieties=[
            Variety(id=p["id"], name=p.get("name", ""), is_default=bool(p.get("is_default")))
            for p in raw.get("pokemons") or []
        ],
    )
