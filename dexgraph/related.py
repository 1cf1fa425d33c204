"""Same-generation sibling lookup."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Any, List, Mapping

from . import api
from .localization import DEFAULT_LANGUAGE, resolve_with_fallback
from .models import RelatedPokemon

if TYPE_CHECKING:
    from .service import PokemonService


def normalize_related(rows: List[Mapping[str, Any]], language_id: int = DEFAULT_LANGUAGE) -> List[RelatedPokemon]:
    """Convert sibling species rows into display entries."""
    related: List[RelatedPokemon] = []
    for row in rows:
        pokemon = (row.get("pokemons") or [{}])[0] or {}
        sprites = api.first_sprites(pokemon.get("pokemonsprites"))
        related.append(
            RelatedPokemon(
                id=pokemon.get("id") or row["id"],
                slug=row.get("name", ""),
                name=resolve_with_fallback(row.get("pokemonspeciesnames"), language_id, row.get("name", "")),
                sprite=(sprites or {}).get("front_default") or None,
            )
        )
    return related


async def fetch_related_species(
    service: "PokemonService",
    generation_id: int | None,
    exclude_name: str,
    limit: int = 6,
    language_id: int = DEFAULT_LANGUAGE,
    rng: random.Random | Any = random,
) -> List[RelatedPokemon]:
    """Return up to ``limit`` random siblings from the same generation.

    Args:
        service: Service providing the cached generation pool.
        generation_id: Generation to draw from; falsy ids return [].
        exclude_name: Species slug to leave out (case-insensitive).
        limit: Maximum number of entries returned.
        language_id: Display language for names.
        rng: Random source exposing ``shuffle``.

    Returns:
        Normalized sibling entries.
    """
    if not generation_id:
        return []
    pool = await service.fetch_related_pool(generation_id)
    # The cached pool is shared per generation; exclusion happens per call.
    excluded = exclude_name.lower()
    siblings = [row for row in pool if (row.get("name") or "").lower() != excluded]
    rng.shuffle(siblings)
    return normalize_related(siblings[: max(limit, 0)], language_id)
