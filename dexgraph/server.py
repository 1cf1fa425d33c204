"""Expose FastMCP tools for the dexgraph aggregation pipeline."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .cache import shared_cache
from .localization import coerce_language
from .logging_utils import setup_logging
from .models import (
    EvolutionEdge,
    PokemonDetail,
    PokemonProfile,
    RelatedPokemon,
    SpeciesRecord,
)
from .service import PokemonService

# Each decorated coroutine becomes a structured tool discoverable by MCP hosts.
# All tools share one service and the process-wide cache.

mcp = FastMCP("Dexgraph Server")
service = PokemonService(cache=shared_cache)


@mcp.tool()
async def get_pokemon_detail(name: str, language_id: int = 9) -> PokemonDetail:
    """Fetch the canonical detail record for a Pokemon.

    Args:
        name: Pokemon slug (e.g., "pikachu").
        language_id: PokeAPI language id for display names (9 = English).

    Returns:
        Types, moves, stats, abilities, sprites, held items, and forms.

    Raises:
        ValueError: If no Pokemon matches the name.
    """
    detail = await service.get_pokemon_detail(name, coerce_language(language_id))
    if detail is None:
        raise ValueError(f"Could not find Pokemon '{name}'")
    return detail


@mcp.tool()
async def get_species(species_id: int, language_id: int = 9) -> SpeciesRecord:
    """Fetch the canonical species record.

    Args:
        species_id: Species id (national dex number).
        language_id: PokeAPI language id.

    Returns:
        Species flags, egg groups, localized name/genus, and a flavor text.

    Raises:
        ValueError: If the species does not exist.
    """
    species = await service.get_species(species_id, coerce_language(language_id))
    if species is None:
        raise ValueError(f"Could not find species {species_id}")
    return species


@mcp.tool()
async def get_evolution_chain(chain_id: int, language_id: int = 9) -> list[EvolutionEdge]:
    """List evolution edges for an evolution chain.

    Args:
        chain_id: Evolution chain id.
        language_id: PokeAPI language id for held-item names.

    Returns:
        One edge per evolution method, with readable trigger text.
    """
    return await service.get_evolution_chain(chain_id, coerce_language(language_id))


@mcp.tool()
async def get_related_pokemon(
    generation_id: int,
    exclude_name: str,
    limit: int = 6,
    language_id: int = 9,
) -> list[RelatedPokemon]:
    """Pick random Pokemon from the same generation.

    Args:
        generation_id: Generation to sample from.
        exclude_name: Species slug to leave out.
        limit: Maximum number of results.
        language_id: PokeAPI language id.

    Returns:
        Sibling species with localized names and sprites.
    """
    return await service.get_related_pokemon(
        generation_id, exclude_name, limit=limit, language_id=coerce_language(language_id)
    )


@mcp.tool()
async def get_pokemon_profile(name: str, language_id: int = 9) -> PokemonProfile:
    """Fetch detail, species, evolution, and related species in one call.

    Args:
        name: Pokemon slug.
        language_id: PokeAPI language id.

    Returns:
        The aggregated profile.

    Raises:
        ValueError: If no Pokemon matches the name.
    """
    profile = await service.get_profile(name, coerce_language(language_id))
    if profile is None:
        raise ValueError(f"Could not find Pokemon '{name}'")
    return profile


@mcp.tool()
async def get_pokemon_names(species_ids: list[int], language_id: int = 9) -> dict[int, str]:
    """Localize species names in one batched lookup.

    Args:
        species_ids: Species ids to name.
        language_id: PokeAPI language id (falls back to English, then the slug).

    Returns:
        Mapping of species id to display name; unknown ids are omitted.
    """
    return await service.get_pokemon_names(species_ids, coerce_language(language_id))


@mcp.tool()
def clear_cache(pattern: str | None = None) -> int:
    """Drop cached query results.

    Args:
        pattern: Optional substring; only keys containing it are removed.

    Returns:
        Number of entries left in the cache.
    """
    shared_cache.clear(pattern)
    return len(shared_cache)


def main() -> None:
    """Run the MCP server over stdio."""
    setup_logging()
    mcp.run()


if __name__ == "__main__":
    main()
