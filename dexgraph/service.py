"""Cached fetch facade tying the query client to the normalizers."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Dict, Iterable, List, Optional

from . import api, config, queries
from .cache import DEFAULT_CACHE_DURATION, TTLCache
from .detail import normalize_detail
from .evolution import resolve_evolution_chain
from .localization import DEFAULT_LANGUAGE, resolve_with_fallback
from .models import (
    EvolutionEdge,
    PokemonDetail,
    PokemonProfile,
    PokemonSprite,
    RelatedPokemon,
    SpeciesRecord,
)
from .related import fetch_related_species
from .species import normalize_species

logger = logging.getLogger(__name__)


class PokemonService:
    """Fetch raw query results through the TTL cache and normalize them.

    Every remote call goes through ``cache.get_or_set`` keyed by a
    colon-namespaced string. Transport errors propagate as
    :class:`dexgraph.api.QueryError`; absent records come back as None or [].
    """

    def __init__(
        self,
        client: Optional[api.QueryClient] = None,
        cache: Optional[TTLCache] = None,
        ttl: float = DEFAULT_CACHE_DURATION,
        image_base: str = config.POKEMON_IMAGE,
    ) -> None:
        self.client = client or api.QueryClient()
        self.cache = cache if cache is not None else TTLCache()
        self.ttl = ttl
        self.image_base = image_base

    async def _query(self, document: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self.client.execute(document, variables)
        # The client leaves GraphQL-level errors to us; keep whatever data arrived.
        if payload.get("errors"):
            logger.warning("GraphQL errors for %s: %s", variables, payload["errors"])
        return payload.get("data") or {}

    # --- Raw cached fetches ---

    async def fetch_detail(self, name: str, language_id: int = DEFAULT_LANGUAGE) -> Optional[Dict[str, Any]]:
        """Fetch the raw detail row for a Pokemon name."""
        if not name:
            return None

        async def compute() -> Optional[Dict[str, Any]]:
            data = await self._query(queries.POKEMON_DETAIL_QUERY, {"name": name.lower()})
            rows = data.get("pokemon") or []
            return rows[0] if rows else None

        return await self.cache.get_or_set(f"graphql:pokemon:detail:{name}:{language_id}", compute, self.ttl)

    async def fetch_species(self, species_id: int, language_id: int = DEFAULT_LANGUAGE) -> Optional[Dict[str, Any]]:
        """Fetch the raw species row."""
        if not species_id:
            return None

        async def compute() -> Optional[Dict[str, Any]]:
            data = await self._query(queries.POKEMON_SPECIES_QUERY, {"id": species_id})
            rows = data.get("pokemonspecies") or []
            return rows[0] if rows else None

        return await self.cache.get_or_set(f"graphql:pokemon:species:{species_id}:{language_id}", compute, self.ttl)

    async def fetch_evolution_chain(self, chain_id: int) -> Optional[Dict[str, Any]]:
        """Fetch the raw evolution family for a chain id."""
        if not chain_id:
            return None

        async def compute() -> Optional[Dict[str, Any]]:
            data = await self._query(queries.EVOLUTION_CHAIN_QUERY, {"chainId": chain_id})
            rows = data.get("evolutionchain") or []
            return rows[0] if rows else None

        return await self.cache.get_or_set(f"graphql:pokemon:evolution:{chain_id}", compute, self.ttl)

    async def fetch_item_names(
        self, ids: Iterable[int], language_id: int = DEFAULT_LANGUAGE
    ) -> Dict[int, str]:
        """Resolve item ids to display names in one batched query."""
        unique_ids = sorted(set(ids))
        if not unique_ids:
            return {}

        async def compute() -> Dict[int, str]:
            data = await self._query(queries.ITEMS_BY_IDS_QUERY, {"ids": unique_ids})
            return {
                item["id"]: resolve_with_fallback(item.get("itemnames"), language_id, item.get("name", ""))
                for item in data.get("item") or []
            }

        key = f"graphql:items:{language_id}:{','.join(str(i) for i in unique_ids)}"
        return await self.cache.get_or_set(key, compute, self.ttl)

    async def fetch_related_pool(self, generation_id: int) -> List[Dict[str, Any]]:
        """Fetch the sibling pool for a generation (not filtered by name)."""

        async def compute() -> List[Dict[str, Any]]:
            data = await self._query(
                queries.RELATED_BY_GENERATION_QUERY,
                {"generationId": generation_id, "limit": config.RELATED_POOL_SIZE},
            )
            return data.get("pokemonspecies") or []

        return await self.cache.get_or_set(f"graphql:pokemon:related:gen:{generation_id}", compute, self.ttl)

    async def get_pokemon_by_id(self, pokemon_id: int) -> Optional[PokemonSprite]:
        """Look up a Pokemon's name and sprites by id."""
        if not pokemon_id:
            return None

        async def compute() -> Optional[PokemonSprite]:
            data = await self._query(queries.POKEMON_BY_ID_QUERY, {"id": pokemon_id})
            rows = data.get("pokemon") or []
            if not rows:
                return None
            row = rows[0]
            return PokemonSprite(
                id=row["id"],
                name=row.get("name", ""),
                sprites=api.first_sprites(row.get("pokemonsprites")),
            )

        return await self.cache.get_or_set(f"graphql:pokemon:byId:{pokemon_id}", compute, self.ttl)

    async def get_pokemon_names(
        self, ids: Iterable[int], language_id: int = DEFAULT_LANGUAGE
    ) -> Dict[int, str]:
        """Resolve species ids to localized display names.

        Each name is cached under its own key, so only ids missing from the
        cache go into the single batched query.

        Args:
            ids: Species ids; duplicates and falsy ids are ignored.
            language_id: Requested language (fallback: English, then slug).

        Returns:
            Mapping of id to display name for every species the endpoint knows.
        """
        names: Dict[int, str] = {}
        missing: List[int] = []
        for species_id in sorted({i for i in ids if i}):
            cached = self.cache.get(f"graphql:pokemon:name:{species_id}:{language_id}")
            if cached is not None:
                names[species_id] = cached
            else:
                missing.append(species_id)
        if not missing:
            return names

        logger.debug("Fetching %d species names for language %s", len(missing), language_id)
        data = await self._query(queries.POKEMON_NAMES_BATCH_QUERY, {"ids": missing})
        for row in data.get("pokemonspecies") or []:
            name = resolve_with_fallback(row.get("pokemonspeciesnames"), language_id, row.get("name", ""))
            self.cache.set(f"graphql:pokemon:name:{row['id']}:{language_id}", name, self.ttl)
            names[row["id"]] = name
        return names

    # --- Normalized records ---

    async def get_pokemon_detail(self, name: str, language_id: int = DEFAULT_LANGUAGE) -> Optional[PokemonDetail]:
        """Return the canonical detail record for a Pokemon.

        Args:
            name: Pokemon slug; matched case-insensitively by the endpoint.
            language_id: Display language for names and descriptions.

        Returns:
            The normalized record, or None when no Pokemon matches.
        """
        raw = await self.fetch_detail(name, language_id)
        if raw is None:
            return None
        return normalize_detail(raw, language_id, image_base=self.image_base)

    async def get_species(
        self,
        species_id: int,
        language_id: int = DEFAULT_LANGUAGE,
        rng: random.Random | Any = random,
    ) -> Optional[SpeciesRecord]:
        """Return the canonical species record.

        Args:
            species_id: Species id.
            language_id: Display language.
            rng: Random source used to pick the flavor text.

        Returns:
            The normalized record, or None for unknown ids.
        """
        # Normalization is not cached so the flavor text is re-rolled per call.
        raw = await self.fetch_species(species_id, language_id)
        if raw is None:
            return None
        return normalize_species(raw, language_id, rng=rng)

    async def get_evolution_chain(self, chain_id: int, language_id: int = DEFAULT_LANGUAGE) -> List[EvolutionEdge]:
        """Return the evolution edges of a chain with held-item names resolved.

        Args:
            chain_id: Evolution chain id.
            language_id: Display language for held-item names.

        Returns:
            Edges in species order; [] for unknown chains.
        """
        chain = await self.fetch_evolution_chain(chain_id)

        async def item_names(ids: List[int]) -> Dict[int, str]:
            return await self.fetch_item_names(ids, language_id)

        return await resolve_evolution_chain(chain, item_names)

    async def get_related_pokemon(
        self,
        generation_id: int,
        exclude_name: str,
        limit: int = 6,
        language_id: int = DEFAULT_LANGUAGE,
        rng: random.Random | Any = random,
    ) -> List[RelatedPokemon]:
        """Return random same-generation siblings, excluding ``exclude_name``.

        Args:
            generation_id: Generation to sample from.
            exclude_name: Species slug to leave out.
            limit: Maximum number of results.
            language_id: Display language.
            rng: Random source used for the shuffle.

        Returns:
            Up to ``limit`` sibling entries.
        """
        return await fetch_related_species(self, generation_id, exclude_name, limit, language_id, rng)

    async def get_profile(
        self,
        name: str,
        language_id: int = DEFAULT_LANGUAGE,
        related_limit: int = 6,
        rng: random.Random | Any = random,
    ) -> Optional[PokemonProfile]:
        """Run the detail -> species -> evolution waterfall for one Pokemon.

        Related species only need the detail's generation id, so they are
        fetched alongside the species/evolution stages.
        """
        detail = await self.get_pokemon_detail(name, language_id)
        if detail is None:
            return None

        async def species_and_evolution():
            species = await self.get_species(detail.species_id, language_id, rng=rng) if detail.species_id else None
            chain_id = (species.evolution_chain_id if species else None) or detail.evolution_chain_id
            evolution = await self.get_evolution_chain(chain_id, language_id) if chain_id else []
            return species, evolution

        (species, evolution), related = await asyncio.gather(
            species_and_evolution(),
            self.get_related_pokemon(detail.generation_id, detail.name, related_limit, language_id, rng),
        )
        return PokemonProfile(detail=detail, species=species, evolution=evolution, related=related)
