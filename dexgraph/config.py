"""Environment-driven settings for the dexgraph pipeline."""

from __future__ import annotations

import os

# GraphQL endpoint serving the PokeAPI dataset.
GRAPHQL_ENDPOINT = os.getenv(
    "DEXGRAPH_GRAPHQL_ENDPOINT", "https://beta.pokeapi.co/graphql/v1beta2"
)

# Base path used to synthesize sprite URLs when the query response omits them.
POKEMON_IMAGE = os.getenv(
    "DEXGRAPH_POKEMON_IMAGE",
    "https://raw.githubusercontent.com/PokeAPI/sprites/master/sprites/pokemon/",
)

# Default cache lifetime (30 minutes).
CACHE_TTL_SECONDS = float(os.getenv("DEXGRAPH_CACHE_TTL_SECONDS", "1800"))

# Transport timeout handed to httpx; the pipeline adds none of its own.
HTTP_TIMEOUT = float(os.getenv("DEXGRAPH_HTTP_TIMEOUT", "10"))

LOG_LEVEL = os.getenv("DEXGRAPH_LOG_LEVEL", "INFO")

# Number of same-generation siblings fetched before filtering and shuffling.
RELATED_POOL_SIZE = 50
