import copy
import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from dexgraph.cache import TTLCache, shared_cache
from dexgraph.service import PokemonService


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeQueryClient:
    """Query client stub that routes documents by GraphQL operation name."""

    def __init__(self, responses: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]]) -> None:
        self.responses = responses
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    async def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        operation = document.split("query", 1)[1].split("(", 1)[0].strip()
        self.calls.append((operation, dict(variables or {})))
        if operation not in self.responses:
            raise AssertionError(f"Unexpected query {operation} with {variables}")
        return self.responses[operation](variables or {})

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)


def _sprites(pokemon_id: int) -> str:
    # The API serves sprites as a JSON-encoded string.
    return json.dumps(
        {
            "front_default": f"https://img.test/{pokemon_id}.png",
            "front_shiny": f"https://img.test/shiny/{pokemon_id}.png",
        }
    )


PIKACHU_DETAIL: Dict[str, Any] = {
    "id": 25,
    "name": "pikachu",
    "height": 4,
    "weight": 60,
    "base_experience": 112,
    "pokemonsprites": [{"sprites": _sprites(25)}],
    "pokemontypes": [
        {
            "slot": 1,
            "type": {
                "name": "electric",
                "id": 13,
                "typenames": [
                    {"name": "Electric", "language_id": 9},
                    {"name": "Électrik", "language_id": 5},
                ],
            },
        }
    ],
    "pokemonmoves": [
        {
            "level": 1,
            "movelearnmethod": {"name": "level-up"},
            "move": {
                "name": "thunder-shock",
                "id": 84,
                "power": 40,
                "accuracy": 100,
                "pp": 30,
                "priority": 0,
                "move_effect_chance": 10,
                "type": {"name": "electric"},
                "movedamageclass": {"name": "special", "id": 3},
                "generation": {"name": "generation-i", "id": 1},
                "movenames": [
                    {"name": "Thunder Shock", "language_id": 9},
                    {"name": "Éclair", "language_id": 5},
                ],
                "moveflavortexts": [
                    {"flavor_text": "A jolt of electricity\fmay also\nparalyze  the target.", "language_id": 9},
                    {"flavor_text": "Envoie une décharge.", "language_id": 5},
                ],
                "movemeta": [
                    {
                        "crit_rate": 0,
                        "drain": 0,
                        "flinch_chance": 0,
                        "healing": 0,
                        "min_hits": None,
                        "max_hits": None,
                        "ailment_chance": None,
                        "movemetaailment": {"name": "paralysis"},
                    }
                ],
                "movemetastatchanges": [],
            },
        },
        {
            "level": 0,
            "move": {
                "name": "thunder-wave",
                "id": 86,
                "power": None,
                "accuracy": 90,
                "pp": 20,
                "priority": 0,
                "move_effect_chance": None,
                "type": {"name": "electric"},
                "movedamageclass": None,
                "generation": None,
                "movenames": [{"name": "Thunder Wave", "language_id": 9}],
                "moveflavortexts": [],
                "movemeta": [],
            },
        },
        {
            "level": 10,
            "move": {
                "name": "quick-attack",
                "id": 98,
                "power": 40,
                "accuracy": 100,
                "pp": 30,
                "priority": 1,
                "type": {"name": "normal"},
                "movedamageclass": None,
                "generation": {"name": "generation-i", "id": 1},
                "movenames": [{"name": "Quick Attack", "language_id": 9}],
                "moveflavortexts": [],
                "movemeta": [
                    {
                        "crit_rate": 0,
                        "drain": 0,
                        "flinch_chance": 0,
                        "healing": 0,
                        "min_hits": None,
                        "max_hits": None,
                        "movemetaailment": {"name": "none"},
                    }
                ],
                "movemetastatchanges": [{"change": -1, "stat": {"name": "defense"}}],
            },
        },
    ],
    "pokemonstats": [
        {
            "base_stat": 35,
            "effort": 0,
            "stat": {"name": "hp", "id": 1, "statnames": [{"name": "HP", "language_id": 9}, {"name": "PV", "language_id": 5}]},
        },
        {
            "base_stat": 90,
            "effort": 2,
            "stat": {"name": "speed", "id": 6, "statnames": [{"name": "Speed", "language_id": 9}]},
        },
    ],
    "pokemonabilities": [
        {
            "is_hidden": False,
            "slot": 1,
            "ability": {
                "name": "static",
                "id": 9,
                "abilitynames": [{"name": "Static", "language_id": 9}, {"name": "Statik", "language_id": 5}],
                "abilityflavortexts": [{"flavor_text": "Contact with the\nPokémon may cause paralysis.", "language_id": 9}],
            },
        },
        {
            "is_hidden": True,
            "slot": 3,
            "ability": {
                "name": "lightning-rod",
                "id": 31,
                "abilitynames": [{"name": "Lightning Rod", "language_id": 9}],
                "abilityflavortexts": [],
            },
        },
    ],
    "pokemonhelditemsByPokemonId": [
        {
            "rarity": 50,
            "item": {
                "name": "oran-berry",
                "id": 132,
                "cost": 20,
                "itemnames": [{"name": "Oran Berry", "language_id": 9}, {"name": "Baie Oran", "language_id": 5}],
            },
            "version": {"name": "red"},
        },
        {
            "rarity": 5,
            "item": {
                "name": "light-ball",
                "id": 213,
                "cost": 1000,
                "itemnames": [{"name": "Light Ball", "language_id": 9}],
            },
            "version": {"name": "red"},
        },
        {
            "rarity": 50,
            "item": {
                "name": "oran-berry",
                "id": 132,
                "cost": 20,
                "itemnames": [{"name": "Oran Berry", "language_id": 9}, {"name": "Baie Oran", "language_id": 5}],
            },
            "version": {"name": "blue"},
        },
    ],
    "pokemonforms": [
        {"id": 25, "name": "pikachu", "is_default": True, "pokemonformnames": []},
    ],
    "pokemonspecy": {
        "id": 25,
        "name": "pikachu",
        "evolution_chain_id": 10,
        "generation": {"id": 1, "name": "generation-i"},
    },
}

PIKACHU_SPECIES: Dict[str, Any] = {
    "id": 25,
    "name": "pikachu",
    "order": 35,
    "gender_rate": 4,
    "capture_rate": 190,
    "base_happiness": 50,
    "is_baby": False,
    "is_legendary": False,
    "is_mythical": False,
    "hatch_counter": 10,
    "has_gender_differences": True,
    "forms_switchable": False,
    "evolution_chain_id": 10,
    "growthrate": {"name": "medium", "id": 2},
    "pokemoncolor": {"name": "yellow", "id": 10},
    "pokemonshape": {"name": "quadruped", "id": 8},
    "pokemonhabitat": {"name": "forest", "id": 2},
    "generation": {"name": "generation-i", "id": 1, "generationnames": []},
    "pokemonegggroups": [
        {"egggroup": {"name": "ground", "id": 5, "egggroupnames": [{"name": "Field", "language_id": 9}]}},
        {"egggroup": {"name": "fairy", "id": 6, "egggroupnames": [{"name": "Fairy", "language_id": 9}]}},
    ],
    "pokemonspeciesnames": [
        {"name": "Pikachu", "genus": "Mouse Pokémon", "language_id": 9},
        {"name": "ピカチュウ", "genus": "ねずみポケモン", "language_id": 1},
    ],
    "pokemonspeciesflavortexts": [
        {"flavor_text": "It stores\felectricity in its cheeks.", "language_id": 9, "version": {"name": "red"}},
        {"flavor_text": "When several of\nthese POKéMON gather.", "language_id": 9, "version": {"name": "blue"}},
        {"flavor_text": "It raises its tail\nto check its surroundings.", "language_id": 9, "version": {"name": "yellow"}},
        {"flavor_text": "Il stocke de l'électricité.", "language_id": 5, "version": {"name": "x"}},
    ],
    "pokemons": [
        {"id": 25, "name": "pikachu", "is_default": True},
        {"id": 10080, "name": "pikachu-rock-star", "is_default": False},
    ],
}


def _chain_species(
    species_id: int,
    name: str,
    parent: Optional[int],
    evolutions: List[Dict[str, Any]],
    pokemon_id: Optional[int] = None,
) -> Dict[str, Any]:
    return {
        "id": species_id,
        "name": name,
        "order": species_id,
        "evolves_from_species_id": parent,
        "pokemonevolutions": evolutions,
        "pokemons": [
            {
                "id": pokemon_id or species_id,
                "name": name,
                "pokemonsprites": [{"sprites": _sprites(pokemon_id or species_id)}],
            }
        ],
    }


def evolution_row(**fields: Any) -> Dict[str, Any]:
    """Build a pokemonevolutions row with every condition unset."""
    row: Dict[str, Any] = {
        "min_level": None,
        "min_happiness": None,
        "min_beauty": None,
        "min_affection": None,
        "needs_overworld_rain": False,
        "turn_upside_down": False,
        "time_of_day": "",
        "relative_physical_stats": None,
        "gender_id": None,
        "held_item_id": None,
        "trade_species_id": None,
        "evolutiontrigger": None,
        "item": None,
        "location": None,
        "move": None,
        "type": None,
    }
    row.update(fields)
    return row


PIKACHU_CHAIN: Dict[str, Any] = {
    "id": 10,
    "pokemonspecies": [
        _chain_species(172, "pichu", None, []),
        _chain_species(
            25,
            "pikachu",
            172,
            [evolution_row(min_happiness=220, evolutiontrigger={"name": "level-up", "id": 1})],
        ),
        _chain_species(
            26,
            "raichu",
            25,
            [evolution_row(item={"name": "thunder-stone", "id": 83}, evolutiontrigger={"name": "use-item", "id": 3})],
        ),
    ],
}

ONIX_CHAIN: Dict[str, Any] = {
    "id": 46,
    "pokemonspecies": [
        _chain_species(95, "onix", None, []),
        _chain_species(
            208,
            "steelix",
            95,
            [evolution_row(held_item_id=233, evolutiontrigger={"name": "trade", "id": 2})],
        ),
    ],
}

GENERATION_ONE: List[Dict[str, Any]] = [
    {
        "id": species_id,
        "name": name,
        "pokemonspeciesnames": [{"name": name.title(), "language_id": 9}],
        "pokemons": [{"id": species_id, "pokemonsprites": [{"sprites": _sprites(species_id)}]}],
    }
    for species_id, name in [(1, "bulbasaur"), (4, "charmander"), (7, "squirtle"), (25, "pikachu"), (133, "eevee")]
]


@pytest.fixture
def pikachu_detail() -> Dict[str, Any]:
    return copy.deepcopy(PIKACHU_DETAIL)


@pytest.fixture
def pikachu_species() -> Dict[str, Any]:
    return copy.deepcopy(PIKACHU_SPECIES)


@pytest.fixture
def pikachu_chain() -> Dict[str, Any]:
    return copy.deepcopy(PIKACHU_CHAIN)


@pytest.fixture
def onix_chain() -> Dict[str, Any]:
    return copy.deepcopy(ONIX_CHAIN)


@pytest.fixture
def fake_client() -> FakeQueryClient:
    details = {"pikachu": PIKACHU_DETAIL}
    chains = {10: PIKACHU_CHAIN, 46: ONIX_CHAIN}

    def detail(variables: Dict[str, Any]) -> Dict[str, Any]:
        row = details.get(variables["name"])
        return {"data": {"pokemon": [copy.deepcopy(row)] if row else []}}

    def species(variables: Dict[str, Any]) -> Dict[str, Any]:
        rows = [copy.deepcopy(PIKACHU_SPECIES)] if variables["id"] == 25 else []
        return {"data": {"pokemonspecies": rows}}

    def chain(variables: Dict[str, Any]) -> Dict[str, Any]:
        row = chains.get(variables["chainId"])
        return {"data": {"evolutionchain": [copy.deepcopy(row)] if row else []}}

    def items(variables: Dict[str, Any]) -> Dict[str, Any]:
        known = {233: {"id": 233, "name": "metal-coat", "itemnames": [{"name": "Metal Coat", "language_id": 9}]}}
        return {"data": {"item": [known[i] for i in variables["ids"] if i in known]}}

    def related(variables: Dict[str, Any]) -> Dict[str, Any]:
        rows = GENERATION_ONE if variables["generationId"] == 1 else []
        return {"data": {"pokemonspecies": copy.deepcopy(rows)}}

    def names(variables: Dict[str, Any]) -> Dict[str, Any]:
        rows = {row["id"]: copy.deepcopy(row) for row in GENERATION_ONE}
        rows[25]["pokemonspeciesnames"].append({"name": "Pikachu (fr)", "language_id": 5})
        return {"data": {"pokemonspecies": [rows[i] for i in variables["ids"] if i in rows]}}

    def by_id(variables: Dict[str, Any]) -> Dict[str, Any]:
        rows = [{"id": 25, "name": "pikachu", "pokemonsprites": [{"sprites": _sprites(25)}]}] if variables["id"] == 25 else []
        return {"data": {"pokemon": rows}}

    return FakeQueryClient(
        {
            "getPokemonDetail": detail,
            "getPokemonSpecies": species,
            "getEvolutionChain": chain,
            "getItemsByIds": items,
            "getRelatedPokemonByGeneration": related,
            "getPokemonById": by_id,
            "getPokemonNamesBatch": names,
        }
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(fake_client: FakeQueryClient, clock: FakeClock) -> PokemonService:
    return PokemonService(client=fake_client, cache=TTLCache(clock=clock), ttl=60)


@pytest.fixture(autouse=True)
def reset_shared_cache() -> None:
    shared_cache.clear()
