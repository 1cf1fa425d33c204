"""GraphQL documents issued against the PokeAPI GraphQL endpoint."""

from __future__ import annotations

POKEMON_DETAIL_QUERY = """
  query getPokemonDetail($name: String!) {
    pokemon(where: {name: {_eq: $name}}) {
      id
      name
      height
      weight
      base_experience
      order
      is_default
      pokemonsprites {
        sprites
      }
      pokemontypes(order_by: {slot: asc}) {
        slot
        type {
          name
          id
          typenames {
            name
            language_id
          }
        }
      }
      pokemonmoves(distinct_on: move_id, order_by: {move_id: asc}) {
        level
        movelearnmethod {
          name
        }
        move {
          name
          id
          power
          accuracy
          pp
          priority
          move_effect_chance
          type {
            name
          }
          movedamageclass {
            name
            id
          }
          generation {
            name
            id
          }
          movenames {
            name
            language_id
          }
          moveflavortexts(order_by: {version_group_id: desc}) {
            flavor_text
            language_id
          }
          movemeta {
            crit_rate
            drain
            flinch_chance
            healing
            min_hits
            max_hits
            ailment_chance
            movemetaailment {
              name
            }
          }
          movemetastatchanges {
            change
            stat {
              name
            }
          }
        }
      }
      pokemonstats(order_by: {stat_id: asc}) {
        base_stat
        effort
        stat {
          name
          id
          statnames {
            name
            language_id
          }
        }
      }
      pokemonabilities(order_by: {slot: asc}) {
        is_hidden
        slot
        ability {
          name
          id
          abilitynames {
            name
            language_id
          }
          abilityflavortexts(order_by: {version_group_id: desc}) {
            flavor_text
            language_id
          }
        }
      }
      pokemonhelditemsByPokemonId: pokemonitems {
        rarity
        item {
          name
          id
          cost
          itemnames {
            name
            language_id
          }
        }
        version {
          name
        }
      }
      pokemonforms {
        id
        name
        is_default
        pokemonformnames {
          name
          language_id
        }
      }
      pokemonspecy {
        id
        name
        evolution_chain_id
        generation {
          id
          name
        }
      }
    }
  }
"""

POKEMON_SPECIES_QUERY = """
  query getPokemonSpecies($id: Int!) {
    pokemonspecies(where: {id: {_eq: $id}}) {
      id
      name
      order
      gender_rate
      capture_rate
      base_happiness
      is_baby
      is_legendary
      is_mythical
      hatch_counter
      has_gender_differences
      forms_switchable
      evolution_chain_id
      growthrate {
        name
        id
      }
      pokemoncolor {
        name
        id
      }
      pokemonshape {
        name
        id
      }
      pokemonhabitat {
        name
        id
      }
      generation {
        name
        id
        generationnames {
          name
          language_id
        }
      }
      pokemonegggroups {
        egggroup {
          name
          id
          egggroupnames {
            name
            language_id
          }
        }
      }
      pokemonspeciesnames {
        name
        genus
        language_id
      }
      pokemonspeciesflavortexts(order_by: {version_id: desc}) {
        flavor_text
        language_id
        version {
          name
        }
      }
      pokemons {
        id
        name
        is_default
      }
    }
  }
"""

EVOLUTION_CHAIN_QUERY = """
  query getEvolutionChain($chainId: Int!) {
    evolutionchain(where: {id: {_eq: $chainId}}) {
      id
      pokemonspecies(order_by: {order: asc}) {
        id
        name
        order
        evolves_from_species_id
        pokemonevolutions {
          min_level
          min_happiness
          min_beauty
          min_affection
          needs_overworld_rain
          turn_upside_down
          time_of_day
          relative_physical_stats
          gender_id
          held_item_id
          trade_species_id
          evolutiontrigger {
            name
            id
          }
          item {
            name
            id
          }
          location {
            name
            id
          }
          move {
            name
            id
          }
          type {
            name
            id
          }
        }
        pokemons(where: {is_default: {_eq: true}}, limit: 1) {
          id
          name
          pokemonsprites {
            sprites
          }
        }
      }
    }
  }
"""

RELATED_BY_GENERATION_QUERY = """
  query getRelatedPokemonByGeneration($generationId: Int!, $limit: Int!) {
    pokemonspecies(
      where: {generation_id: {_eq: $generationId}},
      order_by: {id: asc},
      limit: $limit
    ) {
      id
      name
      pokemonspeciesnames {
        name
        language_id
      }
      pokemons(where: {is_default: {_eq: true}}, limit: 1) {
        id
        pokemonsprites {
          sprites
        }
      }
    }
  }
"""

POKEMON_BY_ID_QUERY = """
  query getPokemonById($id: Int!) {
    pokemon(where: {id: {_eq: $id}}) {
      id
      name
      pokemonsprites {
        sprites
      }
    }
  }
"""

ITEMS_BY_IDS_QUERY = """
  query getItemsByIds($ids: [Int!]!) {
    item(where: {id: {_in: $ids}}) {
      id
      name
      itemnames {
        name
        language_id
      }
    }
  }
"""

POKEMON_NAMES_BATCH_QUERY = """
  query getPokemonNamesBatch($ids: [Int!]!) {
    pokemonspecies(where: {id: {_in: $ids}}) {
      id
      name
      pokemonspeciesnames {
        name
        language_id
      }
    }
  }
"""
