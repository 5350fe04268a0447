"""
Constants for collection names, canonical facet ids and raw-key vocabularies.

**Facet vocabulary policy (contract):**

- Facet ids are the canonical names used in every ``RequirementSet``. Raw source keys
  (``authority``/``authorities``, ``species_class``, ``graphical_culture``...) are
  mapped onto them by a per-collection key map.
- Unknown raw keys are ignored by extraction, so a key map only needs to list what a
  collection actually cares about.
- Civics and origins differ: civics fold ``species_class`` into the
  ``species_archetype`` facet, while origins keep ``species_class`` separate.
"""

# --- Collection names ---
CIVICS = "civics"
ORIGINS = "origins"
ETHICS = "ethics"
TRAITS = "traits"
AUTHORITIES = "authorities"

COLLECTION_NAMES: tuple[str, ...] = (CIVICS, ORIGINS, ETHICS, TRAITS)

# --- Canonical facet ids ---
FACET_AUTHORITIES = "authorities"
FACET_CIVICS = "civics"
FACET_ETHICS = "ethics"
FACET_SPECIES_CLASS = "species_class"
FACET_SPECIES_ARCHETYPE = "species_archetype"
FACET_CULTURE = "culture"
FACET_ORIGINS = "origins"
FACET_TRAITS = "traits"

# --- Condition sections and special keys ---
CONDITION_KEYS: tuple[str, ...] = ("potential", "possible")
AVAILABILITY_KEY = "playable"
DLC_PREDICATE_KEY = "host_has_dlc"

OR_KEY = "OR"
NOR_KEY = "NOR"
NOT_KEY = "NOT"
VALUE_KEY = "value"

# Raw key -> facet id for civics. Civics also use species_class for archetypes.
CIVIC_KEY_MAP: dict[str, str] = {
    "ethics": FACET_ETHICS,
    "authority": FACET_AUTHORITIES,
    "authorities": FACET_AUTHORITIES,
    "civics": FACET_CIVICS,
    "species_archetype": FACET_SPECIES_ARCHETYPE,
    "species_archetypes": FACET_SPECIES_ARCHETYPE,
    "species_class": FACET_SPECIES_ARCHETYPE,
    "graphical_culture": FACET_CULTURE,
    "origin": FACET_ORIGINS,
}
CIVIC_FACETS: tuple[str, ...] = (
    FACET_AUTHORITIES,
    FACET_CIVICS,
    FACET_ETHICS,
    FACET_SPECIES_ARCHETYPE,
    FACET_CULTURE,
    FACET_ORIGINS,
)

ORIGIN_KEY_MAP: dict[str, str] = {
    "ethics": FACET_ETHICS,
    "authority": FACET_AUTHORITIES,
    "authorities": FACET_AUTHORITIES,
    "civics": FACET_CIVICS,
    "species_class": FACET_SPECIES_CLASS,
    "species_archetype": FACET_SPECIES_ARCHETYPE,
    "graphical_culture": FACET_CULTURE,
}
ORIGIN_FACETS: tuple[str, ...] = (
    FACET_AUTHORITIES,
    FACET_CIVICS,
    FACET_ETHICS,
    FACET_SPECIES_CLASS,
    FACET_SPECIES_ARCHETYPE,
    FACET_CULTURE,
)

# Facets whose OR blocks contribute bare identifiers rather than alternative groups.
FLAT_FACETS: tuple[str, ...] = (FACET_CULTURE,)

# --- Ethics ---
GESTALT_ETHIC = "ethic_gestalt_consciousness"
ETHIC_PREFIX = "ethic_"
FANATIC_ETHIC_PREFIX = "ethic_fanatic_"
DEFAULT_ETHIC_COST = 1

ETHIC_OPPOSITES: dict[str, str] = {
    "ethic_authoritarian": "ethic_egalitarian",
    "ethic_egalitarian": "ethic_authoritarian",
    "ethic_xenophobe": "ethic_xenophile",
    "ethic_xenophile": "ethic_xenophobe",
    "ethic_militarist": "ethic_pacifist",
    "ethic_pacifist": "ethic_militarist",
    "ethic_spiritualist": "ethic_materialist",
    "ethic_materialist": "ethic_spiritualist",
}

# --- Traits ---
TRAIT_CONDITION_PREFIX = "has_"
