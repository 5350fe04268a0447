# tests/conftest.py
import os
import sys

import pytest

# Ensure repository root is on PYTHONPATH for tests
repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if repo_root not in sys.path:
    sys.path.insert(0, repo_root)

from models.facet_schema import default_collection_configs  # noqa: E402

CIVICS_TEXT = """
# Regular civics
civic_fanatic_purifiers = {
    potential = {
        ethics = { NOT = { value = ethic_gestalt_consciousness } }
    }
    possible = {
        ethics = {
            OR = { value = ethic_fanatic_xenophobe }
            NOR = { value = ethic_xenophile value = ethic_fanatic_xenophile }
        }
        authority = { NOT = { value = auth_corporate } }
        civics = { NOR = { value = civic_pompous_purists } }
    }
}

civic_pompous_purists = {
    possible = {
        ethics = { OR = { value = ethic_xenophobe value = ethic_fanatic_xenophobe } }
    }
}

civic_mining_guilds = {
    possible = {
        origin = { NOT = { value = origin_void_dwellers } }
    }
}

civic_exclusive_old = {
    playable = { NOT = { host_has_dlc = "Federations" } }
    possible = {
        civics = { NOT = { value = civic_mining_guilds } }
    }
}
"""

ORIGINS_TEXT = """
origin_default = {
    possible = { }
}
origin_void_dwellers = {
    possible = {
        species_class = { OR = { value = HUM } }
        graphical_culture = { OR = { value = mammalian_01 value = reptilian_01 } }
    }
    traits = { trait = trait_void_dweller }
}
"""

TRAITS_TEXT = """
trait_void_dweller = {
    cost = 0
    initial = yes
    allowed_archetypes = { BIOLOGICAL LITHOID }
}
trait_strong = {
    cost = 1
    opposites = { "trait_weak" }
    allowed_archetypes = { BIOLOGICAL }
}
trait_weak = {
    cost = -1
    allowed_archetypes = { BIOLOGICAL }
}
trait_hidden = {
    initial = no
}
"""


@pytest.fixture
def collection_configs():
    """Fresh default civics/origins collection configs."""
    return default_collection_configs()


@pytest.fixture
def civic_schema(collection_configs):
    return collection_configs["civics"].facet_schema


@pytest.fixture
def origin_schema(collection_configs):
    return collection_configs["origins"].facet_schema


@pytest.fixture
def civics_text() -> str:
    return CIVICS_TEXT


@pytest.fixture
def origins_text() -> str:
    return ORIGINS_TEXT


@pytest.fixture
def traits_text() -> str:
    return TRAITS_TEXT
