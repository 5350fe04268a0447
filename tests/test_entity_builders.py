# tests/test_entity_builders.py
"""Tests for the per-collection entity builders."""

from unittest.mock import patch

from core.parsers import parse_text
from core.requirements import entity_builders
from core.requirements.entity_builders import (
    build_collection,
    build_ethics,
    build_traits,
    extract_trait_cost,
    has_allowed_archetype,
    has_species_class,
    incompatible_ethics,
    is_only_for_archetypes,
)

ETHICS_TEXT = """
ethic_authoritarian = { cost = 1 }
ethic_fanatic_authoritarian = { cost = 2 }
ethic_xenophile = { }
ethic_gestalt_consciousness = { cost = 3 }
"""

AUTHORITIES_TEXT = """
auth_democratic = {
    possible = { ethics = { NOR = { text = x value = ethic_authoritarian value = ethic_fanatic_authoritarian } } }
}
auth_imperial = {
    possible = { ethics = { OR = { value = ethic_authoritarian value = ethic_fanatic_authoritarian } } }
}
auth_corporate = {
    possible = { civics = { NOT = { value = civic_x } } }
}
auth_direct_list = {
    possible = { ethics = { ethic_xenophile } }
}
"""


class TestBuildCollection:
    def test_civics_from_document(self, collection_configs, civics_text) -> None:
        civics = build_collection(parse_text(civics_text), collection_configs["civics"])

        assert civics.names() == ["civic_fanatic_purifiers", "civic_pompous_purists", "civic_mining_guilds"]
        purifiers = civics.entities["civic_fanatic_purifiers"].requirements
        assert purifiers.required["ethics"] == [("ethic_fanatic_xenophobe",)]
        assert purifiers.forbidden["ethics"] == [
            "ethic_gestalt_consciousness",
            "ethic_xenophile",
            "ethic_fanatic_xenophile",
        ]
        assert purifiers.forbidden["authorities"] == ["auth_corporate"]
        assert purifiers.forbidden["civics"] == ["civic_pompous_purists"]
        assert civics.entities["civic_mining_guilds"].requirements.forbidden["origins"] == ["origin_void_dwellers"]

    def test_every_declared_facet_is_present(self, collection_configs, civics_text) -> None:
        civics = build_collection(parse_text(civics_text), collection_configs["civics"])
        facets = collection_configs["civics"].facet_schema.facets
        for entity in civics.entities.values():
            assert list(entity.requirements.required) == facets
            assert list(entity.requirements.forbidden) == facets

    def test_dlc_pruning_is_per_collection(self, collection_configs, civics_text) -> None:
        config = collection_configs["civics"].model_copy(update={"prune_dlc_exclusive": False})
        civics = build_collection(parse_text(civics_text), config)
        assert civics.has("civic_exclusive_old")

    def test_filter_fn(self, collection_configs, civics_text) -> None:
        civics = build_collection(
            parse_text(civics_text),
            collection_configs["civics"],
            filter_fn=lambda name, data: "purists" in name,
        )
        assert civics.names() == ["civic_pompous_purists"]

    def test_origins_flatten_and_inherit_trait_archetypes(self, collection_configs, origins_text, traits_text) -> None:
        origins = build_collection(
            parse_text(origins_text),
            collection_configs["origins"],
            trait_lookup=parse_text(traits_text),
        )
        void = origins.entities["origin_void_dwellers"].requirements
        assert void.required["species_class"] == ["HUM"]
        assert void.required["culture"] == ["mammalian_01", "reptilian_01"]
        assert void.required["species_archetype"] == [("BIOLOGICAL", "LITHOID")]

    def test_inherited_single_archetype_is_flattened(self, collection_configs) -> None:
        origins = build_collection(
            parse_text("origin_x = { traits = { trait = trait_a trait = trait_b } }"),
            collection_configs["origins"],
            trait_lookup=parse_text("trait_a = { allowed_archetypes = { BIOLOGICAL } } trait_b = { cost = 1 }"),
        )
        assert origins.entities["origin_x"].requirements.required["species_archetype"] == ["BIOLOGICAL"]

    def test_contradictions_are_logged_not_resolved(self, collection_configs) -> None:
        doc = parse_text("c = { possible = { civics = { value = a NOT = { value = a } } } }")
        with patch.object(entity_builders, "logger") as mock_logger:
            civics = build_collection(doc, collection_configs["civics"])
        assert civics.entities["c"].requirements.required["civics"] == ["a"]
        assert civics.entities["c"].requirements.forbidden["civics"] == ["a"]
        mock_logger.debug.assert_any_call(
            "Entity both requires and forbids identifiers",
            collection="civics",
            entity="c",
            contradictions={"civics": ["a"]},
        )


class TestBuildEthics:
    def test_incompatible_ethics(self) -> None:
        assert incompatible_ethics("ethic_authoritarian") == [
            "ethic_fanatic_authoritarian",
            "ethic_egalitarian",
            "ethic_fanatic_egalitarian",
        ]
        assert incompatible_ethics("ethic_fanatic_xenophile") == [
            "ethic_xenophile",
            "ethic_xenophobe",
            "ethic_fanatic_xenophobe",
        ]
        assert incompatible_ethics("ethic_unknown") == ["ethic_fanatic_unknown"]

    def test_costs_and_gestalt_skip(self) -> None:
        ethics = build_ethics(parse_text(ETHICS_TEXT))
        assert ethics.names() == ["ethic_authoritarian", "ethic_fanatic_authoritarian", "ethic_xenophile"]
        assert ethics.entities["ethic_fanatic_authoritarian"].cost == 2
        assert ethics.entities["ethic_xenophile"].cost == 1

    def test_allowed_authorities(self) -> None:
        ethics = build_ethics(parse_text(ETHICS_TEXT), parse_text(AUTHORITIES_TEXT))
        authoritarian = ethics.entities["ethic_authoritarian"].requirements
        assert authoritarian.required["authorities"] == ["auth_imperial"]
        xenophile = ethics.entities["ethic_xenophile"].requirements
        assert xenophile.required["authorities"] == ["auth_democratic", "auth_direct_list"]
        assert xenophile.forbidden["ethics"] == ["ethic_fanatic_xenophile", "ethic_xenophobe", "ethic_fanatic_xenophobe"]

    def test_to_dict_includes_cost(self) -> None:
        ethics = build_ethics(parse_text("ethic_pacifist = { cost = 1 }"))
        assert ethics.to_dict()["ethic_pacifist"] == {
            "yes": {"ethics": [], "authorities": []},
            "no": {"ethics": ["ethic_fanatic_pacifist", "ethic_militarist", "ethic_fanatic_militarist"], "authorities": []},
            "cost": 1,
        }


class TestBuildTraits:
    def test_traits_from_document(self, traits_text) -> None:
        traits = build_traits(parse_text(traits_text))
        assert traits.names() == ["trait_void_dweller", "trait_strong", "trait_weak"]
        strong = traits.entities["trait_strong"]
        assert strong.cost == 1
        assert strong.requirements.forbidden["traits"] == ["trait_weak"]
        assert strong.requirements.required["species_archetype"] == [("BIOLOGICAL",)]
        assert traits.entities["trait_weak"].cost == -1

    def test_cost_with_modifiers(self) -> None:
        trait = parse_text(
            """
            trait_x = {
                cost = {
                    base = 2
                    modifier = { add = 1 has_trait = trait_y }
                    modifier = { add = -1 has_origin = origin_z }
                    modifier = { factor = 2 has_trait = ignored }
                }
            }
            """
        )["trait_x"]
        assert extract_trait_cost(trait) == (2, {"trait_y": 1, "origin_z": -1})

    def test_only_initial_no_skips_a_trait(self) -> None:
        traits = build_traits(
            parse_text('trait_zero = { initial = 0 cost = 1 } trait_off = { initial = no } trait_quoted = { initial = "no" }')
        )
        assert traits.names() == ["trait_zero"]
        assert traits.entities["trait_zero"].cost == 1

    def test_missing_cost_defaults_to_zero(self) -> None:
        assert extract_trait_cost({}) == (0, {})

    def test_species_class(self) -> None:
        traits = build_traits(parse_text("trait_robo = { species_class = { ROBOT MACHINE } }"))
        assert traits.entities["trait_robo"].requirements.required["species_class"] == ["ROBOT", "MACHINE"]

    def test_filter_predicates(self) -> None:
        doc = parse_text(
            """
            trait_robo = { species_class = ROBOT allowed_archetypes = { ROBOT } }
            trait_bio = { allowed_archetypes = { BIOLOGICAL LITHOID } }
            """
        )
        assert has_species_class(doc["trait_robo"], "ROBOT")
        assert not has_species_class(doc["trait_bio"], ["ROBOT", "MACHINE"])
        assert has_allowed_archetype(doc["trait_bio"], "LITHOID")
        assert is_only_for_archetypes(doc["trait_robo"], ["ROBOT", "MACHINE"])
        assert not is_only_for_archetypes(doc["trait_bio"], "BIOLOGICAL")

        robots = build_traits(doc, filter_fn=lambda name, data: has_allowed_archetype(data, "ROBOT"))
        assert robots.names() == ["trait_robo"]

    def test_opposites_are_not_closed_by_the_builder(self, traits_text) -> None:
        traits = build_traits(parse_text(traits_text))
        assert traits.entities["trait_weak"].requirements.forbidden["traits"] == []
