# tests/test_requirement_graph_service.py
import json

import pytest

from core.parsers import parse_text
from core.requirements import RequirementGraphService
from models.facet_schema import default_collection_configs


@pytest.fixture
def documents(civics_text, origins_text, traits_text):
    return {
        "civics": parse_text(civics_text),
        "origins": parse_text(origins_text),
        "traits": parse_text(traits_text),
        "ethics": parse_text("ethic_xenophobe = { cost = 1 } ethic_gestalt_consciousness = { }"),
        "authorities": parse_text("auth_hive_mind = { possible = { ethics = { value = ethic_gestalt_consciousness } } }"),
    }


class TestRequirementGraphService:
    def test_defaults_come_from_settings(self) -> None:
        service = RequirementGraphService()
        assert service.closure_facet == "civics"
        assert service.trait_closure_facet == "traits"
        assert set(service.configs) == {"civics", "origins"}

    def test_civics_are_closed(self, documents) -> None:
        civics = RequirementGraphService().build_civics(documents["civics"])
        purists = civics.entities["civic_pompous_purists"].requirements
        assert purists.forbidden["civics"] == ["civic_fanatic_purifiers"]

    def test_origins_receive_civic_restrictions(self, documents) -> None:
        origins = RequirementGraphService().build_origins(
            documents["origins"],
            civics_document=documents["civics"],
            traits_document=documents["traits"],
        )
        assert origins.entities["origin_void_dwellers"].requirements.forbidden["civics"] == ["civic_mining_guilds"]
        assert origins.entities["origin_default"].requirements.forbidden["civics"] == []

    def test_origins_ignore_pruned_civics(self) -> None:
        civics_doc = parse_text(
            """
            civic_gone = {
                playable = { NOT = { host_has_dlc = "X" } }
                possible = { origin = { NOT = { value = origin_a } } }
            }
            """
        )
        origins = RequirementGraphService().build_origins(parse_text("origin_a = { }"), civics_document=civics_doc)
        assert origins.entities["origin_a"].requirements.forbidden["civics"] == []

    def test_origins_without_civics(self, documents) -> None:
        origins = RequirementGraphService().build_origins(documents["origins"])
        assert origins.names() == ["origin_default", "origin_void_dwellers"]

    def test_traits_are_closed(self, documents) -> None:
        traits = RequirementGraphService().build_traits(documents["traits"])
        assert traits.entities["trait_weak"].requirements.forbidden["traits"] == ["trait_strong"]

    def test_build_all(self, documents) -> None:
        collections = RequirementGraphService().build_all(documents)
        assert list(collections) == ["civics", "origins", "ethics", "traits"]
        assert collections["ethics"].names() == ["ethic_xenophobe"]
        assert collections["ethics"].entities["ethic_xenophobe"].requirements.required["authorities"] == []

    def test_build_all_skips_missing_documents(self, documents) -> None:
        collections = RequirementGraphService().build_all({"civics": documents["civics"], "origins": {}})
        assert list(collections) == ["civics"]

    def test_custom_closure_facet(self, documents) -> None:
        service = RequirementGraphService(closure_facet="ethics")
        civics = service.build_civics(documents["civics"])
        assert civics.entities["civic_pompous_purists"].requirements.forbidden["civics"] == []
        assert civics.entities["civic_fanatic_purifiers"].requirements.forbidden["ethics"] == [
            "ethic_fanatic_xenophile",
            "ethic_gestalt_consciousness",
            "ethic_xenophile",
        ]

    def test_missing_config_raises(self, documents) -> None:
        configs = default_collection_configs()
        del configs["civics"]
        with pytest.raises(KeyError, match="civics"):
            RequirementGraphService(configs=configs).build_civics(documents["civics"])

    def test_json_payload_is_serializable(self, documents) -> None:
        service = RequirementGraphService()
        payload = service.to_json_payload(service.build_all(documents))
        decoded = json.loads(json.dumps(payload))
        assert decoded["origins"]["origin_void_dwellers"]["yes"]["species_archetype"] == [["BIOLOGICAL", "LITHOID"]]
        assert decoded["traits"]["trait_strong"]["cost"] == 1
        assert set(decoded["civics"]["civic_mining_guilds"]) == {"yes", "no"}
