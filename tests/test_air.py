"""
Tests for AIR resource identifiers.
"""

import pytest

from genstep.air import (
    AIR,
    air_for_resource,
    ecosystem_for_base_model,
    parse_air_safe,
    parse_air_strict,
    to_air,
)
from genstep.comfy import ResourceToApply, apply_resources
from genstep.errors import ErrorCategory, MalformedAirError


class TestFormatting:
    """Tests for building AIR strings from resources."""

    def test_checkpoint_air(self, resource_factory):
        resource = resource_factory(128713, 4384, base_model="SD 1.5", type="Checkpoint")
        assert to_air(resource) == "urn:air:sd1:checkpoint:civitai:4384@128713"

    def test_resource_type_lowercased(self, resource_factory):
        resource = resource_factory(10, 20, base_model="SDXL 1.0", type="LORA")
        assert to_air(resource) == "urn:air:sdxl:lora:civitai:20@10"

    def test_ecosystem_override(self, resource_factory):
        resource = resource_factory(1, 2, base_model="Flux.2 Klein 9B", type="LORA")
        assert to_air(resource).startswith("urn:air:flux2klein:lora:")

    def test_unknown_base_model_falls_back_to_name(self, resource_factory):
        resource = resource_factory(1, 2, base_model="Mystery", type="LORA")
        assert to_air(resource) == "urn:air:mystery:lora:civitai:2@1"

    def test_unknown_base_model_name_made_parseable(self, resource_factory):
        resource = resource_factory(1, 2, base_model="Some Model (v2)", type="Motion Module")
        air = to_air(resource)
        assert air == "urn:air:some_model_v2:motion_module:civitai:2@1"
        assert parse_air_safe(air) is not None

    def test_unknown_base_model_lora_applied_to_graph(self, resource_factory):
        graph = {
            "4": {"class_type": "CheckpointLoaderSimple", "inputs": {"ckpt_name": "base.safetensors"}},
            "3": {"class_type": "KSampler", "inputs": {"model": ["4", 0]}},
        }
        lora = resource_factory(1, 2, base_model="Some Model", type="LORA")
        apply_resources(graph, [ResourceToApply(air=to_air(lora), strength=0.5)])
        assert graph["3"]["inputs"]["model"] == ["resource-stack-1", 0]

    def test_str_matches_to_air(self, resource_factory):
        resource = resource_factory(5, 6, base_model="Pony", type="LORA")
        assert str(air_for_resource(resource)) == to_air(resource)


class TestEcosystemLookup:
    """Tests for base model -> ecosystem segment."""

    def test_lookup_by_name_and_group(self):
        assert ecosystem_for_base_model("SD 1.5") == "sd1"
        assert ecosystem_for_base_model("SD1") == "sd1"

    def test_strict_unknown_raises(self):
        with pytest.raises(MalformedAirError):
            ecosystem_for_base_model("Mystery")

    def test_safe_unknown_returns_none(self, resource_factory):
        assert ecosystem_for_base_model("Mystery", strict=False) is None
        assert air_for_resource(resource_factory(1, base_model="Mystery"), strict=False) is None


class TestParsing:
    """Tests for parse_air_strict / parse_air_safe."""

    def test_round_trip(self, resource_factory):
        resource = resource_factory(691639, 618692, base_model="Flux.1 D", type="Checkpoint")
        parsed = parse_air_strict(to_air(resource))
        assert parsed == AIR(
            ecosystem="flux1",
            resource_type="checkpoint",
            model_id=618692,
            version_id=691639,
        )

    def test_parse_classmethod(self):
        air = AIR.parse("urn:air:sdxl:lora:civitai:20@10")
        assert air.model_id == 20
        assert air.version_id == 10
        assert air.source == "civitai"

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "urn:air:sdxl:lora:civitai:20",
            "urn:air:sdxl:lora:20@10",
            "air:sdxl:lora:civitai:20@10",
            "urn:air:SDXL:lora:civitai:20@10",
            "urn:air:sdxl:lora:civitai:abc@10",
        ],
    )
    def test_malformed_strict(self, value):
        with pytest.raises(MalformedAirError) as exc_info:
            parse_air_strict(value)
        assert exc_info.value.category == ErrorCategory.MALFORMED_INPUT

    def test_non_string_strict(self):
        with pytest.raises(MalformedAirError):
            parse_air_strict(12345)

    def test_malformed_safe(self):
        assert parse_air_safe("not an air") is None

    def test_with_version(self):
        air = AIR.parse("urn:air:flux1:checkpoint:civitai:618692@691639")
        assert str(air.with_version(699279)) == "urn:air:flux1:checkpoint:civitai:618692@699279"
