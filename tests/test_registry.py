"""
Tests for the ecosystem handler registry.
"""

import pytest

from genstep.context import Ecosystem
from genstep.ecosystems import (
    IMAGE_HANDLERS,
    VIDEO_HANDLERS,
    EcosystemRegistry,
    create_default_registry,
    get_registry,
    reset_registry,
    set_registry,
)
from genstep.ecosystems.image import create_qwen_input
from genstep.steps import StepType


@pytest.fixture(autouse=True)
def clean_global_registry():
    reset_registry()
    yield
    reset_registry()


class TestEcosystemRegistry:
    """Tests for EcosystemRegistry."""

    def test_register_and_get(self):
        registry = EcosystemRegistry()
        registry.register(create_qwen_input)

        assert registry.get(Ecosystem.QWEN) is create_qwen_input
        assert registry.get("Qwen") is create_qwen_input
        assert Ecosystem.QWEN in registry
        assert len(registry) == 1

    def test_duplicate_rejected(self):
        registry = EcosystemRegistry([create_qwen_input])
        with pytest.raises(ValueError):
            registry.register(create_qwen_input)

    def test_replace(self):
        registry = EcosystemRegistry([create_qwen_input])
        registry.register(create_qwen_input, replace=True)
        assert len(registry) == 1

    def test_unregister(self):
        registry = EcosystemRegistry([create_qwen_input])
        assert registry.unregister("Qwen") is True
        assert registry.unregister("Qwen") is False
        assert "Qwen" not in registry

    def test_unknown_ecosystem_lookup(self):
        registry = EcosystemRegistry()
        assert registry.get("Midjourney") is None
        with pytest.raises(KeyError):
            registry.get_required("Midjourney")

    def test_validate_coverage_lists_missing(self):
        registry = EcosystemRegistry([create_qwen_input])
        with pytest.raises(ValueError) as exc_info:
            registry.validate_coverage()
        assert "Flux2Klein" in str(exc_info.value)
        assert "Qwen" not in registry.missing()

    def test_repr(self):
        assert repr(EcosystemRegistry([create_qwen_input])) == "EcosystemRegistry(1 handlers)"


class TestDefaultRegistry:
    """Tests for the built-in handler table."""

    def test_every_ecosystem_has_exactly_one_handler(self):
        registry = create_default_registry()
        assert set(registry.list_ecosystems()) == set(Ecosystem)
        assert len(IMAGE_HANDLERS) + len(VIDEO_HANDLERS) == len(Ecosystem)

    def test_video_handlers_emit_video_steps(self):
        for handler in VIDEO_HANDLERS:
            assert set(handler.workflows.values()) == {StepType.VIDEO_GEN}

    def test_routes_cover_step_kinds(self):
        step_types = {step_type for _, _, _, step_type in create_default_registry().routes()}
        assert step_types == {
            StepType.TEXT_TO_IMAGE,
            StepType.IMAGE_GEN,
            StepType.VIDEO_GEN,
            StepType.COMFY,
        }

    def test_sd_routes(self):
        routes = {
            (base_model, workflow)
            for ecosystem, base_model, workflow, _ in create_default_registry().routes()
            if ecosystem == Ecosystem.STABLE_DIFFUSION
        }
        assert ("SD1", "txt2img:draft") in routes
        assert ("SD2", "txt2img:draft") not in routes
        assert ("NoobAI", "img2img:hires-fix") in routes


class TestGlobalRegistry:
    """Tests for module-level accessors."""

    def test_lazily_built(self):
        registry = get_registry()
        assert registry is get_registry()
        assert len(registry) == len(Ecosystem)

    def test_set_and_reset(self):
        custom = EcosystemRegistry()
        set_registry(custom)
        assert get_registry() is custom
        reset_registry()
        assert get_registry() is not custom
