"""
Tests for step templates and output tidying.
"""

from genstep.errors import MissingContextFieldError, ResourceNotResolvedError
from genstep.steps import StepTemplate, StepType, remove_empty


class TestRemoveEmpty:
    """Tests for remove_empty."""

    def test_drops_none_and_empty(self):
        assert remove_empty({"a": None, "b": "", "c": [], "d": {}, "e": "x"}) == {"e": "x"}

    def test_keeps_zero_and_false(self):
        assert remove_empty({"seed": 0, "enabled": False}) == {"seed": 0, "enabled": False}

    def test_recursive(self):
        value = {"params": {"prompt": "p", "negativePrompt": None}, "loras": [{"air": None}]}
        assert remove_empty(value) == {"params": {"prompt": "p"}}


class TestStepTemplate:
    """Tests for StepTemplate."""

    def test_create_tidies(self):
        step = StepTemplate.create(StepType.IMAGE_GEN, {"engine": "qwen", "seed": None})
        assert step.to_dict() == {"$type": "imageGen", "input": {"engine": "qwen"}}

    def test_constructor_does_not_tidy(self):
        step = StepTemplate(type=StepType.COMFY, input={"comfyWorkflow": {"1": {"inputs": {}}}})
        assert step.input["comfyWorkflow"]["1"]["inputs"] == {}


class TestErrors:
    """Tests for error summaries."""

    def test_to_dict(self):
        error = MissingContextFieldError("aspectRatio", "for comfy workflows")
        assert error.to_dict() == {
            "error": "MissingContextFieldError",
            "category": "malformed_input",
            "message": "aspectRatio is required for comfy workflows",
            "details": {"field": "aspectRatio"},
        }

    def test_resource_not_resolved_category(self):
        assert ResourceNotResolvedError(5).category.value == "internal"
