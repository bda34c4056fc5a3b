"""
Pytest configuration and fixtures for genstep tests.
"""

import json
import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from genstep.config import CompilerSettings
from genstep.context import ResourceData
from genstep.ecosystems import AirLookup, HandlerContext, create_default_registry
from genstep.workflows import InMemoryWorkflowCache, WorkflowDefinition, WorkflowTemplateStore

# Checkpoint -> (LoRA) -> sampler graph, as published for the SD comfy workflows
SAMPLE_TEMPLATE = json.dumps(
    {
        "4": {
            "class_type": "CheckpointLoaderSimple",
            "inputs": {"ckpt_name": "placeholder.safetensors"},
        },
        "6": {
            "class_type": "CLIPTextEncode",
            "inputs": {"text": "{{prompt}}", "clip": ["4", 1]},
        },
        "7": {
            "class_type": "CLIPTextEncode",
            "inputs": {"text": "{{negativePrompt}}", "clip": ["4", 1]},
        },
        "3": {
            "class_type": "KSampler",
            "inputs": {
                "seed": "{{{seed}}}",
                "steps": "{{{steps}}}",
                "cfg": "{{{cfgScale}}}",
                "sampler_name": "{{sampler}}",
                "scheduler": "{{scheduler}}",
                "denoise": "{{{denoise}}}",
                "model": ["4", 0],
                "positive": ["6", 0],
                "negative": ["7", 0],
            },
        },
        "8": {
            "class_type": "VAEDecode",
            "inputs": {"samples": ["3", 0], "vae": ["4", 2]},
        },
        "9": {
            "class_type": "SaveImage",
            "inputs": {"images": ["8", 0], "filename_prefix": "out"},
        },
    }
)

UPSCALE_TEMPLATE = json.dumps(
    {
        "1": {"class_type": "LoadImage", "inputs": {"image": "{{image}}"}},
        "2": {"class_type": "UpscaleModelLoader", "inputs": {"model_name": "4x.pth"}},
        "3": {
            "class_type": "ImageUpscaleWithModel",
            "inputs": {"upscale_model": ["2", 0], "image": ["1", 0]},
        },
        "4": {
            "class_type": "ImageScaleBy",
            "inputs": {"image": ["3", 0], "upscale_method": "lanczos", "scale_by": "{{{upscale}}}"},
        },
    }
)

BACKGROUND_TEMPLATE = json.dumps(
    {
        "1": {"class_type": "LoadImage", "inputs": {"image": "{{image}}"}},
        "2": {"class_type": "RemoveBackground", "inputs": {"image": ["1", 0]}},
    }
)

SD_TEMPLATE_KEYS = (
    "img2img",
    "txt2img-facefix",
    "txt2img-hires",
    "img2img-facefix",
    "img2img-hires",
)


def _make_resource(
    version_id: int,
    model_id: int | None = None,
    *,
    base_model: str = "SD 1.5",
    type: str = "LORA",
    strength: float | None = None,
    trigger_word: str | None = None,
) -> ResourceData:
    return ResourceData(
        id=version_id,
        base_model=base_model,
        model={"id": model_id if model_id is not None else version_id, "type": type},
        strength=strength,
        trigger_word=trigger_word,
    )


@pytest.fixture
def resource_factory():
    """Build ResourceData from version id, model id and base model."""
    return _make_resource


@pytest.fixture
def settings() -> CompilerSettings:
    """Settings with defaults, independent of the environment."""
    return CompilerSettings()


@pytest.fixture
def sample_template() -> str:
    return SAMPLE_TEMPLATE


@pytest.fixture
async def workflow_store() -> WorkflowTemplateStore:
    """Store holding every template the built-in handlers reference."""
    store = WorkflowTemplateStore(InMemoryWorkflowCache(ttl=0))
    for key in SD_TEMPLATE_KEYS:
        await store.set(
            key,
            WorkflowDefinition(key=key, type=key.split("-")[0], name=key, template=SAMPLE_TEMPLATE),
        )
    await store.set(
        "img2img-upscale",
        WorkflowDefinition(key="img2img-upscale", type="img2img", name="Upscale", template=UPSCALE_TEMPLATE),
    )
    await store.set(
        "img2img-background-removal",
        WorkflowDefinition(
            key="img2img-background-removal",
            type="img2img",
            name="Background removal",
            template=BACKGROUND_TEMPLATE,
        ),
    )
    return store


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def handler_ctx_factory(workflow_store, settings):
    """Build a HandlerContext with AIRs pre-computed for a parsed context."""

    def factory(data) -> HandlerContext:
        return HandlerContext(
            airs=AirLookup.from_context(data),
            workflows=workflow_store,
            settings=settings,
        )

    return factory


@pytest.fixture
def sd_checkpoint() -> ResourceData:
    return _make_resource(128713, 4384, base_model="SD 1.5", type="Checkpoint")


@pytest.fixture
def sd_lora() -> ResourceData:
    return _make_resource(500001, 400001, base_model="SD 1.5", type="LORA", strength=0.8)
