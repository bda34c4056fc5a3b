"""
Tests for comfy resource graph rewriting.
"""

import copy

import pytest

from genstep.comfy import ResourceToApply, apply_resources, build_child_index

CHECKPOINT = ResourceToApply(air="urn:air:sd1:checkpoint:civitai:4384@128713")
LORA_A = ResourceToApply(air="urn:air:sd1:lora:civitai:100@101", strength=0.7)
LORA_B = ResourceToApply(air="urn:air:sd1:lora:civitai:200@201")


@pytest.fixture
def graph():
    """Checkpoint loader feeding two text encoders, a sampler and a VAE decode."""
    return {
        "4": {"class_type": "CheckpointLoaderSimple", "inputs": {"ckpt_name": "base.safetensors"}},
        "6": {"class_type": "CLIPTextEncode", "inputs": {"text": "a cat", "clip": ["4", 1]}},
        "7": {
            "class_type": "CLIPTextEncode",
            "inputs": {"text": "EasyNegative, blurry", "clip": ["4", 1]},
        },
        "3": {
            "class_type": "KSampler",
            "inputs": {"model": ["4", 0], "positive": ["6", 0], "negative": ["7", 0], "steps": 20},
        },
        "8": {"class_type": "VAEDecode", "inputs": {"samples": ["3", 0], "vae": ["4", 2]}},
        "9": {"class_type": "SaveImage", "inputs": {"images": ["8", 0]}},
    }


@pytest.fixture
def graph_with_lora(graph):
    """Same graph with a template LoRA between the checkpoint and its consumers."""
    graph["10"] = {
        "class_type": "LoraLoader",
        "inputs": {"lora_name": "old.safetensors", "model": ["4", 0], "clip": ["4", 1]},
    }
    graph["3"]["inputs"]["model"] = ["10", 0]
    graph["6"]["inputs"]["clip"] = ["10", 1]
    graph["7"]["inputs"]["clip"] = ["10", 1]
    return graph


class TestChildIndex:
    """Tests for build_child_index."""

    def test_back_edges(self, graph):
        index = build_child_index(graph)
        assert sorted(index["4"]) == [("3", "model"), ("6", "clip"), ("7", "clip"), ("8", "vae")]
        assert index["3"] == [("8", "samples")]
        assert "9" not in index

    def test_index_not_attached_to_nodes(self, graph):
        build_child_index(graph)
        assert all("_children" not in node for node in graph.values())

    def test_dangling_reference_ignored(self):
        index = build_child_index({"1": {"inputs": {"model": ["missing", 0]}}})
        assert index == {}


class TestApplyResources:
    """Tests for apply_resources."""

    def test_node_count_invariant(self, graph):
        non_loaders = {node_id for node_id in graph if node_id != "4"}
        apply_resources(graph, [CHECKPOINT, LORA_A, LORA_B])

        assert "4" not in graph
        assert set(graph) == non_loaders | {"resource-stack", "resource-stack-1", "resource-stack-2"}

    def test_vae_binds_to_head_model_to_tail(self, graph):
        apply_resources(graph, [CHECKPOINT, LORA_A, LORA_B])

        assert graph["8"]["inputs"]["vae"] == ["resource-stack", 2]
        assert graph["3"]["inputs"]["model"] == ["resource-stack-2", 0]
        assert graph["6"]["inputs"]["clip"] == ["resource-stack-2", 1]
        assert graph["7"]["inputs"]["clip"] == ["resource-stack-2", 1]

    def test_stack_nodes(self, graph):
        apply_resources(graph, [CHECKPOINT, LORA_A, LORA_B])

        assert graph["resource-stack"] == {
            "class_type": "CheckpointLoaderSimple",
            "inputs": {"ckpt_name": CHECKPOINT.air},
        }
        first = graph["resource-stack-1"]["inputs"]
        assert first["lora_name"] == LORA_A.air
        assert first["strength_model"] == 0.7
        assert first["model"] == ["resource-stack", 0]
        assert first["clip"] == ["resource-stack", 1]

        second = graph["resource-stack-2"]["inputs"]
        assert second["strength_model"] == 1
        assert second["model"] == ["resource-stack-1", 0]

    def test_non_loader_edges_untouched(self, graph):
        apply_resources(graph, [CHECKPOINT, LORA_A])
        assert graph["3"]["inputs"]["positive"] == ["6", 0]
        assert graph["8"]["inputs"]["samples"] == ["3", 0]

    def test_pass_through_loader_replaced(self, graph_with_lora):
        apply_resources(graph_with_lora, [CHECKPOINT, LORA_A])

        assert "10" not in graph_with_lora
        assert "4" not in graph_with_lora
        assert graph_with_lora["3"]["inputs"]["model"] == ["resource-stack-1", 0]
        assert graph_with_lora["6"]["inputs"]["clip"] == ["resource-stack-1", 1]
        assert graph_with_lora["8"]["inputs"]["vae"] == ["resource-stack", 2]

    def test_loras_without_checkpoint_keep_original_loader(self, graph):
        apply_resources(graph, [LORA_A])

        assert "4" in graph
        assert graph["resource-stack-1"]["inputs"]["model"] == ["4", 0]
        assert graph["3"]["inputs"]["model"] == ["resource-stack-1", 0]
        assert graph["8"]["inputs"]["vae"] == ["4", 2]

    def test_empty_resources_no_op(self, graph):
        before = copy.deepcopy(graph)
        apply_resources(graph, [])
        assert graph == before

    def test_empty_resources_on_loaderless_graph_no_op(self):
        graph = {
            "1": {"class_type": "LoadImage", "inputs": {"image": "a.png"}},
            "2": {"class_type": "RemoveBackground", "inputs": {"image": ["1", 0]}},
            "3": {"class_type": "SaveImage", "inputs": {"images": ["2", 0]}},
        }
        before = copy.deepcopy(graph)
        apply_resources(graph, [])
        assert graph == before

    def test_no_checkpoint_loader_skips_model_resources(self):
        graph = {
            "1": {"class_type": "LoadImage", "inputs": {"image": "a.png"}},
            "2": {"class_type": "RemoveBackground", "inputs": {"image": ["1", 0]}},
        }
        before = copy.deepcopy(graph)
        apply_resources(graph, [CHECKPOINT, LORA_A])
        assert graph == before

    def test_embedding_substitution(self, graph):
        embedding = ResourceToApply(
            air="urn:air:sd1:textualinversion:civitai:7808@9208",
            trigger_word="easynegative",
        )
        apply_resources(graph, [embedding])

        assert graph["7"]["inputs"]["text"] == f"embedding:{embedding.air}, blurry"
        assert graph["6"]["inputs"]["text"] == "a cat"
        assert "4" in graph

    def test_embedding_whole_word_only(self, graph):
        graph["6"]["inputs"]["text"] = "easynegatives are not embeddings"
        embedding = ResourceToApply(
            air="urn:air:sd1:embedding:civitai:7808@9208", trigger_word="easynegative"
        )
        apply_resources(graph, [embedding])
        assert graph["6"]["inputs"]["text"] == "easynegatives are not embeddings"

    def test_upscaler_sets_model_name(self):
        graph = {
            "2": {"class_type": "UpscaleModelLoader", "inputs": {"model_name": "4x.pth"}},
            "3": {"class_type": "ImageUpscaleWithModel", "inputs": {"upscale_model": ["2", 0]}},
        }
        upscaler = ResourceToApply(air="urn:air:other:upscaler:civitai:147759@164821")
        apply_resources(graph, [upscaler])
        assert graph["2"]["inputs"]["model_name"] == upscaler.air

    def test_last_checkpoint_wins(self, graph):
        other = ResourceToApply(air="urn:air:sd1:checkpoint:civitai:1@2")
        apply_resources(graph, [CHECKPOINT, other])
        assert graph["resource-stack"]["inputs"]["ckpt_name"] == other.air
