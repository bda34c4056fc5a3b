"""
Tests for workflow template compilation.
"""

import json

import pytest

from genstep.errors import WorkflowCompilationError
from genstep.workflows import compile_template
from genstep.workflows.template import quote_bare_tokens


class TestLiteralTemplates:
    """Templates without placeholders."""

    def test_literal_template_unchanged(self):
        literal = json.dumps({"1": {"class_type": "LoadImage", "inputs": {"image": "a.png"}}})
        expected = json.loads(literal)
        assert compile_template(literal, {}) == expected
        assert compile_template(literal, {"image": "b.png", "seed": 3}) == expected

    def test_parsed_template_accepted(self):
        document = {"1": {"inputs": {"text": "{{prompt}}"}}}
        assert compile_template(document, {"prompt": "hi"}) == {"1": {"inputs": {"text": "hi"}}}


class TestSubstitution:
    """Tests for quoted and raw placeholders."""

    def test_quoted_substitution(self):
        template = '{"1": {"inputs": {"text": "a photo of {{prompt}}, detailed"}}}'
        result = compile_template(template, {"prompt": "a cat"})
        assert result["1"]["inputs"]["text"] == "a photo of a cat, detailed"

    def test_spaced_braces_tolerated(self):
        template = '{"1": {"inputs": {"text": "{ { prompt } }"}}}'
        assert compile_template(template, {"prompt": "x"})["1"]["inputs"]["text"] == "x"

    def test_raw_substitution_keeps_type(self):
        template = '{"1": {"inputs": {"steps": "{{{steps}}}", "cfg": "{{{cfg}}}"}}}'
        result = compile_template(template, {"steps": 25, "cfg": 7.5})
        assert result["1"]["inputs"] == {"steps": 25, "cfg": 7.5}

    def test_bare_token_is_raw(self):
        template = '{"1": {"inputs": {"seed": {{seed}}}}}'
        assert compile_template(template, {"seed": 42})["1"]["inputs"]["seed"] == 42

    def test_raw_structured_value(self):
        template = '{"1": {"inputs": {"size": "{{{size}}}"}}}'
        result = compile_template(template, {"size": [512, 768]})
        assert result["1"]["inputs"]["size"] == [512, 768]

    def test_value_with_quotes_and_braces(self):
        template = '{"1": {"inputs": {"text": "{{prompt}}"}}}'
        prompt = 'a "quoted" {{not a token}} }} prompt'
        assert compile_template(template, {"prompt": prompt})["1"]["inputs"]["text"] == prompt

    def test_missing_quoted_param_is_empty(self):
        template = '{"1": {"inputs": {"text": "{{negativePrompt}}"}}}'
        assert compile_template(template, {})["1"]["inputs"]["text"] == ""

    def test_non_string_inline_value(self):
        template = '{"1": {"inputs": {"text": "seed={{seed}}"}}}'
        assert compile_template(template, {"seed": 7})["1"]["inputs"]["text"] == "seed=7"

    def test_full_sample_template(self, sample_template):
        params = {
            "prompt": "a cat",
            "negativePrompt": "blurry",
            "seed": 1,
            "steps": 20,
            "cfgScale": 7,
            "sampler": "euler",
            "scheduler": "normal",
            "denoise": 1,
        }
        graph = compile_template(sample_template, params)
        assert graph["3"]["inputs"]["steps"] == 20
        assert graph["3"]["inputs"]["model"] == ["4", 0]
        assert graph["6"]["inputs"]["text"] == "a cat"


class TestErrors:
    """Tests for compilation failures."""

    def test_missing_raw_param(self):
        with pytest.raises(WorkflowCompilationError) as exc_info:
            compile_template('{"1": {"inputs": {"steps": "{{{steps}}}"}}}', {})
        assert exc_info.value.details["param"] == "steps"

    def test_invalid_json(self):
        with pytest.raises(WorkflowCompilationError):
            compile_template('{"1": {"inputs": ', {})

    def test_non_object_document(self):
        with pytest.raises(WorkflowCompilationError):
            compile_template("[1, 2, 3]", {})

    def test_unserializable_value(self):
        with pytest.raises(WorkflowCompilationError):
            compile_template('{"1": {"inputs": {"x": "{{{x}}}"}}}', {"x": object()})


class TestQuoteBareTokens:
    """Tests for the pre-parse token scanner."""

    def test_tokens_inside_strings_untouched(self):
        text = '{"a": "{{prompt}}"}'
        assert quote_bare_tokens(text) == text

    def test_escaped_quote_in_string(self):
        text = '{"a": "say \\"{{x}}\\"", "b": {{y}}}'
        assert quote_bare_tokens(text) == '{"a": "say \\"{{x}}\\"", "b": "{{{y}}}"}'
