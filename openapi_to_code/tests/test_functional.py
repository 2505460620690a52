"""
Functional tests for the generation pipeline.

Each test case in test_data/functional/*_tests.json gives an OpenAPI document
(inline or as a file under test_data/), an optional config, and patterns that
must (or must not) appear in the generated TypeScript.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from openapi_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator

TEST_DATA_DIR = Path(__file__).parent / "test_data"


def load_all_test_cases():
    """Load all test cases from all JSON files in test_data/functional directory."""
    test_cases = []

    for json_file in sorted((TEST_DATA_DIR / "functional").glob("*_tests.json")):
        with open(json_file) as f:
            data = json.load(f)

        for test_case in data:
            test_case["_source_file"] = json_file.name
            test_cases.append(test_case)

    return test_cases


def _load_spec(test_case):
    """Load the document from the test case (either inline or from file)."""
    if "spec" in test_case:
        return test_case["spec"]
    elif "spec_file" in test_case:
        with open(TEST_DATA_DIR / test_case["spec_file"]) as f:
            return json.load(f)
    else:
        raise ValueError("Test case must have either 'spec' or 'spec_file'")


def _generate_code(spec, config_dict):
    config = CodeGeneratorConfig.from_dict(config_dict or {})
    return PipelineGenerator(spec, config).generate()


@pytest.mark.parametrize("test_case", load_all_test_cases(), ids=lambda tc: tc["name"])
def test_functional_generation(test_case):
    """Unified test for all JSON test cases using a single pattern."""
    spec = _load_spec(test_case)
    generated_code = _generate_code(spec, test_case.get("config"))

    for pattern in test_case.get("expected_contains", []):
        assert pattern in generated_code, f"Expected pattern {pattern!r} not found in output"

    for pattern in test_case.get("expected_not_contains", []):
        assert pattern not in generated_code, f"Unexpected pattern {pattern!r} found in output"


@pytest.mark.parametrize("test_case", load_all_test_cases(), ids=lambda tc: tc["name"])
def test_generation_is_deterministic(test_case):
    spec = _load_spec(test_case)
    config = test_case.get("config")
    assert _generate_code(spec, config) == _generate_code(spec, config)


if __name__ == "__main__":
    pytest.main([__file__])
