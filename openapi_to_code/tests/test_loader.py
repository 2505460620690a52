from pathlib import Path

import pytest

from openapi_to_code.pipeline.errors import UnsupportedDocumentError
from openapi_to_code.pipeline.loader import load_document, parse_document

DOCUMENTS_DIR = Path(__file__).parent / "test_data" / "documents"


def test_load_json_document():
    document = load_document(DOCUMENTS_DIR / "petstore.json")
    assert document["openapi"] == "3.0.3"
    assert "/pets" in document["paths"]


def test_load_yaml_document():
    document = load_document(DOCUMENTS_DIR / "petstore.yaml")
    assert document["components"]["schemas"]["Pet"]["required"] == ["name"]
    assert "200" in document["paths"]["/pets/{petId}"]["get"]["responses"]


def test_load_swagger_document():
    with pytest.raises(UnsupportedDocumentError, match="Swagger 2.0 documents are not supported"):
        load_document(DOCUMENTS_DIR / "swagger2.json")


def test_yaml_suffixes():
    text = "openapi: 3.1.0\npaths: {}\n"
    assert parse_document(text, ".yml") == {"openapi": "3.1.0", "paths": {}}
    assert parse_document(text, ".YAML")["openapi"] == "3.1.0"


@pytest.mark.parametrize(
    "text,message",
    [
        ("[]", "not an object"),
        ('{"paths": {}}', "Missing `openapi` version field"),
        ('{"openapi": "2.5", "paths": {}}', "Unsupported OpenAPI version 2.5"),
    ],
)
def test_rejected_documents(text, message):
    with pytest.raises(UnsupportedDocumentError, match=message):
        parse_document(text)
