from pathlib import Path

import pytest
import yaml

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def petstore():
    return yaml.safe_load((FIXTURES / "petstore.yaml").read_text(encoding="utf-8"))


@pytest.fixture
def pet_document():
    return {
        "openapi": "3.0.0",
        "info": {"title": "Pets", "version": "1"},
        "paths": {
            "/pets/{id}": {
                "get": {
                    "operationId": "getPet",
                    "parameters": [
                        {"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}
                    ],
                    "responses": {
                        "200": {
                            "description": "ok",
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/Pet"}
                                }
                            },
                        }
                    },
                }
            }
        },
        "components": {
            "schemas": {
                "Pet": {
                    "type": "object",
                    "required": ["name"],
                    "properties": {"name": {"type": "string"}, "tag": {"type": "string"}},
                }
            }
        },
    }


@pytest.fixture
def make_document():
    def build(schemas=None, paths=None):
        """Minimal valid document around the given components and paths."""
        return {
            "openapi": "3.0.0",
            "info": {"title": "Test", "version": "1.0"},
            "paths": paths or {},
            "components": {"schemas": schemas or {}},
        }

    return build
