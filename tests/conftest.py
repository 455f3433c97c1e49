import base64
import json
from collections.abc import AsyncIterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from cardsmith.api.dependencies import get_store
from cardsmith.main import app
from cardsmith.storage.key_value import MemoryStore

# Not a decodable image; the pipeline never looks inside payloads
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(64))
JPEG_BYTES = b"\xff\xd8\xff\xe0" + bytes(range(200, 256))


def data_uri(mime_type: str, payload: bytes) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(payload).decode('ascii')}"


@pytest.fixture
def png_data_uri() -> str:
    """Embedded PNG card art."""
    return data_uri("image/png", PNG_BYTES)


@pytest.fixture
def jpeg_data_uri() -> str:
    """Embedded JPEG poster frame."""
    return data_uri("image/jpeg", JPEG_BYTES)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def jpeg_bytes() -> bytes:
    return JPEG_BYTES


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def sample_project(png_data_uri: str) -> dict[str, Any]:
    """A saved project document as decoded from disk."""
    return {
        "meta": {
            "name": "Dragons",
            "createdAt": "2025-01-01T00:00:00.000Z",
            "updatedAt": "2025-01-02T00:00:00.000Z",
            "version": 2,
        },
        "sets": [{"id": "set_1", "name": "Base Set", "color": "#aa3300"}],
        "blueprints": [
            {
                "id": "bp_1",
                "name": "Classic",
                "size": {"w": 300, "h": 420},
                "elements": [
                    {
                        "id": "el_1",
                        "type": "text",
                        "name": "Title",
                        "x": 10,
                        "y": 12,
                        "w": 280,
                        "h": 40,
                        "rotation": 0,
                        "visible": True,
                        "zIndex": 1,
                        "text": "{{name}}",
                        "bindingKey": "name",
                    }
                ],
            }
        ],
        "items": [
            {
                "id": "item_1",
                "name": "Goblin",
                "setId": "set_1",
                "blueprintId": "bp_1",
                "data": {"attack": 2, "defense": 1},
                "quantity": 3,
            }
        ],
        "dataTables": [
            {
                "id": "tbl_1",
                "name": "Cards",
                "columns": ["name", "attack", "defense"],
                "rows": [
                    {
                        "id": "row_1",
                        "data": {"name": {"en": "Dragon", "ar": "تنين"}, "attack": "5"},
                        "art": {"kind": "image", "src": png_data_uri},
                    },
                    {
                        "id": "row_2",
                        "data": {"name": "Knight", "templateKey": "classic", "defense": 4},
                    },
                ],
                "imageBinding": {
                    "column": "art",
                    "imagesFolder": "",
                    "placeholder": "",
                    "copyToAssets": True,
                },
            }
        ],
        "assets": {"images": []},
    }


@pytest.fixture
def sample_project_text(sample_project: dict[str, Any]) -> str:
    return json.dumps(sample_project)


@pytest.fixture
async def client(memory_store: MemoryStore) -> AsyncIterator[AsyncClient]:
    """Async test client whose recents live in memory."""
    app.dependency_overrides[get_store] = lambda: memory_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
