from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from contracts.recognition import Page, RecognitionFlavor, RecognitionPayloadError

from .adapters.base import RecognitionAdapter
from .adapters.cloud_document import CloudDocumentAdapter
from .adapters.on_device import OnDeviceAdapter


class _CanonicalAdapter(RecognitionAdapter):
    flavor = RecognitionFlavor.CANONICAL

    def to_page(self, payload: Any) -> Page:
        return Page.from_dict(payload)


def _get_adapter(flavor: RecognitionFlavor) -> RecognitionAdapter:
    if flavor == RecognitionFlavor.CANONICAL:
        return _CanonicalAdapter()
    if flavor == RecognitionFlavor.ON_DEVICE:
        return OnDeviceAdapter()
    if flavor == RecognitionFlavor.CLOUD_DOCUMENT:
        return CloudDocumentAdapter()
    raise ValueError(f"Unsupported recognition flavor: {flavor}")


def load_page(payload: Any, flavor: RecognitionFlavor | str = RecognitionFlavor.CANONICAL) -> Page:
    """
    Normalize a recognition payload into a Page.

    Raises RecognitionPayloadError when the payload does not have the shape
    of the requested flavor.
    """

    return _get_adapter(RecognitionFlavor(flavor)).to_page(payload)


def load_page_file(path: Path, flavor: RecognitionFlavor | str = RecognitionFlavor.CANONICAL) -> Page:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise RecognitionPayloadError(f"Not a JSON document: {path}") from e
    return load_page(payload, flavor)
