from .base import RecognitionAdapter
from .cloud_document import CloudDocumentAdapter
from .on_device import OnDeviceAdapter

__all__ = ["RecognitionAdapter", "CloudDocumentAdapter", "OnDeviceAdapter"]
