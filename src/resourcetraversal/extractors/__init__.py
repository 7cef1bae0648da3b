from .generic import extract_generic, extract_raw_text
from .registry import EXTRACTORS, get_extractor
from .services import SERVICE_PATTERNS, Service, detect_service

__all__ = [
    "EXTRACTORS",
    "SERVICE_PATTERNS",
    "Service",
    "detect_service",
    "extract_generic",
    "extract_raw_text",
    "get_extractor",
]
