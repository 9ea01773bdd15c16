"""
Lookup pipeline package:
- sanitizer: input validation and normalization
- transport: chat-completion call with retry/backoff
- extractor: JSON location and field validation in model replies
- service: high-level orchestrator mapping failures to the error taxonomy
"""

from carbwise.pipeline.models import FoodItem, LookupResult
from carbwise.pipeline.service import LookupService
from carbwise.prompts import LookupMode

__all__ = ["FoodItem", "LookupMode", "LookupResult", "LookupService"]
