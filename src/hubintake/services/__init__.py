"""Services layer for hub-intake.

Use case implementations:
- HubRegistry: Hub registration and listing
- SessionLifecycle: Intake session open/close
- ItemRegistrar: Item add / remove-last within the active session
- AggregationReporter: Paginated hub report over a time window
"""

from hubintake.services.hub_service import HubRegistry
from hubintake.services.item_service import ItemRegistrar
from hubintake.services.report_service import AggregationReporter
from hubintake.services.session_service import SessionLifecycle

__all__ = [
    "AggregationReporter",
    "HubRegistry",
    "ItemRegistrar",
    "SessionLifecycle",
]
