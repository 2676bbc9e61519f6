"""Shared constants for Temporal workflows."""

# Fixed id; a second run cannot start while one is in flight
RELATIONSHIP_DETECTION_WORKFLOW_ID = "relationship-detection"

# Timeouts
DEFAULT_WORKFLOW_TIMEOUT_SECONDS = 3600  # 1 hour
DETECTION_ACTIVITY_TIMEOUT_SECONDS = 1800  # 30 minutes
