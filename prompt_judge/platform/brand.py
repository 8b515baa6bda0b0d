"""Centralized brand configuration for user-facing copy."""

BRAND_NAME = "Prompt Judge"
BRAND_SERVICE_ID = "prompt-judge-api"
BRAND_APP_DESCRIPTION = "AI prompt analysis, community templates and prompt-writing challenges"
