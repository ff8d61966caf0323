"""Agent identifiers and name markers for the day prep agent service."""

AGENT_IDS = {
    "coordinator": "69864ca97a04453a977498b9",
    "calendar": "69864be4f823535a6d0c1816",
    "apollo": "69864bfce6006e489659fdfe",
    "linkedin": "69864c12cb7e55fd6b4f4c48",
    "web_research": "69864c29f823535a6d0c1819",
    "sports": "69864c3e8a54fe39adbfb71c",
    "connections": "69864c58812c228b6df02829",
    "email_composer": "69864c727a04453a977498b8",
}

# Sub-agent names as they appear in coordinator `sub_agent_results`
CALENDAR_AGENT_NAME = "Calendar Agent"
CALENDAR_AGENT_MARKER = "Calendar"
EMAIL_COMPOSER_AGENT_NAME = "Email Composer Agent"

DEFAULT_EMAIL_CONTENT = "Email preview generated successfully."
UNKNOWN_AGENT_ERROR = "Unknown error occurred"
