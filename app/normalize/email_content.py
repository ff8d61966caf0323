import json
from typing import Any

from app.agents.constants import DEFAULT_EMAIL_CONTENT, EMAIL_COMPOSER_AGENT_NAME
from app.normalize.probe import coerce_result, dig, sub_agent_results


def _text(value: Any) -> str:
    return value if isinstance(value, str) and value else ""


def extract_email_content(result: Any) -> str:
    """Pull the drafted prep email out of a coordinator result."""
    data = coerce_result(result)

    email_payload = dig(data, "final_output", "email")
    if email_payload is not None:
        return (
            _text(dig(email_payload, "response"))
            or _text(dig(email_payload, "data", "email_body"))
            or "Email generated by Email Composer Agent"
        )

    for entry in sub_agent_results(data):
        if entry.get("agent_name") != EMAIL_COMPOSER_AGENT_NAME:
            continue
        output = entry.get("output")
        if not output:
            break
        return (
            _text(dig(output, "response"))
            or _text(dig(output, "email_body"))
            or (output if isinstance(output, str) else json.dumps(output, indent=2))
        )

    return DEFAULT_EMAIL_CONTENT
