import json

from app.normalize.email_content import extract_email_content


def test_final_output_response():
    result = {"final_output": {"email": {"response": "Morning! Two meetings today."}}}
    assert extract_email_content(result) == "Morning! Two meetings today."


def test_final_output_email_body():
    result = {"final_output": {"email": {"data": {"email_body": "Body text"}}}}
    assert extract_email_content(result) == "Body text"


def test_final_output_email_without_text():
    result = {"final_output": {"email": {"suggestions": []}}}
    assert extract_email_content(result) == "Email generated by Email Composer Agent"


def test_composer_sub_agent_response():
    result = {"sub_agent_results": [
        {"agent_name": "Calendar Agent", "output": {"response": "not this"}},
        {"agent_name": "Email Composer Agent", "output": {"response": "Composer says hi"}},
    ]}
    assert extract_email_content(result) == "Composer says hi"


def test_composer_sub_agent_email_body():
    result = {"sub_agent_results": [{"agent_name": "Email Composer Agent", "output": {"email_body": "Body"}}]}
    assert extract_email_content(result) == "Body"


def test_composer_sub_agent_other_output_is_pretty_printed():
    output = {"subject": "Prep", "sections": ["a", "b"]}
    result = {"sub_agent_results": [{"agent_name": "Email Composer Agent", "output": output}]}
    assert extract_email_content(result) == json.dumps(output, indent=2)


def test_default_when_nothing_found():
    assert extract_email_content({}) == "Email preview generated successfully."
    assert extract_email_content(None) == "Email preview generated successfully."
    assert extract_email_content({"sub_agent_results": [{"agent_name": "Email Composer Agent"}]}) == (
        "Email preview generated successfully."
    )
