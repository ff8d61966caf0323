import json

from pydantic import BaseModel

from app.data.sample_agent_results import SAMPLE_COORDINATOR_RESULT
from app.enrichment.aggregator import (
    ENRICHMENT_SOURCES,
    EnrichmentSource,
    aggregate_participants,
    identity_key,
    merge_record,
    source_records,
)
from app.enrichment.models import ApolloContact, EnrichedParticipant


def _source(name: str):
    return next(s for s in ENRICHMENT_SOURCES if s.name == name)


APOLLO_RIVERA = {
    "email": "a.rivera@acmecap.com",
    "name": "A. Rivera",
    "title": "Partner",
    "company": {"name": "Acme Capital", "industry": "Venture Capital"},
}


class TestIdentityKey:
    """Identity key selection per source."""

    def test_email_preferred(self):
        record = {"email": "x@acme.com", "profile_url": "https://linkedin.com/in/x"}
        assert identity_key(record, _source("linkedin")) == "x@acme.com"

    def test_alternate_email_fields(self):
        assert identity_key({"prospect_email": "p@acme.com"}, _source("connections")) == "p@acme.com"
        assert identity_key({"person_email": "s@acme.com"}, _source("sports")) == "s@acme.com"

    def test_profile_url_only_for_profile_source(self):
        record = {"name": "No Email", "profile_url": "https://linkedin.com/in/noemail"}
        assert identity_key(record, _source("linkedin")) == "https://linkedin.com/in/noemail"
        assert identity_key(record, _source("apollo")) is None

    def test_blank_email_ignored(self):
        assert identity_key({"email": "   "}, _source("apollo")) is None


class TestMergeRecord:
    """The per-record reducer."""

    def test_creates_sparse_record(self):
        participants = merge_record({}, _source("apollo"), APOLLO_RIVERA)

        rivera = participants["a.rivera@acmecap.com"]
        assert rivera.name == "A. Rivera"
        assert rivera.apollo_data.title == "Partner"
        assert rivera.apollo_data.company.name == "Acme Capital"
        assert rivera.professional_profile is None

    def test_does_not_mutate_input_map(self):
        original = {}
        merged = merge_record(original, _source("apollo"), APOLLO_RIVERA)
        assert original == {}
        assert "a.rivera@acmecap.com" in merged

    def test_later_source_keeps_earlier_fields(self):
        """Test that merging is additive across sources."""
        participants = merge_record({}, _source("apollo"), APOLLO_RIVERA)
        participants = merge_record(participants, _source("sports"), {
            "email": "a.rivera@acmecap.com",
            "person_name": "Alex Rivera",
            "college": "University of Michigan",
        })

        rivera = participants["a.rivera@acmecap.com"]
        assert rivera.apollo_data.title == "Partner"
        assert rivera.sports_intel.college == "University of Michigan"
        assert rivera.name == "A. Rivera"

    def test_news_findings_accumulate(self):
        source = _source("news")
        participants = merge_record({}, source, {"email": "n@acme.com", "headline": "one"})
        participants = merge_record(participants, source, {"email": "n@acme.com", "headline": "two"})

        assert [item["headline"] for item in participants["n@acme.com"].news_items] == ["one", "two"]

    def test_record_without_identity_is_skipped(self):
        assert merge_record({}, _source("sports"), {"person_name": "Nameless"}) == {}

    def test_string_company_becomes_company_name(self):
        participants = merge_record({}, _source("apollo"), {"email": "y@acme.com", "company": "Acme Inc"})

        assert participants["y@acme.com"].apollo_data.company.name == "Acme Inc"

    def test_numeric_company_size_is_kept_as_text(self):
        record = {"email": "x@acme.com", "company": {"name": "Acme", "size": 250, "technologies": "Salesforce"}}

        company = merge_record({}, _source("apollo"), record)["x@acme.com"].apollo_data.company

        assert company.size == "250"
        assert company.technologies == ["Salesforce"]

    def test_numeric_education_year_keeps_profile(self):
        record = {
            "name": "Dana",
            "profile_url": "https://linkedin.com/in/dana",
            "education": [{"school": "MIT", "year": 2011}, "Stanford"],
            "previous_companies": None,
        }

        participants = merge_record({}, _source("linkedin"), record)

        profile = participants["https://linkedin.com/in/dana"].professional_profile
        assert profile.education[0].year == "2011"
        assert len(profile.education) == 1
        assert profile.previous_companies == []

    def test_invalid_record_keeps_participant(self):
        """Test that data a source model rejects still leaves a sparse participant."""
        class StrictRecord(BaseModel):
            score: int

        source = EnrichmentSource("strict", ("strict",), "items", "Strict", "apollo_data", StrictRecord)

        participants = merge_record({}, source, {"email": "z@acme.com", "name": "Zed", "score": "high"})

        assert participants["z@acme.com"].name == "Zed"
        assert participants["z@acme.com"].apollo_data is None

    def test_invalid_record_keeps_earlier_data(self):
        class StrictRecord(BaseModel):
            score: int

        source = EnrichmentSource("strict", ("strict",), "items", "Strict", "apollo_data", StrictRecord)
        participants = merge_record({}, _source("apollo"), APOLLO_RIVERA)

        merged = merge_record(participants, source, {"email": "a.rivera@acmecap.com", "score": "high"})

        assert merged["a.rivera@acmecap.com"].apollo_data.title == "Partner"

    def test_fills_missing_name(self):
        participants = {"q@acme.com": EnrichedParticipant(email="q@acme.com")}
        merged = merge_record(participants, _source("apollo"), {"email": "q@acme.com", "name": "Quinn"})
        assert merged["q@acme.com"].name == "Quinn"


class TestSourceRecords:
    """Locating each source's records."""

    def test_final_output_payload(self):
        result = {"final_output": {"apollo": {"enriched_contacts": [APOLLO_RIVERA, "junk"]}}}
        assert source_records(result, _source("apollo")) == [APOLLO_RIVERA]

    def test_web_research_alias(self):
        result = {"final_output": {"web_research": {"research_findings": [{"email": "w@acme.com"}]}}}
        assert source_records(result, _source("news")) == [{"email": "w@acme.com"}]

    def test_sub_agent_fallback(self):
        result = {
            "sub_agent_results": [
                {"agent_name": "Apollo Enrichment Agent", "output": {"enriched_contacts": [APOLLO_RIVERA]}},
            ]
        }
        assert source_records(result, _source("apollo")) == [APOLLO_RIVERA]

    def test_sub_agent_result_field_as_json_string(self):
        result = {
            "sub_agent_results": [
                {"agent_name": "Sports Intelligence Agent", "output": None,
                 "result": json.dumps({"sports_intel": [{"email": "s@acme.com"}]})},
            ]
        }
        assert source_records(result, _source("sports")) == [{"email": "s@acme.com"}]

    def test_missing_payload(self):
        assert source_records({}, _source("connections")) == []
        assert source_records({"final_output": {"connections": {"connection_analysis": "none"}}}, _source("connections")) == []


class TestAggregateParticipants:
    """Whole-result aggregation."""

    def test_two_sources_same_email_merge(self):
        """Test that two sources for one email produce a single record with both fields."""
        result = {
            "final_output": {
                "apollo": {"enriched_contacts": [APOLLO_RIVERA]},
                "connections": {"connection_analysis": [{
                    "prospect_email": "a.rivera@acmecap.com",
                    "prospect_name": "A. Rivera",
                    "connection_strength": "strong",
                }]},
            }
        }

        participants = aggregate_participants(result)

        assert list(participants) == ["a.rivera@acmecap.com"]
        rivera = participants["a.rivera@acmecap.com"]
        assert isinstance(rivera.apollo_data, ApolloContact)
        assert rivera.connection_analysis.connection_strength == "strong"
        assert rivera.sources() == ["apollo_data", "connection_analysis"]

    def test_profile_url_key_does_not_collide(self):
        """Test that a URL-keyed profile stays separate from the email-keyed record."""
        result = {
            "final_output": {
                "apollo": {"enriched_contacts": [{"email": "j.chen@acmecap.com", "name": "Jordan Chen"}]},
                "linkedin": {"linkedin_profiles": [{
                    "name": "Jordan Chen",
                    "profile_url": "https://www.linkedin.com/in/jordanchen",
                }]},
            }
        }

        participants = aggregate_participants(result)

        assert set(participants) == {"j.chen@acmecap.com", "https://www.linkedin.com/in/jordanchen"}
        assert participants["j.chen@acmecap.com"].professional_profile is None
        assert participants["j.chen@acmecap.com"].apollo_data is not None
        by_url = participants["https://www.linkedin.com/in/jordanchen"]
        assert by_url.apollo_data is None
        assert by_url.professional_profile.name == "Jordan Chen"

    def test_deterministic_order(self):
        first = aggregate_participants(SAMPLE_COORDINATOR_RESULT)
        second = aggregate_participants(json.dumps(SAMPLE_COORDINATOR_RESULT))

        assert list(first) == list(second)
        assert {k: v.model_dump() for k, v in first.items()} == {k: v.model_dump() for k, v in second.items()}

    def test_sample_result(self):
        participants = aggregate_participants(SAMPLE_COORDINATOR_RESULT)
        rivera = participants["a.rivera@acmecap.com"]

        assert rivera.sources() == ["apollo_data", "professional_profile", "news_items", "sports_intel", "connection_analysis"]
        assert "https://www.linkedin.com/in/jordanchen" in participants
        assert participants["sam@gridflow.io"].sources() == ["apollo_data", "news_items"]

    def test_source_filter(self):
        participants = aggregate_participants(SAMPLE_COORDINATOR_RESULT, sources=["sports"])

        assert list(participants) == ["a.rivera@acmecap.com"]
        assert participants["a.rivera@acmecap.com"].sources() == ["sports_intel"]

    def test_no_sources_enabled(self):
        assert aggregate_participants(SAMPLE_COORDINATOR_RESULT, sources=[]) == {}

    def test_unexpected_shapes_never_raise(self):
        for result in [None, 42, "text", [], {"final_output": "x"}, {"sub_agent_results": [None, 1]}]:
            assert aggregate_participants(result) == {}

    def test_differently_typed_fields_keep_every_participant(self):
        """Test that numeric or flattened fields never cost a participant."""
        result = {
            "final_output": {
                "apollo": {"enriched_contacts": [
                    {"email": "x@acme.com", "company": {"name": "Acme", "size": 250}},
                    {"email": "y@acme.com", "company": "Acme Inc"},
                ]},
                "linkedin": {"linkedin_profiles": [{
                    "name": "Dana",
                    "profile_url": "https://linkedin.com/in/dana",
                    "education": [{"school": "MIT", "year": 2011}],
                }]},
            }
        }

        participants = aggregate_participants(result)

        assert set(participants) == {"x@acme.com", "y@acme.com", "https://linkedin.com/in/dana"}
