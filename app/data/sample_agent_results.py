from app.agents.constants import AGENT_IDS


SAMPLE_MEETINGS = [
    {
        "meeting_title": "Acme Capital × Northwind: Platform Demo",
        "meeting_time": "09:30 AM",
        "duration_minutes": 45,
        "attendees": ["rep@company.com", "a.rivera@acmecap.com", "j.chen@acmecap.com"],
        "external_participants": [
            {"email": "a.rivera@acmecap.com", "name": "A. Rivera"},
            {"email": "j.chen@acmecap.com", "name": "Jordan Chen"},
        ],
    },
    {
        "meeting_title": "GridFlow Renewal Check-in",
        "meeting_time": "02:00 PM",
        "duration_minutes": 30,
        "attendees": ["rep@company.com", "sam@gridflow.io"],
        "external_participants": [
            {"email": "sam@gridflow.io", "name": "Sam Okafor"},
        ],
    },
]

SAMPLE_APOLLO = {
    "enriched_contacts": [
        {
            "email": "a.rivera@acmecap.com",
            "name": "A. Rivera",
            "title": "Partner",
            "seniority": "partner",
            "company": {
                "name": "Acme Capital",
                "industry": "Venture Capital",
                "size": "51-200",
                "funding_stage": "Fund IV",
                "technologies": ["Salesforce", "Carta"],
            },
        },
        {
            "email": "sam@gridflow.io",
            "name": "Sam Okafor",
            "title": "VP Operations",
            "seniority": "vp",
            "company": {
                "name": "GridFlow",
                "industry": "Energy",
                "size": "201-500",
                "funding_stage": "Series B",
                "technologies": ["AWS", "Snowflake"],
            },
        },
    ],
    "total_enriched": 2,
    "enrichment_rate": "67%",
}

SAMPLE_LINKEDIN = {
    "linkedin_profiles": [
        {
            "name": "A. Rivera",
            "email": "a.rivera@acmecap.com",
            "profile_url": "https://www.linkedin.com/in/arivera",
            "recent_posts": ["Why grid storage is the next decade's infrastructure play"],
            "recent_announcements": ["Acme closes $250M Fund IV"],
            "hobbies": ["cycling"],
            "languages": ["English", "Spanish"],
            "education": [{"school": "University of Michigan", "degree": "MBA", "year": "2011"}],
            "location": "New York, NY",
            "mutual_connections": ["Dana Whitfield"],
            "previous_companies": ["Goldman Sachs", "Sequoia"],
        },
        {
            "name": "Jordan Chen",
            "profile_url": "https://www.linkedin.com/in/jordanchen",
            "recent_posts": [],
            "location": "Boston, MA",
            "previous_companies": ["Bain & Company"],
        },
    ],
    "total_profiles_researched": "2",
}

SAMPLE_NEWS = {
    "research_findings": [
        {
            "email": "a.rivera@acmecap.com",
            "name": "A. Rivera",
            "headline": "Acme closes $250M Fund IV focused on decarbonization",
            "url": "https://example.com/acme-fund-iv",
        },
        {
            "email": "sam@gridflow.io",
            "name": "Sam Okafor",
            "headline": "GridFlow announces Series B led by Acme",
            "url": "https://example.com/gridflow-b",
        },
    ],
    "total_news_items": "2",
}

SAMPLE_SPORTS = {
    "sports_intel": [
        {
            "email": "a.rivera@acmecap.com",
            "person_name": "A. Rivera",
            "hometown": "Ann Arbor, MI",
            "college": "University of Michigan",
            "professional_teams": [
                {
                    "team_name": "Detroit Lions",
                    "league": "NFL",
                    "recent_results": [{"date": "2026-02-01", "opponent": "Packers", "score": "27-20", "result": "W"}],
                    "current_record": "12-5",
                }
            ],
            "college_teams": [{"team_name": "Michigan Wolverines", "sport": "Football", "recent_results": []}],
            "conversation_starters": ["Lions closing out the season strong"],
        }
    ],
    "total_teams_tracked": "2",
}

SAMPLE_CONNECTIONS = {
    "connection_analysis": [
        {
            "prospect_email": "a.rivera@acmecap.com",
            "prospect_name": "A. Rivera",
            "mutual_connections": [
                {
                    "name": "Dana Whitfield",
                    "title": "Principal",
                    "company": "Northwind",
                    "relationship_to_rep": "former manager",
                    "relationship_to_prospect": "co-investor",
                }
            ],
            "overlapping_companies": [],
            "shared_education": [
                {"institution": "University of Michigan", "rep_details": "BA 2009", "prospect_details": "MBA 2011"}
            ],
            "connection_strength": "strong",
            "recommended_approach": "Open with the Michigan connection, then ask about Fund IV priorities.",
        }
    ],
    "total_mutual_connections": 1,
}

SAMPLE_EMAIL = {
    "response": "Good morning! You have 2 external meetings today: Acme Capital at 9:30 AM and GridFlow at 2:00 PM.",
}

SAMPLE_COORDINATOR_RESULT = {
    "final_output": {
        "calendar": {
            "meetings": SAMPLE_MEETINGS,
            "total_meetings": "2",
            "total_external_participants": "3",
        },
        "apollo": SAMPLE_APOLLO,
        "linkedin": SAMPLE_LINKEDIN,
        "news": SAMPLE_NEWS,
        "sports": SAMPLE_SPORTS,
        "connections": SAMPLE_CONNECTIONS,
        "email": SAMPLE_EMAIL,
    },
    "sub_agent_results": [],
}


def _ok(result) -> dict:
    return {"success": True, "response": {"status": "success", "result": result}}


def sample_responses() -> dict:
    """Canned envelopes keyed by agent id, as returned by the stub gateway."""
    return {
        AGENT_IDS["coordinator"]: _ok(SAMPLE_COORDINATOR_RESULT),
        AGENT_IDS["calendar"]: _ok({"meetings": SAMPLE_MEETINGS}),
        AGENT_IDS["linkedin"]: _ok({
            "linkedin_profiles": [
                {"name": "Rep", "profile_url": "https://www.linkedin.com/in/rep", "previous_companies": ["Oracle", "HubSpot"]}
            ]
        }),
    }
