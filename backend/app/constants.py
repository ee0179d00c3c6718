"""Centralized constants shared by the assessment wizard and scoring engine.

This module is the SINGLE SOURCE OF TRUTH for startup types, option
catalogs and score tables. Reused by:
  - Assessment Wizard (step validation, option membership)
  - Scoring Engine (lookup tables)
  - Catalog route (frontend renders whatever is returned here)
"""

from __future__ import annotations

# ── Startup Types ────────────────────────────────────────────────────────
# Step 1. Drives the wording of every type-dependent catalog below.

STARTUP_TYPES: list[dict[str, str]] = [
    {"id": "technology", "name": "Technology-Based Startups"},
    {"id": "physical", "name": "Physical Product Startups"},
    {"id": "service", "name": "Service-Based Startups (Tech-enabled or not)"},
    {"id": "combination", "name": "A Combination Between Technology to a Physical Product"},
]

STARTUP_TYPE_IDS: frozenset[str] = frozenset(t["id"] for t in STARTUP_TYPES)

# Catalogs fall back to this type until step 1 is answered.
DEFAULT_STARTUP_TYPE: str = "technology"

# ── Validation thresholds ───────────────────────────────────────────────
# One threshold for every idea-description field (assessment + quick intake).
MIN_IDEA_LENGTH: int = 20
MIN_NAME_LENGTH: int = 2

# ── Type-dependent catalogs ─────────────────────────────────────────────
# Option ids are identical across types; only the wording changes.
# "combination" reuses the technology wording.

PROJECT_STAGES: dict[str, list[dict[str, str]]] = {
    "technology": [
        {"id": "just_idea", "name": "Just an idea"},
        {"id": "business_figured", "name": "I have figured the business oriented stuff, but not the tech yet."},
        {"id": "business_and_tech_planned", "name": "I figured the business side, and planned the tech, but have no development skills/knowledge."},
        {"id": "mvp_development", "name": "MVP in Development"},
        {"id": "launching_soon", "name": "Launching soon (next 90 days)"},
        {"id": "already_live", "name": "Already live in the app stores"},
        {"id": "other", "name": "Other"},
    ],
    "physical": [
        {"id": "just_idea", "name": "Just an idea"},
        {"id": "business_figured", "name": "I have figured the business oriented stuff, but haven't started on the product yet."},
        {"id": "business_and_tech_planned", "name": "I figured the business side, and planned the product, but didn't get started with a prototype."},
        {"id": "mvp_development", "name": "Prototype in Development"},
        {"id": "launching_soon", "name": "Launching soon (next 90 days)"},
        {"id": "already_live", "name": "Already available for purchase"},
        {"id": "other", "name": "Other"},
    ],
    "service": [
        {"id": "just_idea", "name": "Just an idea"},
        {"id": "business_figured", "name": "I have figured the business model, but haven't structured the service delivery yet."},
        {"id": "business_and_tech_planned", "name": "I figured the business side and service structure, but need to operationalize it."},
        {"id": "mvp_development", "name": "Service Pilot in Progress"},
        {"id": "launching_soon", "name": "Launching soon (next 90 days)"},
        {"id": "already_live", "name": "Already serving clients"},
        {"id": "other", "name": "Other"},
    ],
}

DIFFERENTIATION_OPTIONS: dict[str, list[dict[str, str]]] = {
    "technology": [
        {"id": "better", "name": "It's way better than what's out there"},
        {"id": "user_friendly", "name": "It's more user-friendly and beautifully designed"},
        {"id": "different_problem", "name": "It solves a totally different problem than competitors"},
        {"id": "working_on_it", "name": "I'm still working on figuring that out"},
        {"id": "mashup", "name": "It's a mash-up of existing products"},
        {"id": "other", "name": "Other"},
    ],
    "physical": [
        {"id": "better", "name": "It's way better quality than what's out there"},
        {"id": "user_friendly", "name": "It's more user-friendly and beautifully designed"},
        {"id": "different_problem", "name": "It solves a totally different problem than competitors"},
        {"id": "working_on_it", "name": "I'm still working on figuring that out"},
        {"id": "mashup", "name": "It combines features from existing products in a new way"},
        {"id": "other", "name": "Other"},
    ],
    "service": [
        {"id": "better", "name": "We deliver better results than what's available"},
        {"id": "user_friendly", "name": "Our service experience is more streamlined and customer-focused"},
        {"id": "different_problem", "name": "We address a totally different need than competitors"},
        {"id": "working_on_it", "name": "I'm still working on figuring that out"},
        {"id": "mashup", "name": "We combine multiple service offerings in a unique way"},
        {"id": "other", "name": "Other"},
    ],
}

EXISTING_MATERIALS: dict[str, list[dict[str, str]]] = {
    "technology": [
        {"id": "marketing_research", "name": "Marketing Research"},
        {"id": "business_plan", "name": "Business Plan"},
        {"id": "business_model", "name": "Business Model"},
        {"id": "financial_model", "name": "Financial Model & Projections"},
        {"id": "ui_ux", "name": "UI/UX"},
        {"id": "prd", "name": "Product Requirements Document (PRD)"},
        {"id": "mvp_prototype", "name": "MVP or Prototype"},
        {"id": "pitch_deck", "name": "One Pager and Pitch Deck"},
        {"id": "legal", "name": "Legal"},
    ],
    "physical": [
        {"id": "marketing_research", "name": "Market Research"},
        {"id": "business_plan", "name": "Business Plan"},
        {"id": "business_model", "name": "Business Model"},
        {"id": "financial_model", "name": "Unit Economics & Financial Projections"},
        {"id": "ui_ux", "name": "Product Design / CAD files"},
        {"id": "prd", "name": "Product Specifications Document"},
        {"id": "mvp_prototype", "name": "Physical Prototype"},
        {"id": "pitch_deck", "name": "One Pager and Pitch Deck"},
        {"id": "legal", "name": "Legal (patents, trademarks, etc.)"},
    ],
    "service": [
        {"id": "marketing_research", "name": "Market Research"},
        {"id": "business_plan", "name": "Business Plan"},
        {"id": "business_model", "name": "Business Model / Service Structure"},
        {"id": "financial_model", "name": "Pricing Model & Financial Projections"},
        {"id": "ui_ux", "name": "Service Blueprint / Customer Journey Map"},
        {"id": "prd", "name": "Service Operations Manual"},
        {"id": "mvp_prototype", "name": "Pilot Program Results"},
        {"id": "pitch_deck", "name": "One Pager and Pitch Deck"},
        {"id": "legal", "name": "Legal (contracts, terms of service)"},
    ],
}

BUSINESS_MODELS: dict[str, list[dict[str, str]]] = {
    "technology": [
        {"id": "recurring", "name": "Recurring revenue (subscription)"},
        {"id": "one_time", "name": "One time payment"},
        {"id": "white_label", "name": "White label"},
        {"id": "ad_based", "name": "Ad-based/Freemium"},
        {"id": "mix", "name": "A mix between them"},
        {"id": "other", "name": "Another strategy"},
    ],
    "physical": [
        {"id": "recurring", "name": "Subscription box / Recurring orders"},
        {"id": "one_time", "name": "One-time purchase"},
        {"id": "white_label", "name": "White label / B2B wholesale"},
        {"id": "ad_based", "name": "Direct-to-consumer with retail partnerships"},
        {"id": "mix", "name": "A mix of sales channels"},
        {"id": "other", "name": "Another strategy"},
    ],
    "service": [
        {"id": "recurring", "name": "Retainer / Recurring contracts"},
        {"id": "one_time", "name": "Project-based pricing"},
        {"id": "white_label", "name": "White label / Partner reseller"},
        {"id": "ad_based", "name": "Commission-based / Performance fees"},
        {"id": "mix", "name": "Hybrid pricing model"},
        {"id": "other", "name": "Another strategy"},
    ],
}

BUILD_STRATEGIES: dict[str, list[dict[str, str]]] = {
    "technology": [
        {"id": "outsource", "name": "I'll outsource it and manage the process"},
        {"id": "cofounder", "name": "I'm working with a technical cofounder"},
        {"id": "no_code", "name": "I plan to use a no-code tool myself"},
        {"id": "need_find", "name": "I need to find someone to build it"},
        {"id": "have_team", "name": "I already have a dev team or agency in mind"},
        {"id": "other", "name": "Other"},
    ],
    "physical": [
        {"id": "outsource", "name": "I'll work with manufacturers and manage production"},
        {"id": "cofounder", "name": "I'm working with a product development partner"},
        {"id": "no_code", "name": "I plan to start with small-batch production myself"},
        {"id": "need_find", "name": "I need to find a manufacturer or production partner"},
        {"id": "have_team", "name": "I already have a manufacturer or supplier in mind"},
        {"id": "other", "name": "Other"},
    ],
    "service": [
        {"id": "outsource", "name": "I'll hire contractors and manage service delivery"},
        {"id": "cofounder", "name": "I'm working with operational partners"},
        {"id": "no_code", "name": "I plan to deliver the service myself initially"},
        {"id": "need_find", "name": "I need to find service delivery partners or team members"},
        {"id": "have_team", "name": "I already have a team or partners in mind"},
        {"id": "other", "name": "Other"},
    ],
}

HELP_NEEDED_AREAS: dict[str, list[dict[str, str]]] = {
    "technology": [
        {"id": "business_materials", "name": "Solving/creating business related questions or materials"},
        {"id": "design_build", "name": "Designing and building from scratch"},
        {"id": "figma_dev", "name": "Developing my existing Figma Design"},
        {"id": "code_takeover", "name": "Need a new developer (Code Takeover)"},
        {"id": "marketing", "name": "Getting users and Marketing my existing app"},
        {"id": "fundraising", "name": "Fundraising for my first round"},
        {"id": "other", "name": "Other"},
    ],
    "physical": [
        {"id": "business_materials", "name": "Business planning and go-to-market strategy"},
        {"id": "design_build", "name": "Product design and prototype development"},
        {"id": "figma_dev", "name": "Manufacturing and supply chain setup"},
        {"id": "code_takeover", "name": "Quality control and production scaling"},
        {"id": "marketing", "name": "Marketing and customer acquisition"},
        {"id": "fundraising", "name": "Fundraising for my first round"},
        {"id": "other", "name": "Other"},
    ],
    "service": [
        {"id": "business_materials", "name": "Business model and service structure"},
        {"id": "design_build", "name": "Service design and customer experience"},
        {"id": "figma_dev", "name": "Operations and delivery process setup"},
        {"id": "code_takeover", "name": "Team building and hiring"},
        {"id": "marketing", "name": "Client acquisition and marketing"},
        {"id": "fundraising", "name": "Fundraising for my first round"},
        {"id": "other", "name": "Other"},
    ],
}

# ── Type-independent catalogs ───────────────────────────────────────────

USER_PERSONA_OPTIONS: list[dict[str, str]] = [
    {"id": "assumptions", "name": "I've written down assumptions but haven't validated yet"},
    {"id": "think_know", "name": "I think I know, but haven't talked to users"},
    {"id": "i_am_user", "name": "I am the user — I built this to solve my own problem"},
    {"id": "validated", "name": "I've done surveys and know their pain deeply"},
    {"id": "other", "name": "Other"},
]

REVENUE_GOALS: list[dict[str, str]] = [
    {"id": "0-1k", "name": "$0–$1K"},
    {"id": "1k-5k", "name": "$1K–$5K"},
    {"id": "5k-25k", "name": "$5K–$25K"},
    {"id": "25k+", "name": "$25K+"},
    {"id": "already_creating", "name": "I am already creating revenue"},
]

INVESTMENT_LEVELS: list[dict[str, str]] = [
    {
        "id": "under_2k",
        "name": "Less than $2,000",
        "note": "Best to start with outside resources before working with us, and peruse a Bootstrap.",
    },
    {
        "id": "3k-5k",
        "name": "$3,000 - $5,000",
        "note": "Entry point for Founders looking to start with StartWise 90 Days Investor Ready Program and are looking only for materials refinement & connections",
    },
    {
        "id": "8k-15k",
        "name": "$8,000 - $15,000",
        "note": "Minimum entry point for Founders who needs significant business oriented support",
    },
    {
        "id": "20k-40k",
        "name": "$20,000 - $40,000",
        "note": "Common entry point for serious Founders looking to start MVP development",
    },
    {
        "id": "50k-90k",
        "name": "$50,000 - $90,000",
        "note": "Founders who are looking to both launch and scale users rapidly",
    },
    {
        "id": "100k+",
        "name": "$100k+",
        "note": "Full business suit & unlocks our highest level of partnership and access to exclusive opportunities",
    },
]

# Field name -> catalog. Dict values are keyed by startup type.
TYPED_CATALOGS: dict[str, dict[str, list[dict[str, str]]]] = {
    "project_stage": PROJECT_STAGES,
    "differentiation": DIFFERENTIATION_OPTIONS,
    "existing_materials": EXISTING_MATERIALS,
    "business_model": BUSINESS_MODELS,
    "build_strategy": BUILD_STRATEGIES,
    "help_needed": HELP_NEEDED_AREAS,
}

SHARED_CATALOGS: dict[str, list[dict[str, str]]] = {
    "startup_type": STARTUP_TYPES,
    "user_persona": USER_PERSONA_OPTIONS,
    "revenue_goal": REVENUE_GOALS,
    "investment_readiness": INVESTMENT_LEVELS,
}

MULTI_SELECT_FIELDS: frozenset[str] = frozenset({"existing_materials", "help_needed"})

# Option id that unlocks the optional freetext companion field.
FREETEXT_FIELDS: dict[str, tuple[str, str]] = {
    "project_stage": ("other", "project_stage_other"),
    "user_persona": ("other", "user_persona_other"),
    "differentiation": ("other", "differentiation_other"),
    "revenue_goal": ("already_creating", "current_revenue"),
    "build_strategy": ("other", "build_strategy_other"),
    "help_needed": ("other", "help_needed_other"),
}

# ── Score tables ────────────────────────────────────────────────────────
# Column maxima sum to exactly 100.0. Ids absent from a table score 0.

USER_PERSONA_POINTS: dict[str, float] = {
    "assumptions": 0.0,
    "think_know": 2.0,
    "i_am_user": 5.0,
    "validated": 10.0,
}

DIFFERENTIATION_POINTS: dict[str, float] = {
    "better": 4.0,
    "user_friendly": 7.0,
    "different_problem": 10.0,
    "working_on_it": 0.0,
    "mashup": 5.0,
}

PROJECT_STAGE_POINTS: dict[str, float] = {
    "just_idea": 2.0,
    "business_figured": 4.0,
    "business_and_tech_planned": 5.0,
    "mvp_development": 6.0,
    "launching_soon": 7.0,
    "already_live": 8.0,
}

BUSINESS_MODEL_POINTS: dict[str, float] = {
    "recurring": 6.4,
    "one_time": 4.8,
    "white_label": 5.6,
    "ad_based": 4.0,
    "mix": 6.0,
    "other": 3.0,
}

REVENUE_GOAL_POINTS: dict[str, float] = {
    "0-1k": 2.0,
    "1k-5k": 4.0,
    "5k-25k": 5.5,
    "25k+": 6.4,
}

BUILD_STRATEGY_POINTS: dict[str, float] = {
    "outsource": 5.5,
    "cofounder": 6.4,
    "no_code": 4.0,
    "need_find": 2.0,
    "have_team": 6.4,
}

INVESTMENT_READINESS_POINTS: dict[str, float] = {
    "under_2k": 2.0,
    "3k-5k": 5.0,
    "8k-15k": 8.0,
    "20k-40k": 11.0,
    "50k-90k": 13.0,
    "100k+": 14.4,
}

APP_IDEA_MAX_POINTS: float = 4.0
APP_IDEA_SATURATION_CHARS: int = 50

MATERIALS_MAX_POINTS: float = 28.0
MATERIALS_SATURATION_COUNT: int = 9

HELP_NEEDED_MAX_POINTS: float = 6.4
HELP_NEEDED_PENALTY_PER_AREA: float = 1.0
