"""
P4P MIS Backend — Collection Names & Record Schemas
=====================================================

What:  Names of the MongoDB collections the API reads, and the declarative
       coercion schemas applied to records from them.
How:   Routes and services refer to `Collections.*` instead of string literals;
       coercion schemas are tuples of FieldSpec consumed by `apply_schema`.

Records are created and maintained outside this service (spreadsheet imports),
so field names keep their upstream spelling (e.g. `pAddressDISTRICT`).
"""

from p4pmis.coercion import number_field, string_field


class Collections:
    """Collection names in the MIS database."""

    USERS = "UsersMIS"
    PARTICIPANTS = "ParticipantPROFILE"
    DEALERS = "DealerPROFILE"
    COOPERATIVES = "CoOpPROFILE"
    LEVERAGES = "Leverages"
    PRODUCTIVITY = "Productivity"
    A2F = "A2F"
    A2M = "A2M"


# Response field → collection counted by GET /api/market-surveys
MARKET_SURVEY_COLLECTIONS = {
    "aqua": "MarketSurveyAQUA",
    "cattle": "MarketSurveyCATTLE",
    "fh": "MarketSurveyFH",
    "maize": "MarketSurveyMAIZE",
    "poultry": "MarketSurveyPOULTRY",
    "qsr": "MarketSurveyQSR",
}

# Readable through GET /api/collections/{name}. The credential collection is
# deliberately absent.
DEFAULT_ALLOWED_COLLECTIONS = (
    Collections.PARTICIPANTS,
    Collections.DEALERS,
    Collections.COOPERATIVES,
    "CooperativePROFILE",
    "AgrovetPROFILE",
    Collections.LEVERAGES,
    Collections.PRODUCTIVITY,
    Collections.A2F,
    Collections.A2M,
    *MARKET_SURVEY_COLLECTIONS.values(),
)


# ── Coercion Schemas ──────────────────────────────────────────────────────

PARTICIPANT_SCHEMA = (
    string_field("ID"),
    string_field("ParticipantNAME"),
    string_field("ParticipantGENDER"),
    string_field("WorkingSectorP4P"),
    string_field("pAddressDISTRICT"),
    string_field("EthnicCultureBACKGROUND"),
)

A2F_SCHEMA = (
    number_field("ParticipantID"),
    number_field("ParticipantAGE"),
    number_field("LoanAmountAPPLIED"),
    number_field("LoanAmountAPPROVED"),
    number_field("LoanPERIOD"),
    number_field("InterestRATE"),
    number_field("InsurancePERIOD"),
    number_field("InsuranceCOVERAGE"),
)

A2M_SCHEMA = (
    number_field("ParticipantID"),
    number_field("ParticipantAGE"),
    number_field("MarginalizedSTATUS"),
    number_field("EntityPHONE"),
    number_field("QtySOLD"),
    number_field("AmountSOLD"),
)

# Productivity document field → output column
PRODUCTIVITY_COLUMNS = {
    "Sector": "sectors",
    "BaseLine": "baseline",
    "Early Productivity Assessment": "earlyassessment",
    "% Growth": "growth",
}
