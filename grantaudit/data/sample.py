"""
Bundled sample data.

Used when no dataset file is configured and as the fallback for option lists
when the grants API is unreachable.
"""

from .models import Grant, YearlyTotal, MinistryTotal, KeyMetric, ALL_MINISTRIES
from grantaudit.normalization import ALL_YEARS


SAMPLE_GRANTS = [
    {"id": "1", "ministry": "HEALTH", "program": "Healthcare Facilities", "recipient": "Alberta Health Services", "fiscalYear": "2023-2024", "amount": 15400000, "flagged": False},
    {"id": "2", "ministry": "EDUCATION", "program": "School Infrastructure", "recipient": "Edmonton Public Schools", "fiscalYear": "2023-2024", "amount": 7500000, "flagged": False},
    {"id": "3", "ministry": "ADVANCED EDUCATION", "program": "Research Funding", "recipient": "University of Alberta", "fiscalYear": "2023-2024", "amount": 3200000, "flagged": False},
    {"id": "4", "ministry": "MUNICIPAL AFFAIRS", "program": "Urban Development", "recipient": "City of Calgary", "fiscalYear": "2023-2024", "amount": 5100000, "flagged": True, "flagReason": "Unusual increase from previous year"},
    {"id": "5", "ministry": "AGRICULTURE AND IRRIGATION", "program": "Sustainable Farming", "recipient": "Alberta Agriculture Association", "fiscalYear": "2023-2024", "amount": 2800000, "flagged": False},
    {"id": "6", "ministry": "ENVIRONMENT AND PROTECTED AREAS", "program": "Conservation Efforts", "recipient": "Alberta Conservation Society", "fiscalYear": "2022-2023", "amount": 1950000, "flagged": False},
    {"id": "7", "ministry": "TECHNOLOGY AND INNOVATION", "program": "Tech Startups", "recipient": "Alberta Innovates", "fiscalYear": "2022-2023", "amount": 4200000, "flagged": False},
    {"id": "8", "ministry": "HEALTH", "program": "Mental Health Services", "recipient": "Mental Health Alberta", "fiscalYear": "2022-2023", "amount": 3700000, "flagged": True, "flagReason": "Disbursement timing anomaly"},
    {"id": "9", "ministry": "EDUCATION", "program": "Digital Learning", "recipient": "Rural School Districts", "fiscalYear": "2022-2023", "amount": 2100000, "flagged": False},
    {"id": "10", "ministry": "INDIGENOUS RELATIONS", "program": "Community Support", "recipient": "Treaty 7 Management Corp", "fiscalYear": "2021-2022", "amount": 1800000, "flagged": False},
    {"id": "11", "ministry": "TRANSPORTATION AND ECONOMIC CORRIDORS", "program": "Highway Development", "recipient": "Alberta Transportation", "fiscalYear": "2021-2022", "amount": 12500000, "flagged": False},
    {"id": "12", "ministry": "SENIORS COMMUNITY AND SOCIAL SERVICES", "program": "Senior Care", "recipient": "Alberta Seniors Care", "fiscalYear": "2021-2022", "amount": 4900000, "flagged": False},
]

YEARLY_TOTALS = [
    YearlyTotal("2014-2015", 31172900000),
    YearlyTotal("2015-2016", 32651700000),
    YearlyTotal("2016-2017", 34380700000),
    YearlyTotal("2017-2018", 34755800000),
    YearlyTotal("2018-2019", 43262900000),
    YearlyTotal("2019-2020", 36125000000),
    YearlyTotal("2020-2021", 40595800000),
    YearlyTotal("2021-2022", 38193800000),
    YearlyTotal("2022-2023", 39246100000),
    YearlyTotal("2023-2024", 42986900000),
    YearlyTotal("2024-2025", 34788676160),
]

# All-years ministry totals published by the grants API
MINISTRY_TOTALS = [
    MinistryTotal("HEALTH", 230300000000, "#3498db"),
    MinistryTotal("EDUCATION", 62100000000, "#2ecc71"),
    MinistryTotal("ADVANCED EDUCATION", 25600000000, "#9b59b6"),
    MinistryTotal("MUNICIPAL AFFAIRS", 17600000000, "#e74c3c"),
    MinistryTotal("SENIORS COMMUNITY AND SOCIAL SERVICES", 8000000000, "#f39c12"),
    MinistryTotal("HUMAN SERVICES", 6500000000, "#1abc9c"),
    MinistryTotal("SENIORS AND HOUSING", 4800000000, "#d35400"),
    MinistryTotal("AGRICULTURE AND FORESTRY", 4300000000, "#27ae60"),
    MinistryTotal("TRANSPORTATION", 3600000000, "#2980b9"),
]

# Headline figures for the full provincial dataset
DATASET_METRICS = [
    KeyMetric("Number of Grants", "1.77 Million", "Total number of grants across all ministries"),
    KeyMetric("Total Grant Value", "$417.26 Billion", "Total funding disbursed across all years"),
    KeyMetric("Fiscal Years", 11, "Number of fiscal years covered in the data"),
    KeyMetric("Grant Programs", 3940, "Unique programs receiving funding"),
    KeyMetric("Grant Recipients", 420271, "Unique recipients receiving grants"),
]

MINISTRIES = [
    "HEALTH",
    "EDUCATION",
    "ADVANCED EDUCATION",
    "MUNICIPAL AFFAIRS",
    "SENIORS COMMUNITY AND SOCIAL SERVICES",
    "AGRICULTURE AND FORESTRY",
    "AGRICULTURE AND IRRIGATION",
    "TRANSPORTATION AND ECONOMIC CORRIDORS",
    "ENVIRONMENT AND PROTECTED AREAS",
    "TECHNOLOGY AND INNOVATION",
    "INDIGENOUS RELATIONS",
    "CHILDREN AND FAMILY SERVICES",
    "MENTAL HEALTH AND ADDICTION",
    "ARTS CULTURE AND STATUS OF WOMEN",
    "AFFORDABILITY AND UTILITIES",
    ALL_MINISTRIES,
]

FISCAL_YEARS = [y.year for y in YEARLY_TOTALS] + [ALL_YEARS]


def sample_grants() -> list[Grant]:
    """Fresh Grant objects for the bundled sample records."""
    return [Grant.from_dict(raw) for raw in SAMPLE_GRANTS]
