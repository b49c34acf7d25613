"""
Calculator catalog shown on the home page and served at /api/calculators.
"""

CALCULATORS = [
    {
        "slug": "fire",
        "title": "FIRE Calculator",
        "description": "FIRE number, coast FIRE and the monthly savings to get there",
    },
    {
        "slug": "goal-sip",
        "title": "Goal SIP",
        "description": "SIP required for an inflation-adjusted future goal",
    },
    {
        "slug": "nps",
        "title": "NPS Calculator",
        "description": "Corpus, lump sum, and pension under NPS Tier I assumptions",
    },
    {
        "slug": "hra",
        "title": "HRA Calculator",
        "description": "Metro vs non-metro HRA exemption and taxable amount",
    },
    {
        "slug": "rd",
        "title": "RD Calculator",
        "description": "Recurring deposit maturity with monthly deposits",
    },
    {
        "slug": "nsc",
        "title": "NSC Calculator",
        "description": "National Savings Certificate maturity and interest",
    },
    {
        "slug": "ssy",
        "title": "SSY Calculator",
        "description": "Sukanya Samriddhi Yojana 21-year maturity projection",
    },
    {
        "slug": "cagr",
        "title": "CAGR Calculator",
        "description": "Compound annual growth rate for lump sum investments",
    },
    {
        "slug": "irr",
        "title": "IRR Calculator",
        "description": "Internal rate of return for irregular cashflows",
    },
    {
        "slug": "mf",
        "title": "Mutual Fund",
        "description": "Lump sum or SIP future value for MF investments",
    },
    {
        "slug": "savings-runway",
        "title": "Savings Runway",
        "description": "How long until you run out of money? Find your burn rate",
    },
    {
        "slug": "net-worth",
        "title": "Net Worth Projection",
        "description": "Visualize your wealth trajectory over the next decades",
    },
    {
        "slug": "sip",
        "title": "SIP Calculator",
        "description": "Step-up SIP growth with an inflation-adjusted value",
    },
    {
        "slug": "fd",
        "title": "FD Calculator",
        "description": "Calculate fixed deposit returns with tax adjustments",
    },
    {
        "slug": "debt-payoff",
        "title": "Debt Payoff Planner",
        "description": "Optimize your debt payment strategy and save on interest",
    },
    {
        "slug": "emergency-fund",
        "title": "Emergency Fund",
        "description": "Build the perfect safety net for unexpected expenses",
    },
    {
        "slug": "affordability",
        "title": "What Can I Afford?",
        "description": "Discover what you can buy without breaking your budget",
    },
    {
        "slug": "start-now-vs-wait",
        "title": "Start Now vs. Wait",
        "description": "What delaying your monthly investment costs you",
    },
]
