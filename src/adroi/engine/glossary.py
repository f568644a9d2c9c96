"""
Marketing glossary

Term cards (definition, formula, worked example) grouped by category,
with a case-insensitive search over term, abbreviation and definition.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class GlossaryTerm:
    id: str
    abbreviation: str
    term: str
    definition: str
    formula: Optional[str]
    example: Optional[str]
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


GLOSSARY: List[GlossaryTerm] = [
    # Cost
    GlossaryTerm(
        "cpm", "CPM", "Cost Per Mille",
        "The cost of one thousand ad impressions. A standard measure of how "
        "cheaply a campaign buys reach.",
        "CPM = (Total Ad Spend / Impressions) × 1000",
        "Spending $500 for 100,000 impressions is a CPM of $5.00.",
        "Cost Metrics",
    ),
    GlossaryTerm(
        "cpc", "CPC", "Cost Per Click",
        "The average amount paid for each click on an ad. Lower CPC means "
        "traffic is bought more efficiently.",
        "CPC = Total Ad Spend / Number of Clicks",
        "Spending $1,000 for 500 clicks is a CPC of $2.00.",
        "Cost Metrics",
    ),
    GlossaryTerm(
        "cpl", "CPL", "Cost Per Lead",
        "The average cost of one lead, a potential customer who has shown "
        "interest. Used to judge lead generation campaigns.",
        "CPL = Total Ad Spend / Number of Leads",
        "Spending $2,000 for 40 leads is a CPL of $50.",
        "Cost Metrics",
    ),
    GlossaryTerm(
        "cac", "CAC", "Customer Acquisition Cost",
        "The total cost of winning one paying customer. In this simulator "
        "every lead is a sale, so CAC equals CPL.",
        "CAC = Total Marketing Cost / New Customers Acquired",
        "$10,000 of marketing spend for 50 customers is a CAC of $200.",
        "Cost Metrics",
    ),

    # Conversion
    GlossaryTerm(
        "ctr", "CTR", "Click-Through Rate",
        "The share of impressions that turn into clicks. Higher CTR means more "
        "engaging creative; benchmarks vary by platform and vertical.",
        "CTR = (Clicks / Impressions) × 100%",
        "250 clicks from 10,000 impressions is a CTR of 2.5%.",
        "Conversion Metrics",
    ),
    GlossaryTerm(
        "cr", "CR", "Conversion Rate",
        "The share of visitors who complete the desired action (purchase, "
        "sign-up). Higher CR means a more effective landing page and offer.",
        "CR = (Conversions / Total Visitors) × 100%",
        "30 purchases from 1,000 visitors is a CR of 3.0%.",
        "Conversion Metrics",
    ),

    # Profitability
    GlossaryTerm(
        "roas", "ROAS", "Return On Ad Spend",
        "Revenue earned per unit of ad spend. 1.0x is break-even, above 1.0x "
        "is profit and below 1.0x is loss. Many businesses target 3x or more.",
        "ROAS = Revenue / Ad Spend",
        "$15,000 of revenue from $5,000 of ads is a ROAS of 3.0x.",
        "Profitability Metrics",
    ),
    GlossaryTerm(
        "roi", "ROI", "Return On Investment",
        "Percentage return on the advertising investment. Positive ROI makes "
        "money, negative ROI loses it.",
        "ROI = ((Revenue - Cost) / Cost) × 100%",
        "$25,000 of revenue on a $10,000 investment is an ROI of 150%.",
        "Profitability Metrics",
    ),
    GlossaryTerm(
        "romi", "ROMI", "Return On Marketing Investment",
        "ROI restricted to marketing: profit attributable to marketing divided "
        "by marketing cost.",
        "ROMI = (Gross Profit from Marketing - Marketing Cost) / Marketing Cost × 100%",
        "$50,000 of marketing profit on $20,000 of spend is a ROMI of 150%.",
        "Profitability Metrics",
    ),

    # Customer
    GlossaryTerm(
        "ltv", "LTV", "Lifetime Value",
        "Total revenue expected from one customer over the whole relationship. "
        "Caps how much it is worth paying to acquire a customer.",
        "LTV = Average Check × Purchase Frequency × Customer Lifespan",
        "A customer spending $100 a month for 24 months has an LTV of $2,400.",
        "Customer Metrics",
    ),
    GlossaryTerm(
        "ltv_cac", "LTV:CAC", "LTV to CAC Ratio",
        "Lifetime value relative to acquisition cost. 3:1 is considered "
        "healthy: $3 earned for every $1 spent acquiring the customer.",
        "LTV:CAC = Customer Lifetime Value / Customer Acquisition Cost",
        "An LTV of $900 against a CAC of $300 is a ratio of 3:1.",
        "Customer Metrics",
    ),

    # Optimization
    GlossaryTerm(
        "maxcpc", "Max CPC", "Maximum Cost Per Click",
        "The highest CPC at which the campaign still breaks even. Above it, "
        "every click loses money.",
        "Max CPC = Average Check × (CR / 100)",
        "With a $150 average check and 3% CR, Max CPC is $4.50.",
        "Optimization Metrics",
    ),
    GlossaryTerm(
        "breakeven", "BEP", "Break-Even Point",
        "Where revenue equals cost, with neither profit nor loss. Sets the "
        "minimum performance a campaign needs to be viable.",
        "Break-Even: Revenue = Total Ad Spend (ROAS = 1.0x)",
        "A ROAS of exactly 1.0x is break-even.",
        "Optimization Metrics",
    ),

    # Funnel
    GlossaryTerm(
        "impressions", "IMP", "Impressions",
        "How many times an ad is displayed. One user can generate several "
        "impressions.",
        "Impressions = (Budget / CPM) × 1000",
        "A $5,000 budget at a $10 CPM buys 500,000 impressions.",
        "Funnel Metrics",
    ),

    # Strategy
    GlossaryTerm(
        "mediaplanning", "MP", "Media Planning",
        "Choosing the mix of channels, formats, targeting and budget split that "
        "reaches the advertising goal most efficiently.",
        None,
        "A plan might put 60% on Facebook, 30% on Google and 10% on TikTok.",
        "Strategy",
    ),
    GlossaryTerm(
        "funnel", "Funnel", "Marketing Funnel",
        "The customer journey from awareness to conversion. Each stage holds "
        "fewer people than the one before.",
        None,
        "100,000 impressions -> 2,500 clicks (2.5% CTR) -> 75 leads (3% CR) -> sales.",
        "Strategy",
    ),
    GlossaryTerm(
        "abtesting", "A/B", "A/B Testing",
        "Comparing two variants of an ad, landing page or campaign to see which "
        "performs better. Change one variable at a time.",
        None,
        "Headline A gets 2.1% CTR and headline B gets 3.4% CTR, so B wins.",
        "Strategy",
    ),
]


def search_glossary(query: Optional[str] = None) -> List[GlossaryTerm]:
    """Terms whose name, abbreviation or definition contain ``query``"""
    if not query or not query.strip():
        return list(GLOSSARY)

    needle = query.strip().casefold()
    return [
        t for t in GLOSSARY
        if needle in t.term.casefold()
        or needle in t.abbreviation.casefold()
        or needle in t.definition.casefold()
    ]


def group_by_category(terms: List[GlossaryTerm]) -> List[Tuple[str, List[GlossaryTerm]]]:
    """(category, terms) pairs, categories in alphabetical order"""
    groups: Dict[str, List[GlossaryTerm]] = {}
    for t in terms:
        groups.setdefault(t.category, []).append(t)
    return sorted(groups.items())
