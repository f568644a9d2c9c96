"""
Marketing glossary
"""

from adroi.engine.glossary import GLOSSARY, group_by_category, search_glossary


def test_terms_are_unique_and_complete():
    ids = [t.id for t in GLOSSARY]
    assert len(ids) == len(set(ids)) == 17
    assert all(t.term and t.definition and t.category for t in GLOSSARY)
    assert {"cpm", "ctr", "cr", "cpc", "cpl", "cac", "roas", "roi", "maxcpc"} <= set(ids)


def test_search_matches_term_abbreviation_and_definition():
    assert [t.id for t in search_glossary("roas")] == ["roas"]
    assert [t.id for t in search_glossary("Return On Investment")] == ["roi"]
    assert "maxcpc" in [t.id for t in search_glossary("still breaks even")]
    assert search_glossary("  ") == GLOSSARY
    assert search_glossary(None) == GLOSSARY
    assert search_glossary("zzz") == []


def test_grouped_alphabetically():
    groups = group_by_category(GLOSSARY)
    categories = [c for c, _ in groups]

    assert categories == sorted(categories)
    assert categories[0] == "Conversion Metrics"
    assert sum(len(terms) for _, terms in groups) == len(GLOSSARY)

    strategy = dict(groups)["Strategy"]
    assert all(t.formula is None for t in strategy)


def test_to_dict():
    data = GLOSSARY[0].to_dict()
    assert data["abbreviation"] == "CPM"
    assert data["formula"] == "CPM = (Total Ad Spend / Impressions) × 1000"
