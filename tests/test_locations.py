from geomonitor.news.locations import filter_by_location, region_for_city, supported_cities
from geomonitor.news.models import SCOPE_LOCAL, SCOPE_REGIONAL


def _corpus(make_item):
    return [
        make_item("Global tariff story", source="Wire"),
        make_item("EU parliament vote", source="Euro", scope=SCOPE_REGIONAL, region="europe"),
        make_item("Asia markets slide", source="Asia", scope=SCOPE_REGIONAL, region="east_asia"),
        make_item("London tube strike", source="LDN", scope=SCOPE_LOCAL, cities=("london",)),
        make_item("Paris metro works", source="PAR", scope=SCOPE_LOCAL, cities=("paris",)),
    ]


def test_region_for_city_is_case_insensitive():
    assert region_for_city("London") == "europe"
    assert region_for_city("  tokyo ") == "east_asia"
    assert region_for_city("Atlantis") is None
    assert region_for_city(None) is None
    assert "new york" in supported_cities()


def test_city_sees_international_regional_and_own_local(make_item):
    items = filter_by_location(_corpus(make_item), "London")
    assert [i.source for i in items] == ["Wire", "Euro", "LDN"]


def test_unknown_or_missing_city_sees_international_only(make_item):
    corpus = _corpus(make_item)
    assert [i.source for i in filter_by_location(corpus, None)] == ["Wire"]
    assert [i.source for i in filter_by_location(corpus, "Atlantis")] == ["Wire"]
