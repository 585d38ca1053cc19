from adlib_scraper.core.models import AdRecord
from adlib_scraper.extractors import RecordExtractor, build_record


def extract(data, **kwargs):
    return RecordExtractor(**kwargs).extract(data)


def test_text_and_advertiser_yield_one_record():
    records = extract({"bodyText": "Buy now", "advertiserName": "Acme"})
    assert records == [AdRecord(text="Buy now", source_name="Acme")]


def test_advertiser_alone_qualifies():
    records = extract({"advertiserName": "Acme"})
    assert len(records) == 1
    assert records[0].source_name == "Acme"
    assert records[0].text is None


def test_non_record_object_yields_nothing():
    assert extract({"id": 123, "misc": "x"}) == []


def test_non_record_object_is_recursed():
    records = extract({"id": 123, "misc": {"bodyText": "Nested"}})
    assert [r.text for r in records] == ["Nested"]


def test_creative_text_fallback():
    records = extract({"creative": {"bodyText": "Hello"}})
    assert records == [AdRecord(text="Hello")]


def test_empty_text_without_creative_text_becomes_none():
    records = extract({"bodyText": "", "advertiserName": "Acme", "creative": {"id": 1}})
    assert records == [AdRecord(text=None, source_name="Acme")]


def test_matched_object_children_are_not_extracted():
    data = {
        "bodyText": "Outer",
        "advertiserName": "A",
        "child": {"bodyText": "Inner", "advertiserName": "B"},
    }
    records = extract(data)
    assert [r.text for r in records] == ["Outer"]


def test_preorder_traversal_order():
    data = {
        "data": {
            "results": [[{"bodyText": "a"}], {"bodyText": "b"}],
            "more": {"message": "c"},
        },
        "tail": [{"pageName": "d"}],
    }
    assert [r.text or r.source_name for r in extract(data)] == ["a", "b", "c", "d"]


def test_alias_priority_and_string_only():
    assert build_record({"body": "x", "bodyText": "y"}).text == "y"
    assert build_record({"bodyText": 5, "message": "m"}).text == "m"
    assert build_record({"advertiser": "late", "pageName": "early"}).source_name == "early"


def test_optional_fields_mapped():
    record = build_record({"bodyText": "t", "start_date": "2024-01-01", "link": "https://x.test/ad"})
    assert record.start_date == "2024-01-01"
    assert record.url == "https://x.test/ad"


def test_empty_strings_do_not_qualify():
    assert build_record({"bodyText": "", "advertiserName": ""}) is None


def test_scalars_and_empty_containers():
    assert extract("text") == []
    assert extract(None) == []
    assert extract([]) == []


def test_depth_cap_stops_descent_without_crashing():
    data = {"bodyText": "deep"}
    for _ in range(50):
        data = {"wrap": data}

    extractor = RecordExtractor(max_depth=10)
    assert extractor.extract(data) == []
    assert extractor.truncated is True

    assert [r.text for r in extract(data)] == ["deep"]


def test_very_deep_nesting_fails_closed():
    data = {"bodyText": "too deep"}
    for _ in range(5000):
        data = [data]

    extractor = RecordExtractor()
    assert extractor.extract(data) == []
    assert extractor.truncated is True
