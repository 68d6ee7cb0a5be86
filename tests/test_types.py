import datetime

from bplist_reader.types import Array, Date, Dictionary, Int, String


def test_uid_value_only_for_cf_uid_mapping() -> None:
    assert Dictionary.uid(3).uid_value == 3
    assert Dictionary(((String("CF$UID"), String("x")),)).uid_value is None
    assert Dictionary(((String("other"), Int(3)),)).uid_value is None
    assert Dictionary().uid_value is None


def test_dictionary_get_matches_first_key() -> None:
    d = Dictionary(((String("a"), Int(1)), (Int(2), Int(3)), (String("a"), Int(4))))
    assert d.get("a") == Int(1)
    assert d.get(Int(2)) == Int(3)
    assert d.get("missing") is None
    assert len(d) == 3


def test_values_are_hashable_and_comparable() -> None:
    a = Array((Int(1), String("x")))
    b = Array((Int(1), String("x")))
    assert a == b
    assert hash(a) == hash(b)
    assert len(a) == 2


def test_date_to_datetime_handles_negative_seconds() -> None:
    assert Date(-1.0).to_datetime() == datetime.datetime(
        2000, 12, 31, 23, 59, 59, tzinfo=datetime.timezone.utc
    )
