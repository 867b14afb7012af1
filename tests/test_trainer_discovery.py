# tests/test_trainer_discovery.py
"""
Trainer discovery filters and sort orders.
"""

from decimal import Decimal

import pytest

from app.services import trainer_search
from app.services.errors import ValidationError
from app.services.trainer_search import TrainerSearchCriteria


@pytest.fixture
def roster(make_user):
    """Five trainers plus one inactive trainer and one student."""
    return {
        "ana": make_user(
            "trainer", name="Ana", hourly_rate=Decimal("20.00"), experience=2, rating=4.5,
            languages=["Spanish", "English"], specializations=["Conversation"], bio="Relaxed chats",
        ),
        "ben": make_user(
            "trainer", name="Ben", hourly_rate=Decimal("30.00"), experience=8, rating=4.9,
            languages=["French"], specializations=["Business French", "DELF prep"],
        ),
        "cai": make_user(
            "trainer", name="Cai", hourly_rate=Decimal("25.00"), experience=5, rating=4.5,
            trainer_languages=[{"language": "Mandarin", "proficiency": "native"}],
            is_available=False,
        ),
        "dee": make_user(
            "trainer", name="Dee", hourly_rate=Decimal("45.00"), experience=12, rating=3.8,
            languages=["German"],
        ),
        "eli": make_user(
            "trainer", name="Eli", hourly_rate=Decimal("15.00"), experience=0, rating=5.0,
            languages=["Spanish"],
        ),
        "gone": make_user("trainer", name="Gone", is_active=False, languages=["Spanish"]),
        "stu": make_user("student", name="Stu", languages=["Spanish"]),
    }


def names(trainers):
    return [t.name for t in trainers]


def find(db, **kwargs):
    return trainer_search.search(db, TrainerSearchCriteria(**kwargs))


class TestTrainerFilters:

    def test_only_active_trainers(self, db_session, roster):
        assert sorted(names(find(db_session))) == ["Ana", "Ben", "Cai", "Dee", "Eli"]

    def test_rate_bounds_are_inclusive(self, db_session, roster):
        results = find(db_session, min_rate=20, max_rate=30)
        assert sorted(names(results)) == ["Ana", "Ben", "Cai"]
        assert all(Decimal("20") <= trainer_search.hourly_rate(t) <= Decimal("30") for t in results)

    def test_language_matches_plain_and_rich_entries(self, db_session, roster):
        assert sorted(names(find(db_session, language="spanish"))) == ["Ana", "Eli"]
        assert names(find(db_session, language="Mandarin")) == ["Cai"]

    def test_min_experience(self, db_session, roster):
        assert sorted(names(find(db_session, min_experience=5))) == ["Ben", "Cai", "Dee"]

    def test_specialization_substring(self, db_session, roster):
        assert names(find(db_session, specialization="delf")) == ["Ben"]

    def test_min_rating(self, db_session, roster):
        assert sorted(names(find(db_session, min_rating=4.9))) == ["Ben", "Eli"]

    def test_available_only(self, db_session, roster):
        assert "Cai" not in names(find(db_session, available=True))
        assert "Cai" in names(find(db_session, available=False))

    def test_free_text_query(self, db_session, roster):
        assert names(find(db_session, query="relaxed")) == ["Ana"]
        assert names(find(db_session, query="german")) == ["Dee"]

    def test_min_rate_above_max_rate(self, db_session, roster):
        with pytest.raises(ValidationError):
            find(db_session, min_rate=40, max_rate=10)


class TestTrainerSorting:

    def test_price_low_is_non_decreasing(self, db_session, roster):
        rates = [trainer_search.hourly_rate(t) for t in find(db_session, sort_by="price_low")]
        assert rates == sorted(rates)
        assert rates[0] == Decimal("15.00")

    def test_price_high(self, db_session, roster):
        assert names(find(db_session, sort_by="price_high")) == ["Dee", "Ben", "Cai", "Ana", "Eli"]

    def test_experience(self, db_session, roster):
        assert names(find(db_session, sort_by="experience")) == ["Dee", "Ben", "Cai", "Ana", "Eli"]

    def test_rating_ties_break_by_id(self, db_session, roster):
        # Ana and Cai share 4.5; Ana was created first.
        assert names(find(db_session, sort_by="rating")) == ["Eli", "Ben", "Ana", "Cai", "Dee"]

    def test_default_sort_is_rating(self, db_session, roster):
        assert names(find(db_session)) == names(find(db_session, sort_by="rating"))

    def test_unknown_sort_rejected(self, db_session, roster):
        with pytest.raises(ValidationError):
            find(db_session, sort_by="cheapest")


def test_rating_falls_back_to_profile_average(db_session, make_user):
    trainer = make_user("trainer", average_rating=3.2)
    trainer.stats.rating = None
    assert trainer_search.trainer_rating(trainer) == pytest.approx(3.2)
