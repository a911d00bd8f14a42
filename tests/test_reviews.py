import pytest
from pydantic import ValidationError

from rentmzansi.models.enums import ReportReason
from rentmzansi.schemas.review import ReportCreate, ReviewCreate
from rentmzansi.schemas.roommate import RoommateProfileUpdate
from rentmzansi.services.review_service import ReportService, ReviewService
from rentmzansi.services.roommate_service import RoommateService


def test_review_summary(store):
    service = ReviewService(store)
    service.add_review("L1", ReviewCreate(rating=5, comment=" Great room "))
    service.add_review("L1", ReviewCreate(rating=4))
    service.add_review("L1", ReviewCreate(rating=4))

    summary = service.get_review_summary("L1")

    assert summary.review_count == 3
    assert summary.average_rating == 4.3
    assert service.get_reviews("L1")[0].comment == "Great room"


def test_review_summary_without_reviews(store):
    summary = ReviewService(store).get_review_summary("L1")

    assert summary.average_rating == 0
    assert summary.review_count == 0


@pytest.mark.parametrize("rating", [0, 6])
def test_rating_out_of_range(rating):
    with pytest.raises(ValidationError):
        ReviewCreate(rating=rating)


def test_report_listing(store, clock):
    service = ReportService(store, clock)

    report = service.report_listing("L1", ReportCreate(reason="Fraud / Scam", comment="  "))

    assert report.reason == ReportReason.FRAUD
    assert report.comment is None
    assert report.timestamp == clock.current
    assert len(service.get_reports("L1")) == 1
    assert service.get_reports("L2") == []


def test_reviews_and_reports_use_separate_keys(store):
    ReviewService(store).add_review("L1", ReviewCreate(rating=3))

    assert ReportService(store).get_reports("L1") == []


# ============ ROOMMATES ============

def test_roommate_profiles(store, clock):
    service = RoommateService(store, clock)

    service.save_profile("u1", RoommateProfileUpdate(display_name="Thandi", preferred_areas=["Sandton"]))
    clock.advance(hours=1)
    service.save_profile("u2", RoommateProfileUpdate(display_name="Sipho", budget_max=4000))

    assert service.get_profile("u1").display_name == "Thandi"
    assert [p.user_id for p in service.list_profiles()] == ["u2", "u1"]

    assert service.delete_profile("u1") is True
    assert service.delete_profile("u1") is False
    assert service.get_profile("u1") is None
