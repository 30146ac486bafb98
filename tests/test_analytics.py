import pytest

from habitar.errors import ValidationError
from habitar.services import AnalyticsService, ROIInputs, calculate_roi, parse_roi_inputs
from habitar.services.analytics import ROI_BENCHMARKS, mortgage_payment


def test_invite_stats(client, fake):
    fake.db.seed(
        "invites",
        {"status": "pending"},
        {"status": "pending"},
        {"status": "accepted"},
        {"status": "declined"},
    )
    assert AnalyticsService(client).invite_stats() == {
        "total": 4,
        "pending": 2,
        "accepted": 1,
        "declined": 1,
    }


def test_user_stats(client, fake):
    fake.db.seed("users", {"role": "tenant"}, {"role": "tenant"}, {"role": "admin"}, {"role": None})
    stats = AnalyticsService(client).user_stats()
    assert stats["total"] == 4
    assert stats["tenant"] == 2
    assert stats["admin"] == 1
    assert stats["agent"] == 0


def test_market_metrics(client, fake):
    fake.db.seed(
        "listings",
        {"price": 1000, "is_active": True},
        {"price": 2000, "is_active": True},
        {"price": None, "is_active": True},
        {"price": 9000, "is_active": False},
    )
    metrics = AnalyticsService(client).market_metrics()
    assert metrics["average_rent"] == 1500
    assert metrics["active_listings"] == 3
    assert metrics["roi_benchmarks"] == ROI_BENCHMARKS


def test_market_metrics_without_listings(client):
    assert AnalyticsService(client).market_metrics()["average_rent"] == 0


def test_mortgage_payment():
    # 200k a 30 años al 6.5%
    assert mortgage_payment(200_000, 6.5, 30) == pytest.approx(1264.14, abs=0.01)
    assert mortgage_payment(1200, 0, 1) == pytest.approx(100)


def test_calculate_roi():
    metrics = calculate_roi(
        ROIInputs(
            purchase_price=250_000,
            down_payment=50_000,
            monthly_rent=2_000,
            property_taxes=200,
            insurance=100,
            maintenance=100,
        )
    )
    operating = 200 + 100 + 100 + 100 + 160
    assert metrics.monthly_mortgage == pytest.approx(1264.14, abs=0.01)
    assert metrics.net_operating_income == pytest.approx((2000 - operating) * 12)
    assert metrics.cap_rate == pytest.approx((2000 - operating) * 12 / 250_000 * 100)
    assert metrics.break_even_rent == pytest.approx(metrics.monthly_mortgage + operating)
    assert metrics.monthly_cash_flow == pytest.approx(2000 - 1264.14 - operating, abs=0.01)
    assert metrics.months_to_break_even == pytest.approx(50_000 / metrics.monthly_cash_flow)
    assert set(metrics.to_dict()) >= {"cap_rate", "total_roi"}


def test_negative_cash_flow_caps_break_even():
    metrics = calculate_roi(ROIInputs(purchase_price=500_000, down_payment=20_000, monthly_rent=1_000))
    assert metrics.monthly_cash_flow < 0
    assert metrics.months_to_break_even == 20_000


def test_parse_roi_inputs_coerces_numbers():
    inputs = parse_roi_inputs(
        {"purchase_price": "250000", "down_payment": 50_000, "monthly_rent": 2_000}
    )
    assert inputs.purchase_price == 250_000
    assert inputs.vacancy_rate == 5


@pytest.mark.parametrize(
    "data,field",
    [
        ({"purchase_price": "abc", "down_payment": 1, "monthly_rent": 1}, "purchase_price"),
        ({"purchase_price": 100, "down_payment": 0, "monthly_rent": 1}, "down_payment"),
        ({"purchase_price": 100, "down_payment": 10}, "monthly_rent"),
    ],
)
def test_parse_roi_inputs_rejects(data, field):
    with pytest.raises(ValidationError) as exc:
        parse_roi_inputs(data)
    assert field in exc.value.details["errors"]
