"""Tests for the ChildContract value object."""

from datetime import date
from decimal import Decimal

import pytest

from pajemploi_kernel.domain.contract import ChildContract
from pajemploi_kernel.exceptions import InvalidContractError


def _contract(**overrides) -> ChildContract:
    fields = {
        "name": "Axelle",
        "net_hourly_rate": Decimal("3.90"),
        "majored_hour_rate": Decimal("4.29"),
        "contract_start_date": date(2025, 9, 1),
    }
    fields.update(overrides)
    return ChildContract(**fields)


class TestValidation:

    def test_valid(self):
        contract = _contract()
        assert contract.name == "Axelle"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name(self, name):
        with pytest.raises(InvalidContractError) as exc_info:
            _contract(name=name)
        assert exc_info.value.field == "name"

    @pytest.mark.parametrize("rate", [Decimal("0"), Decimal("-1.5")])
    def test_non_positive_rate(self, rate):
        with pytest.raises(InvalidContractError) as exc_info:
            _contract(net_hourly_rate=rate)
        assert exc_info.value.field == "net_hourly_rate"
        assert exc_info.value.reason == "must be positive"

    @pytest.mark.parametrize("rate", [3.9, "3.90", Decimal("NaN"), Decimal("Infinity")])
    def test_non_decimal_or_non_finite_rate(self, rate):
        with pytest.raises(InvalidContractError):
            _contract(majored_hour_rate=rate)

    def test_start_date_must_be_a_date(self):
        with pytest.raises(InvalidContractError):
            _contract(contract_start_date="2025-09-01")

    def test_start_date_optional(self):
        assert _contract(contract_start_date=None).contract_start_date is None

    def test_frozen(self):
        contract = _contract()
        with pytest.raises(AttributeError):
            contract.name = "Other"


class TestMonthlySalary:

    def test_rounding(self, rules):
        assert _contract().monthly_salary(rules) == Decimal("658.13")

    def test_exact(self, rules):
        assert _contract(net_hourly_rate=Decimal("4.20")).monthly_salary(rules) == Decimal("708.75")


class TestRoundTrip:

    def test_to_dict(self):
        assert _contract().to_dict() == {
            "name": "Axelle",
            "netHourlyRate": "3.90",
            "majoredHourRate": "4.29",
            "contractStartDate": "2025-09-01",
        }

    def test_lossless(self):
        contract = _contract()
        assert ChildContract.from_dict(contract.to_dict()) == contract

    def test_lossless_without_start(self):
        contract = _contract(contract_start_date=None)
        assert ChildContract.from_dict(contract.to_dict()) == contract

    def test_snake_case_and_numbers(self):
        contract = ChildContract.from_dict(
            {"name": "Brune", "net_hourly_rate": 4.2, "majored_hour_rate": "4,62"}
        )
        assert contract.net_hourly_rate == Decimal("4.2")
        assert contract.majored_hour_rate == Decimal("4.62")

    def test_missing_rate(self):
        with pytest.raises(InvalidContractError) as exc_info:
            ChildContract.from_dict({"name": "Brune", "netHourlyRate": "4.20"})
        assert exc_info.value.field == "majoredHourRate"

    def test_non_numeric_rate(self):
        with pytest.raises(InvalidContractError):
            ChildContract.from_dict(
                {"name": "Brune", "netHourlyRate": "abc", "majoredHourRate": "4.62"}
            )

    def test_boolean_rate(self):
        with pytest.raises(InvalidContractError):
            ChildContract.from_dict(
                {"name": "Brune", "netHourlyRate": True, "majoredHourRate": "4.62"}
            )

    def test_bad_start_date(self):
        with pytest.raises(InvalidContractError) as exc_info:
            ChildContract.from_dict(
                {
                    "name": "Brune",
                    "netHourlyRate": "4.20",
                    "majoredHourRate": "4.62",
                    "contractStartDate": "01/09/2025",
                }
            )
        assert exc_info.value.field == "contractStartDate"
