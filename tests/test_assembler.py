import sqlite3
from datetime import datetime, timezone

import pytest

from poolwizard.core.assembler import WizardResultAssembler, assemble, build_maintenance_reminder
from poolwizard.core.config import WizardConfig
from poolwizard.core.models import ConstraintSet
from poolwizard.data.catalog_store import CatalogLoadError
from poolwizard.data.promo_registry import (
    PromoCodeRegistry,
    PromoRegistryError,
    SqlitePromoCodeRegistry,
)

SUMMER = datetime(2026, 7, 1, 12, 0, tzinfo=timezone.utc)


class UnavailableRegistry(PromoCodeRegistry):
    def get(self, code):
        raise PromoRegistryError("registry offline")

    def snapshot(self, codes, as_of=None):
        raise PromoRegistryError("registry offline")


@pytest.fixture
def assembler(repository, registry, config):
    return WizardResultAssembler(repository, registry=registry, config=config)


@pytest.fixture
def pentair_constraints():
    return ConstraintSet(
        environment="in-ground",
        system="cartridge",
        brand="Pentair",
        diameter=5.0,
        pool_volume=20000,
        desired_turnover_hours=8,
    )


def test_end_to_end_scenario(assembler, pentair_constraints):
    result = assembler.assemble(pentair_constraints, as_of=SUMMER)

    top = result.matches[0]
    assert top.item.id == "pentair-5in"
    assert top.result.product_id == "pentair-5in"
    assert top.result.score == 90
    assert len(top.result.reasoning) == 5
    assert result.calculated_flow_rate == 41.7
    assert result.maintenance_reminder == (
        "Aim for a pump and filter combination that circulates 20,000 gallons every 8 hours."
    )
    assert result.inputs == pentair_constraints

    # Sand media is hard-filtered by system; the 8.5" cartridge scores without diameter
    assert [m.item.id for m in result.matches] == ["pentair-5in", "pentair-8in"]
    assert result.matches[1].result.score == 80


def test_promotions_attached_to_matches(assembler, pentair_constraints):
    result = assembler.assemble(pentair_constraints, as_of=SUMMER)
    promotions = result.matches[0].promotions
    assert [p.tag for p in promotions] == ["summer-peak"]
    assert [code.code for code in promotions[0].promos] == ["SUMMER20"]
    assert result.matches[1].promotions == ()


def test_assemble_is_idempotent(assembler, pentair_constraints):
    first = assembler.assemble(pentair_constraints, as_of=SUMMER)
    second = assembler.assemble(pentair_constraints, as_of=SUMMER)
    assert first.model_dump_json() == second.model_dump_json()


def test_registry_failure_degrades_to_no_codes(repository, config, pentair_constraints):
    assembler = WizardResultAssembler(repository, registry=UnavailableRegistry(), config=config)
    result = assembler.assemble(pentair_constraints, as_of=SUMMER)
    assert result.matches[0].result.score == 90
    assert [p.tag for p in result.matches[0].promotions] == ["summer-peak"]
    assert result.matches[0].promotions[0].promos == ()


def test_malformed_registry_row_does_not_abort(tmp_path, repository, promo_codes, config, pentair_constraints):
    path = tmp_path / "promo.db"
    registry = SqlitePromoCodeRegistry.create(path, promo_codes)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute("UPDATE promo_codes SET discount_value = -5 WHERE code = 'SUMMER20'")
    conn.close()

    result = WizardResultAssembler(repository, registry=registry, config=config).assemble(
        pentair_constraints, as_of=SUMMER
    )
    assert result.matches[0].result.score == 90
    assert result.matches[0].promotions[0].promos == ()


def test_without_registry(repository, config, pentair_constraints):
    result = WizardResultAssembler(repository, config=config).assemble(pentair_constraints)
    assert result.matches[0].promotions[0].promos == ()


def test_no_matches_is_not_an_error(assembler):
    result = assembler.assemble(ConstraintSet(brand="Nobody"))
    assert result.matches == ()


def test_explicit_catalog_overrides_repository(assembler, item_factory):
    catalog = [item_factory(id="only-one")]
    result = assembler.assemble(ConstraintSet(environment="in-ground"), catalog=catalog)
    assert [m.item.id for m in result.matches] == ["only-one"]


def test_max_results_from_config(repository, registry, item_factory):
    catalog = [item_factory(id=f"item-{i}") for i in range(6)]
    assembler = WizardResultAssembler(repository, registry=registry, config=WizardConfig(max_results=3))
    result = assembler.assemble(ConstraintSet(system="cartridge"), catalog=catalog)
    assert len(result.matches) == 3


def test_duplicate_ids_in_explicit_catalog_rejected(assembler, item_factory):
    catalog = [item_factory(id="dup"), item_factory(id="dup", brand="Hayward")]
    with pytest.raises(CatalogLoadError):
        assembler.assemble(ConstraintSet(environment="in-ground"), catalog=catalog)


class TestDefaultTurnover:
    def test_configured_default_applies_when_unset(self, repository, registry):
        assembler = WizardResultAssembler(
            repository, registry=registry, config=WizardConfig(default_turnover_hours=6)
        )
        result = assembler.assemble(ConstraintSet(pool_volume=18000))
        assert result.inputs.desired_turnover_hours == 6
        assert result.calculated_flow_rate == 50.0
        assert result.maintenance_reminder.endswith("every 6 hours.")

    def test_explicit_answer_wins(self, repository, registry):
        assembler = WizardResultAssembler(
            repository, registry=registry, config=WizardConfig(default_turnover_hours=6)
        )
        result = assembler.assemble(ConstraintSet(pool_volume=18000, desired_turnover_hours=8))
        assert result.calculated_flow_rate == 37.5

    def test_explicit_none_is_kept(self, repository, config):
        result = WizardResultAssembler(repository, config=config).assemble(
            ConstraintSet(pool_volume=18000, desired_turnover_hours=None)
        )
        assert result.calculated_flow_rate is None
        assert result.maintenance_reminder is None


class TestMaintenanceReminder:
    def test_requires_volume(self):
        assert build_maintenance_reminder(ConstraintSet()) is None

    def test_requires_turnover(self):
        assert build_maintenance_reminder(
            ConstraintSet(pool_volume=15000, desired_turnover_hours=None)
        ) is None

    def test_fractional_hours(self):
        reminder = build_maintenance_reminder(
            ConstraintSet(pool_volume=1500, desired_turnover_hours=4.5)
        )
        assert reminder.endswith("circulates 1,500 gallons every 4.5 hours.")

    def test_flow_rate_and_reminder_absent_without_volume(self, assembler):
        result = assembler.assemble(ConstraintSet(environment="spa"))
        assert result.calculated_flow_rate is None
        assert result.maintenance_reminder is None


def test_module_level_assemble(catalog, calendar, registry, config, pentair_constraints):
    result = assemble(
        pentair_constraints,
        catalog,
        calendar=calendar,
        registry=registry,
        config=config,
        as_of=SUMMER,
    )
    assert result.matches[0].result.score == 90
    assert result.calculated_flow_rate == 41.7
