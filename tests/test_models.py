"""Tests for warehouse and mapping models."""

import logging

import pytest
from pydantic import ValidationError

from warehouse_mapping.models.mapping import (
    MappingStrategy,
    ProductWarehouseMapping,
    UnknownStrategyError,
    parse_strategy,
)
from warehouse_mapping.models.warehouse import (
    Warehouse,
    WarehouseType,
    coerce_warehouse_id,
    division_ids,
    index_by_id,
    zonal_ids,
)


@pytest.fixture
def catalog() -> list[Warehouse]:
    """A small mixed catalog."""
    return [
        Warehouse(id=1, type="zonal", name="North Zone", location="Delhi"),
        Warehouse(id=2, type="division", name="Noida Division"),
        Warehouse(id=3, type="zonal", name="South Zone"),
        Warehouse(id=4, type="division", name="Pune Division"),
    ]


class TestCoerceWarehouseId:
    """Tests for coerce_warehouse_id."""

    def test_int_passthrough(self) -> None:
        """Test integers are returned unchanged."""
        assert coerce_warehouse_id(7) == 7

    def test_numeric_string(self) -> None:
        """Test numeric strings from forms become ints."""
        assert coerce_warehouse_id("12") == 12
        assert coerce_warehouse_id(" 12 ") == 12

    def test_non_numeric_string_kept(self) -> None:
        """Test non-numeric ids stay strings."""
        assert coerce_warehouse_id("WH-A") == "WH-A"

    def test_empty_rejected(self) -> None:
        """Test empty ids are rejected."""
        with pytest.raises(ValueError, match="must not be empty"):
            coerce_warehouse_id("  ")

    def test_bool_rejected(self) -> None:
        """Test booleans are not accepted as ids."""
        with pytest.raises(ValueError):
            coerce_warehouse_id(True)

    def test_zero(self) -> None:
        """Test "0" is canonical and becomes an int."""
        assert coerce_warehouse_id("0") == 0

    @pytest.mark.parametrize("value", ["007", "07", "00"])
    def test_leading_zeros_kept(self, value: str) -> None:
        """Test ids with leading zeros are not collapsed onto another id."""
        assert coerce_warehouse_id(value) == value

    def test_padded_and_plain_ids_differ(self) -> None:
        """Test "07" and "7" stay distinct warehouses."""
        assert Warehouse(id="07", type="zonal", name="A").id != Warehouse(
            id="7", type="zonal", name="B"
        ).id

    @pytest.mark.parametrize("value", ["²", "١٢", "１２"])
    def test_non_ascii_digits_kept(self, value: str) -> None:
        """Test Unicode digits are not converted to ints."""
        assert coerce_warehouse_id(value) == value

    def test_padded_id_sent_verbatim(self) -> None:
        """Test a padded id survives into the payload unchanged."""
        mapping = ProductWarehouseMapping(primary_warehouses=["007"])
        assert mapping.to_payload()["primary_warehouses"] == ["007"]


class TestWarehouse:
    """Tests for the Warehouse model."""

    def test_parse_catalog_item(self) -> None:
        """Test parsing a catalog entry as returned by the service."""
        warehouse = Warehouse.model_validate(
            {"id": "5", "type": "zonal", "name": "East Zone", "parent_warehouse_id": "1"}
        )
        assert warehouse.id == 5
        assert warehouse.type == WarehouseType.ZONAL
        assert warehouse.parent_warehouse_id == 1
        assert warehouse.location is None

    def test_unknown_type_rejected(self) -> None:
        """Test that only zonal and division types are accepted."""
        with pytest.raises(ValidationError):
            Warehouse.model_validate({"id": 1, "type": "central", "name": "Hub"})

    def test_repr(self) -> None:
        """Test string representation."""
        warehouse = Warehouse(id=1, type="zonal", name="North Zone")
        assert repr(warehouse) == "<Warehouse(id=1, type='zonal', name='North Zone')>"

    def test_ids_by_type_keep_catalog_order(self, catalog: list[Warehouse]) -> None:
        """Test zonal and division id helpers."""
        assert zonal_ids(catalog) == [1, 3]
        assert division_ids(catalog) == [2, 4]

    def test_ids_by_type_empty_catalog(self) -> None:
        """Test id helpers on an empty catalog."""
        assert zonal_ids([]) == []
        assert division_ids([]) == []

    def test_index_by_id(self, catalog: list[Warehouse]) -> None:
        """Test id lookup."""
        index = index_by_id(catalog)
        assert index[4].name == "Pune Division"
        assert set(index) == {1, 2, 3, 4}


class TestParseStrategy:
    """Tests for parse_strategy."""

    @pytest.mark.parametrize("strategy", list(MappingStrategy))
    def test_known_values(self, strategy: MappingStrategy) -> None:
        """Test every strategy parses from its value."""
        assert parse_strategy(strategy.value) is strategy
        assert parse_strategy(strategy) is strategy

    def test_case_insensitive(self) -> None:
        """Test names are matched case-insensitively."""
        assert parse_strategy(" Zonal_Only ") is MappingStrategy.ZONAL_ONLY

    def test_legacy_aliases(self) -> None:
        """Test names used by the older product form."""
        assert parse_strategy("auto_zonal_to_division") is MappingStrategy.NATIONWIDE
        assert parse_strategy("selective_zonal") is MappingStrategy.ZONAL_WITH_FALLBACK
        assert (
            parse_strategy("selective_zonal_division")
            is MappingStrategy.ZONAL_WITH_FALLBACK
        )

    @pytest.mark.parametrize(
        ("stored", "expected"),
        [
            ("auto_zonal_to_division", MappingStrategy.NATIONWIDE),
            ("auto_central_to_zonal", MappingStrategy.NATIONWIDE),
            ("zonal", MappingStrategy.ZONAL_ONLY),
            ("selective_zonal", MappingStrategy.ZONAL_WITH_FALLBACK),
            ("selective_zonal_division", MappingStrategy.ZONAL_WITH_FALLBACK),
        ],
    )
    def test_stored_legacy_values(self, stored: str, expected: MappingStrategy) -> None:
        """Test every value the older product forms store."""
        assert parse_strategy(stored) is expected

    def test_unknown_rejected(self) -> None:
        """Test unknown names raise instead of falling through to custom."""
        with pytest.raises(UnknownStrategyError, match="regional"):
            parse_strategy("regional")

    def test_unknown_is_value_error(self) -> None:
        """Test UnknownStrategyError is a ValueError."""
        assert issubclass(UnknownStrategyError, ValueError)


class TestProductWarehouseMapping:
    """Tests for ProductWarehouseMapping."""

    def test_defaults(self) -> None:
        """Test a fresh mapping."""
        mapping = ProductWarehouseMapping()
        assert mapping.warehouse_mapping_type is MappingStrategy.NATIONWIDE
        assert mapping.primary_warehouses == []
        assert mapping.fallback_warehouses == []
        assert mapping.enable_fallback is True
        assert mapping.warehouse_notes == ""

    def test_from_empty_product(self) -> None:
        """Test seeding from a product with no mapping fields."""
        mapping = ProductWarehouseMapping.from_product({"id": 10, "name": "Rice"})
        assert mapping.warehouse_mapping_type is MappingStrategy.NATIONWIDE
        assert mapping.enable_fallback is True
        assert mapping.warehouse_notes == ""

    def test_from_product(self) -> None:
        """Test seeding from a product with stored mapping fields."""
        mapping = ProductWarehouseMapping.from_product(
            {
                "id": 10,
                "warehouse_mapping_type": "custom",
                "primary_warehouses": ["1", "3"],
                "fallback_warehouses": [2],
                "enable_fallback": False,
                "warehouse_notes": "Seasonal",
            }
        )
        assert mapping.warehouse_mapping_type is MappingStrategy.CUSTOM
        assert mapping.primary_warehouses == [1, 3]
        assert mapping.fallback_warehouses == [2]
        assert mapping.enable_fallback is False
        assert mapping.warehouse_notes == "Seasonal"

    def test_enable_fallback_only_false_when_explicit(self) -> None:
        """Test fallback stays on unless the product explicitly stores False."""
        assert ProductWarehouseMapping.from_product({"enable_fallback": None}).enable_fallback
        assert ProductWarehouseMapping.from_product({"enable_fallback": True}).enable_fallback
        assert not ProductWarehouseMapping.from_product(
            {"enable_fallback": False}
        ).enable_fallback

    def test_duplicate_ids_dropped(self) -> None:
        """Test pools never hold the same id twice."""
        mapping = ProductWarehouseMapping(primary_warehouses=[1, "1", 2, 1])
        assert mapping.primary_warehouses == [1, 2]

    def test_unknown_strategy_rejected(self) -> None:
        """Test unknown strategies fail validation."""
        with pytest.raises(ValidationError):
            ProductWarehouseMapping(warehouse_mapping_type="everywhere")

    def test_submitted_central_rejected(self) -> None:
        """Test input stays strict for values only tolerated when stored."""
        with pytest.raises(ValidationError):
            ProductWarehouseMapping(warehouse_mapping_type="central")

    @pytest.mark.parametrize(
        ("stored", "expected"),
        [
            ("auto_central_to_zonal", MappingStrategy.NATIONWIDE),
            ("zonal", MappingStrategy.ZONAL_ONLY),
            ("selective_zonal", MappingStrategy.ZONAL_WITH_FALLBACK),
        ],
    )
    def test_from_product_legacy_value(self, stored: str, expected: MappingStrategy) -> None:
        """Test products saved by the older forms open with their strategy."""
        mapping = ProductWarehouseMapping.from_product(
            {"id": 10, "warehouse_mapping_type": stored}
        )
        assert mapping.warehouse_mapping_type is expected

    @pytest.mark.parametrize("stored", ["central", "regional", ""])
    def test_from_product_unknown_value_falls_back(
        self, stored: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test an unparseable stored strategy opens as nationwide with a warning."""
        with caplog.at_level(logging.WARNING, logger="warehouse_mapping.models.mapping"):
            mapping = ProductWarehouseMapping.from_product(
                {"id": 10, "warehouse_mapping_type": stored, "primary_warehouses": [1]}
            )
        assert mapping.warehouse_mapping_type is MappingStrategy.NATIONWIDE
        assert mapping.primary_warehouses == [1]
        assert "unknown warehouse mapping type" in caplog.text

    def test_to_payload(self) -> None:
        """Test serialization for the inventory service."""
        mapping = ProductWarehouseMapping(
            warehouse_mapping_type="zonal_with_fallback",
            primary_warehouses=[1],
            fallback_warehouses=[2],
            enable_fallback=True,
            warehouse_notes="note",
        )
        assert mapping.to_payload() == {
            "warehouse_mapping_type": "zonal_with_fallback",
            "primary_warehouses": [1],
            "fallback_warehouses": [2],
            "enable_fallback": True,
            "warehouse_notes": "note",
        }

    def test_to_payload_drops_fallback_when_disabled(self) -> None:
        """Test the fallback pool is not sent while fallback is disabled."""
        mapping = ProductWarehouseMapping(
            warehouse_mapping_type="custom",
            primary_warehouses=[1],
            fallback_warehouses=[2],
            enable_fallback=False,
        )
        payload = mapping.to_payload()
        assert payload["fallback_warehouses"] == []
        assert payload["enable_fallback"] is False
        # Local selection is kept
        assert mapping.fallback_warehouses == [2]
