"""Tests for strategy selection."""

import pytest

from warehouse_mapping.models.mapping import MappingStrategy, UnknownStrategyError
from warehouse_mapping.models.warehouse import Warehouse
from warehouse_mapping.services.strategy import (
    StrategyDefaults,
    is_pool_editable,
    select_strategy,
)


@pytest.fixture
def catalog() -> list[Warehouse]:
    """Two zonal and two division warehouses, interleaved."""
    return [
        Warehouse(id=1, type="zonal", name="North Zone"),
        Warehouse(id=2, type="division", name="Noida Division"),
        Warehouse(id=3, type="zonal", name="South Zone"),
        Warehouse(id=4, type="division", name="Pune Division"),
    ]


class TestSelectStrategy:
    """Tests for select_strategy."""

    def test_nationwide_uses_whole_catalog(self, catalog: list[Warehouse]) -> None:
        """Test nationwide puts zonal in primary and division in fallback."""
        defaults = select_strategy("nationwide", catalog)
        assert defaults.primary == [1, 3]
        assert defaults.fallback == [2, 4]
        assert defaults.enable_fallback is True

    def test_nationwide_forces_fallback_on(self, catalog: list[Warehouse]) -> None:
        """Test nationwide enables fallback even if it was off."""
        defaults = select_strategy(
            MappingStrategy.NATIONWIDE, catalog, current_enable_fallback=False
        )
        assert defaults.enable_fallback is True

    @pytest.mark.parametrize("strategy", ["zonal_only", "division_only"])
    def test_single_tier_strategies(
        self, catalog: list[Warehouse], strategy: str
    ) -> None:
        """Test single-tier strategies start empty with fallback off."""
        defaults = select_strategy(strategy, catalog, current_enable_fallback=True)
        assert defaults == StrategyDefaults(primary=[], fallback=[], enable_fallback=False)

    @pytest.mark.parametrize("strategy", ["zonal_with_fallback", "custom"])
    @pytest.mark.parametrize("current", [True, False])
    def test_manual_strategies_keep_fallback_flag(
        self, catalog: list[Warehouse], strategy: str, current: bool
    ) -> None:
        """Test manual strategies clear pools but keep the fallback flag."""
        defaults = select_strategy(strategy, catalog, current_enable_fallback=current)
        assert defaults.primary == []
        assert defaults.fallback == []
        assert defaults.enable_fallback is current

    @pytest.mark.parametrize("strategy", list(MappingStrategy))
    def test_empty_catalog(self, strategy: MappingStrategy) -> None:
        """Test every strategy resolves to empty pools on an empty catalog."""
        defaults = select_strategy(strategy, [])
        assert defaults.primary == []
        assert defaults.fallback == []

    def test_legacy_alias(self, catalog: list[Warehouse]) -> None:
        """Test legacy names resolve like their modern strategy."""
        assert select_strategy("auto_zonal_to_division", catalog) == select_strategy(
            "nationwide", catalog
        )

    def test_unknown_strategy(self, catalog: list[Warehouse]) -> None:
        """Test unknown strategies are rejected."""
        with pytest.raises(UnknownStrategyError):
            select_strategy("everywhere", catalog)

    def test_accepts_generator_catalog(self, catalog: list[Warehouse]) -> None:
        """Test the catalog may be any iterable."""
        defaults = select_strategy("nationwide", (w for w in catalog))
        assert defaults.primary == [1, 3]
        assert defaults.fallback == [2, 4]

    def test_results_are_fresh_lists(self, catalog: list[Warehouse]) -> None:
        """Test repeated selections do not share pool lists."""
        first = select_strategy("custom", catalog)
        second = select_strategy("custom", catalog)
        assert first.primary is not second.primary


class TestIsPoolEditable:
    """Tests for is_pool_editable."""

    def test_nationwide_not_editable(self) -> None:
        """Test nationwide pools are derived, not edited."""
        assert is_pool_editable("nationwide") is False

    @pytest.mark.parametrize(
        "strategy", ["zonal_with_fallback", "zonal_only", "division_only", "custom"]
    )
    def test_other_strategies_editable(self, strategy: str) -> None:
        """Test all other strategies allow manual selection."""
        assert is_pool_editable(strategy) is True
