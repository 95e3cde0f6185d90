from typing import Any

from django.http import HttpRequest

from holdings.domain.money import ValueIn
from holdings.presenters.holdings_view import HoldingsViewBuilder
from holdings.presenters.serializers import serialize_slice
from holdings.services.valuation.types import GroupingMode
from holdings.utils.validation import validate_grouping_mode, validate_value_in

from .base import JsonPostView


class AllocationView(JsonPostView):
    """Allocation slices only, for chart widgets that do not need the table."""

    def handle(self, request: HttpRequest, body: dict[str, Any]) -> dict[str, Any]:
        contract = self.contract_from(body)
        grouping_mode = validate_grouping_mode(
            request.GET.get("groupingMode"), GroupingMode.CATEGORY
        )
        default_value_in = ValueIn(self.defaults.get("value_in", ValueIn.PORTFOLIO))
        value_in = validate_value_in(request.GET.get("valueIn"), default_value_in)

        builder = HoldingsViewBuilder(fx_provider=self.fx_provider_from(body))
        slices, fx_rate = builder.build_allocation(
            contract,
            grouping_mode=grouping_mode,
            value_in=value_in,
            display_currency=body.get("displayCurrency") or None,
            manual_assets=self.manual_assets_from(body),
        )
        return {
            "groupingMode": str(grouping_mode),
            "valueIn": str(value_in),
            "fxRate": float(fx_rate) if fx_rate is not None else None,
            "slices": [serialize_slice(s) for s in slices],
            "totalValue": sum(s.value for s in slices),
        }
