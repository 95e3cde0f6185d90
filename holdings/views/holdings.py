from typing import Any

from django.http import HttpRequest

from holdings.presenters.holdings_view import HoldingsViewBuilder, HoldingsViewState
from holdings.presenters.serializers import serialize_view_model
from holdings.services.valuation.types import SortConfig
from holdings.utils.validation import (
    validate_group_by,
    validate_grouping_mode,
    validate_hide_empty,
    validate_sort_direction,
    validate_value_in,
    validate_view_mode,
)

from .base import JsonPostView


class HoldingsView(JsonPostView):
    """
    Full holdings page model for a posted contract.

    Query parameters select the view state; anything not supplied falls back
    to ``settings.HOLDINGS_DEFAULTS``.
    """

    def handle(self, request: HttpRequest, body: dict[str, Any]) -> dict[str, Any]:
        contract = self.contract_from(body)
        state = self.state_from(request)

        builder = HoldingsViewBuilder(fx_provider=self.fx_provider_from(body))
        view_model = builder.build(
            contract,
            state,
            display_currency=body.get("displayCurrency") or None,
            manual_assets=self.manual_assets_from(body),
        )
        return serialize_view_model(view_model)

    def state_from(self, request: HttpRequest) -> HoldingsViewState:
        params = request.GET
        base = HoldingsViewState.from_defaults(self.defaults)

        sort_key = params.get("sort") or base.sort_config.key
        return HoldingsViewState(
            view_mode=validate_view_mode(params.get("view"), base.view_mode),
            sort_config=SortConfig(
                key=sort_key,
                direction=validate_sort_direction(
                    params.get("direction"), base.sort_config.direction
                ),
            ),
            group_by=validate_group_by(params.get("groupBy"), base.group_by),
            value_in=validate_value_in(params.get("valueIn"), base.value_in),
            hide_empty=validate_hide_empty(params.get("hideEmpty"), base.hide_empty),
            allocation_group_by=validate_grouping_mode(params.get("allocationGroupBy")),
            excluded_categories=frozenset(params.getlist("exclude")),
        )
