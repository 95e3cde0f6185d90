"""Shared request handling for the holdings JSON endpoints."""

import json
from typing import Any

from django.conf import settings
from django.http import HttpRequest, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

import structlog

from holdings.exceptions import ContractError, FxRateError
from holdings.services.valuation.allocation import parse_manual_assets
from holdings.services.valuation.contract_parser import parse_holding_contract
from holdings.services.valuation.fx import StaticFxRates
from holdings.utils.validation import InvalidInputError

logger = structlog.get_logger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class JsonPostView(View):
    """
    Base for endpoints that take a JSON body carrying a holding contract.
    Subclasses implement :meth:`handle`.

    Invalid input (bad JSON, unparsable contract, unknown option, bad rate)
    is answered with HTTP 400 and ``{"error": message}``.
    """

    http_method_names = ["post"]

    def post(self, request: HttpRequest) -> JsonResponse:
        try:
            body = self.load_body(request)
            return JsonResponse(self.handle(request, body))
        except (InvalidInputError, ContractError, FxRateError) as e:
            message = e.messages[0] if isinstance(e, InvalidInputError) else str(e)
            logger.warning(
                "holdings_request_rejected",
                path=request.path,
                error_type=type(e).__name__,
                error=message,
            )
            return JsonResponse({"error": message}, status=400)

    def handle(self, request: HttpRequest, body: dict[str, Any]) -> dict[str, Any]:
        """
        Hook for subclasses: build the JSON response body for a parsed request.

        Raise InvalidInputError, ContractError or FxRateError to answer 400.
        """
        raise NotImplementedError(f"{type(self).__name__} must implement handle()")

    def load_body(self, request: HttpRequest) -> dict[str, Any]:
        try:
            body = json.loads(request.body or b"{}")
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidInputError("Request body must be valid JSON") from None
        if not isinstance(body, dict):
            raise InvalidInputError("Request body must be a JSON object")
        return body

    def contract_from(self, body: dict[str, Any]):
        if "contract" not in body:
            raise InvalidInputError("contract is required")
        return parse_holding_contract(body["contract"])

    def fx_provider_from(self, body: dict[str, Any]) -> StaticFxRates:
        rates = body.get("rates") or {}
        if not isinstance(rates, dict):
            raise InvalidInputError("rates must be an object keyed FROM:TO")
        return StaticFxRates(rates)

    def manual_assets_from(self, body: dict[str, Any]):
        return parse_manual_assets(body.get("manualAssets"))

    @property
    def defaults(self) -> dict[str, Any]:
        return getattr(settings, "HOLDINGS_DEFAULTS", {})
