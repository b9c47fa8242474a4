"""Application services: live cart quote (query).

This is a *live* price: it follows the catalog.  An order's total is
frozen at creation and never recomputed from here.  Prescription fees
are the exception: a line keeps the fee it was added with.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from storefront.application.dto import CartDTO, CartLineDTO
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.catalog import CatalogItem, ServiceAddOn, unit_price
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class CartTotals:
    subtotal: Money  # items, fitted lenses and services
    prescription_fees: Money
    grand_total: Money


@dataclass(frozen=True)
class _PricedLine:
    line: CartLine
    item: CatalogItem
    lens: CatalogItem | None
    service: ServiceAddOn | None
    base_price: Money  # per unit, fees excluded

    @property
    def fees(self) -> Money:
        if self.line.prescription_fee is None:
            return Money.zero(self.base_price.currency)
        return self.line.prescription_fee * self.line.quantity

    @property
    def total(self) -> Money:
        return self.base_price * self.line.quantity + self.fees


class CartTotalsBreakdownHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(self, user_id: str) -> CartTotals:
        with self._uow:
            cart = self._uow.carts.get_by_user_id(user_id)
            priced = list(_priced_lines(self._uow, cart)) if cart is not None else []
            return _totals(priced, self._currency)


class CalculateCartTotalHandler:
    """Grand total of the live quote; zero for a missing or empty cart."""

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._breakdown = CartTotalsBreakdownHandler(uow, currency)

    def handle(self, user_id: str) -> Money:
        return self._breakdown.handle(user_id).grand_total


class ShowCartHandler:

    def __init__(self, uow: UnitOfWork, currency: str = DEFAULT_CURRENCY) -> None:
        self._uow = uow
        self._currency = currency

    def handle(self, user_id: str) -> CartDTO:
        with self._uow:
            cart = self._uow.carts.get_by_user_id(user_id)
            priced = list(_priced_lines(self._uow, cart)) if cart is not None else []

        totals = _totals(priced, self._currency)
        lines = [
            CartLineDTO(
                line_id=p.line.id,
                item_id=p.line.item_id,
                name=p.item.name,
                lens_name=p.lens.name if p.lens is not None else None,
                service_name=p.service.name if p.service is not None else None,
                quantity=p.line.quantity,
                unit_price=str(p.base_price),
                prescription_fee=(
                    str(p.line.prescription_fee) if p.line.prescription_fee is not None else None
                ),
                line_total=str(p.total),
            )
            for p in priced
        ]
        return CartDTO(
            user_id=user_id,
            lines=lines,
            subtotal=str(totals.subtotal),
            prescription_fees=str(totals.prescription_fees),
            total=str(totals.grand_total),
        )


def _totals(priced: list[_PricedLine], currency: str) -> CartTotals:
    subtotal = Money.zero(currency)
    fees = Money.zero(currency)
    for p in priced:
        subtotal = subtotal + p.base_price * p.line.quantity
        fees = fees + p.fees
    return CartTotals(subtotal=subtotal, prescription_fees=fees, grand_total=subtotal + fees)


def _priced_lines(uow: UnitOfWork, cart: Cart) -> Iterator[_PricedLine]:
    """Price every line whose items still exist; the rest are skipped."""
    for line in cart.lines:
        item = uow.catalog.get_by_id(line.item_id)
        if item is None:
            continue
        lens = None
        if line.lens_id is not None:
            lens = uow.catalog.get_by_id(line.lens_id)
            if lens is None:
                continue
        service = (
            uow.services.get_by_id(line.service_id)
            if line.service_id is not None
            else None
        )
        yield _PricedLine(line, item, lens, service, unit_price(item, service, lens))
