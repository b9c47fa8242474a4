"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Handlers are built per
call, each with its own unit of work, so concurrent requests never share
transaction state.
"""

from __future__ import annotations

from storefront.application.add_service_order import AddServiceOrderHandler
from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.cart_total import CartTotalsBreakdownHandler, ShowCartHandler
from storefront.application.change_order_status import ChangeOrderStatusHandler
from storefront.application.confirm_payment import ConfirmPaymentHandler
from storefront.application.create_pending_order import CreatePendingOrderHandler
from storefront.application.handle_payment_webhook import PaymentWebhookHandler
from storefront.application.notify_restock import NotifyRestockHandler, RestockWorker
from storefront.application.ports import Mailer, PaymentGateway
from storefront.application.restock import RestockQueue
from storefront.application.restock_subscription import (
    SubscribeRestockHandler,
    UnsubscribeRestockHandler,
)
from storefront.application.set_inventory import SetInventoryHandler
from storefront.application.show_catalog import ListCatalogHandler
from storefront.application.show_order import ListCustomerOrdersHandler, ShowOrderHandler
from storefront.application.start_checkout import StartCheckoutHandler
from storefront.application.update_cart import (
    ClearCartHandler,
    RemoveCartItemHandler,
    UpdateCartQuantityHandler,
)
from storefront.config import Settings, get_settings
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.gateway.stripe_gateway import StripeGateway
from storefront.infrastructure.mail.log_mailer import LogMailer
from storefront.infrastructure.mail.smtp_mailer import SmtpMailer
from storefront.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork


def build_gateway(settings: Settings) -> PaymentGateway:
    return StripeGateway(
        api_key=settings.stripe_api_key,
        webhook_secret=settings.stripe_webhook_secret,
        tolerance_seconds=settings.webhook_tolerance_seconds,
    )


def build_mailer(settings: Settings) -> Mailer:
    if not settings.smtp_host:
        return LogMailer()
    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        sender=settings.mail_from,
        sender_name=settings.mail_from_name,
        username=settings.smtp_username,
        password=settings.smtp_password,
        use_tls=settings.smtp_use_tls,
    )


class Container:

    def __init__(
        self,
        settings: Settings | None = None,
        gateway: PaymentGateway | None = None,
        mailer: Mailer | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.gateway = gateway or build_gateway(self.settings)
        self.mailer = mailer or build_mailer(self.settings)
        self.restock_queue = RestockQueue()
        self.notify_restock = NotifyRestockHandler(
            self.uow, self.mailer, self.settings.base_url
        )
        self.restock_worker = RestockWorker(self.restock_queue, self.notify_restock)

    def uow(self) -> UnitOfWork:
        return JsonUnitOfWork(self.settings.data_file)

    # --- Cart -----------------------------------------------------------------

    def add_to_cart(self) -> AddToCartHandler:
        return AddToCartHandler(self.uow())

    def add_service_order(self) -> AddServiceOrderHandler:
        return AddServiceOrderHandler(self.uow())

    def update_cart_quantity(self) -> UpdateCartQuantityHandler:
        return UpdateCartQuantityHandler(self.uow())

    def remove_cart_item(self) -> RemoveCartItemHandler:
        return RemoveCartItemHandler(self.uow())

    def clear_cart(self) -> ClearCartHandler:
        return ClearCartHandler(self.uow())

    def cart_totals_breakdown(self) -> CartTotalsBreakdownHandler:
        return CartTotalsBreakdownHandler(self.uow(), self.settings.currency)

    def show_cart(self) -> ShowCartHandler:
        return ShowCartHandler(self.uow(), self.settings.currency)

    # --- Orders ---------------------------------------------------------------

    def create_pending_order(self) -> CreatePendingOrderHandler:
        return CreatePendingOrderHandler(self.uow())

    def start_checkout(self) -> StartCheckoutHandler:
        return StartCheckoutHandler(
            self.uow(), self.gateway, self.settings.zero_decimal_currencies
        )

    def confirm_payment(self) -> ConfirmPaymentHandler:
        return ConfirmPaymentHandler(self.uow())

    def cancel_order(self) -> CancelOrderHandler:
        return CancelOrderHandler(self.uow())

    def change_order_status(self) -> ChangeOrderStatusHandler:
        return ChangeOrderStatusHandler(self.uow(), self.restock_queue)

    def show_order(self) -> ShowOrderHandler:
        return ShowOrderHandler(self.uow())

    def list_orders(self) -> ListCustomerOrdersHandler:
        return ListCustomerOrdersHandler(self.uow())

    def payment_webhook(self) -> PaymentWebhookHandler:
        return PaymentWebhookHandler(self.uow(), self.gateway, self.confirm_payment())

    # --- Inventory and restock ------------------------------------------------

    def list_catalog(self) -> ListCatalogHandler:
        return ListCatalogHandler(self.uow())

    def set_inventory(self) -> SetInventoryHandler:
        return SetInventoryHandler(self.uow(), self.restock_queue)

    def subscribe_restock(self) -> SubscribeRestockHandler:
        return SubscribeRestockHandler(self.uow())

    def unsubscribe_restock(self) -> UnsubscribeRestockHandler:
        return UnsubscribeRestockHandler(self.uow())
