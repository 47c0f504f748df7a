"""
Cart/checkout view state.

CartCheckout binds the current user, the cart and checkout services and
the form into one immutable snapshot. After every successful mutation
the snapshot is rebuilt from the store; nothing is merged optimistically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from kungfu import Result, Ok, Error

from shoply._errors import Errors, ShopError
from shoply._types import Cents, ProductId
from shoply.auth import CurrentUser
from shoply.cart import CartService
from shoply.checkout import CheckoutForm, CheckoutService
from shoply.domain import CartLine, Direction, Order, Product, cart_total

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CartCheckoutState:
    cart_items: tuple[CartLine, ...] = ()
    address: str = ""
    city: str = ""
    postal_code: str = ""
    total: Cents = 0
    is_form_valid: bool = False
    is_loading: bool = False


class CartCheckout:
    def __init__(
        self,
        user: CurrentUser,
        cart: CartService,
        checkout: CheckoutService,
        form: CheckoutForm | None = None,
    ) -> None:
        self._user = user
        self._cart = cart
        self._checkout = checkout
        self._form = form if form is not None else CheckoutForm()
        self._in_flight = False
        self._state = CartCheckoutState()

    @property
    def state(self) -> CartCheckoutState:
        return self._state

    @property
    def form(self) -> CheckoutForm:
        return self._form

    # ── read model ────────────────────────────────────────────────────────────

    def _sync_form(self) -> None:
        self._state = replace(
            self._state,
            address=self._form.address,
            city=self._form.city,
            postal_code=self._form.postal_code,
            is_form_valid=self._form.is_valid,
        )

    async def refresh(self) -> Result[list[CartLine], ShopError]:
        """Reload lines from the store and recompute the total."""
        result = await self._cart.get_cart_items(self._user.current_user())
        match result:
            case Ok(lines):
                self._state = replace(self._state, cart_items=tuple(lines), total=cart_total(lines))
            case Error(e):
                logger.warning("Cart refresh failed: %s", e)
                self._state = replace(self._state, cart_items=(), total=0)
        return result

    async def _after[T](self, result: Result[T, ShopError]) -> Result[T, ShopError]:
        if isinstance(result, Ok):
            await self.refresh()
        return result

    # ── cart actions ──────────────────────────────────────────────────────────

    async def add_to_cart(self, product: Product) -> Result[None, ShopError]:
        return await self._after(
            await self._cart.add_to_cart(self._user.current_user(), product)
        )

    async def update_quantity(
        self, product_id: ProductId, direction: Direction
    ) -> Result[None, ShopError]:
        return await self._after(
            await self._cart.update_quantity(self._user.current_user(), product_id, direction)
        )

    async def delete_from_cart(self, product_id: ProductId) -> Result[None, ShopError]:
        return await self._after(
            await self._cart.delete_from_cart(self._user.current_user(), product_id)
        )

    async def clear_cart(self) -> Result[None, ShopError]:
        return await self._after(await self._cart.clear_cart(self._user.current_user()))

    # ── form ──────────────────────────────────────────────────────────────────

    def update_address(self, value: str) -> None:
        self._form.update_address(value)
        self._sync_form()

    def update_city(self, value: str) -> None:
        self._form.update_city(value)
        self._sync_form()

    def update_postal_code(self, value: str) -> bool:
        accepted = self._form.update_postal_code(value)
        self._sync_form()
        return accepted

    # ── checkout ──────────────────────────────────────────────────────────────

    async def place_order(self) -> Result[Order, ShopError]:
        """
        Place an order from the stored cart and the form.

        One submission at a time. On success the cart is cleared and the
        form reset; a failed clear is logged and the order still stands.
        """
        if self._in_flight:
            return Error(Errors.submit_in_progress())
        if not self._form.begin_submit():
            return Error(Errors.invalid_order("Shipping details are incomplete"))

        # the guard is taken before the first await
        self._in_flight = True
        self._state = replace(self._state, is_loading=True)
        owner = self._user.current_user()
        try:
            match await self.refresh():
                case Error(e):
                    return Error(e)
                case Ok(lines):
                    pass

            result = await self._checkout.place_order(owner, self._form.draft(lines))

            match result:
                case Ok(order):
                    match await self._cart.clear_cart(owner):
                        case Error(e):
                            logger.error("Order %s placed but cart not cleared: %s", order.id, e)
                        case Ok(_):
                            pass
                    self._form.reset()
                    await self.refresh()
                case Error(e):
                    logger.warning("Order placement failed: %s", e)

            return result
        finally:
            self._form.end_submit()
            self._in_flight = False
            self._state = replace(self._state, is_loading=False)
            self._sync_form()


__all__ = ("CartCheckoutState", "CartCheckout")
