"""
Cart State Store

Single owner of the CartState. Every mutation builds the next state from a
copy, recomputes the summary with the pricing engine and commits in one
synchronous step, so a stale or partial summary is never observable.
Persistence happens after the commit and never blocks or rolls it back.
"""

import logging
from typing import Callable, Optional

from ..core.errors import CartItemNotFoundError
from ..models.cart import Address, CartItem, CartState, Coupon, DeliveryOption, OrderSummary
from .merge import resolve_add
from .persistence import CartPersister
from .pricing import DEFAULT_PRICING_RULES, PricingRules, compute_summary

logger = logging.getLogger(__name__)

StateListener = Callable[[CartState], None]


class CartStore:
    """In-memory cart state with recompute-on-commit"""

    def __init__(
        self,
        rules: PricingRules = DEFAULT_PRICING_RULES,
        persister: Optional[CartPersister] = None,
    ):
        self.rules = rules
        self.persister = persister
        self._state = CartState()
        self._revision = 0
        self._listeners: list[StateListener] = []

    # ==================== Reads ====================

    @property
    def state(self) -> CartState:
        """Read-only snapshot of the current state"""
        return self._state.model_copy(deep=True)

    @property
    def revision(self) -> int:
        """Number of user mutations committed so far"""
        return self._revision

    def get_item(self, item_id: str) -> Optional[CartItem]:
        item = next((i for i in self._state.items if i.id == item_id), None)
        return item.model_copy(deep=True) if item else None

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with a snapshot after each commit"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==================== Item mutations ====================

    def add_item(self, item: CartItem) -> CartState:
        """Add a line, merging into an existing line with the same identity"""
        state = self._draft()
        state.items = resolve_add(state.items, item)
        return self._commit(state, f"add {item.product_id} x{item.quantity}")

    def remove_item(self, item_id: str) -> CartState:
        state = self._draft()
        self._require_item(state, item_id)
        state.items = [i for i in state.items if i.id != item_id]
        return self._commit(state, f"remove {item_id}")

    def remove_item_by_identity(self, product_id: str, option_id: Optional[str] = None) -> CartState:
        identity = (product_id, option_id)
        item = next((i for i in self._state.items if i.identity == identity), None)
        if item is None:
            raise CartItemNotFoundError(f"{product_id}/{option_id}")
        return self.remove_item(item.id)

    def update_quantity(self, item_id: str, quantity: int) -> CartState:
        """Set a line's quantity; zero or less removes the line"""
        state = self._draft()
        item = self._require_item(state, item_id)

        if quantity <= 0:
            state.items = [i for i in state.items if i.id != item_id]
        else:
            state.items = [
                i.model_copy(update={"quantity": quantity}) if i is item else i
                for i in state.items
            ]
        return self._commit(state, f"set {item_id} quantity={quantity}")

    # ==================== Coupon / delivery mutations ====================

    def apply_coupon(self, coupon: Coupon) -> CartState:
        state = self._draft()
        state.applied_coupon = coupon
        return self._commit(state, f"apply coupon {coupon.code}")

    def remove_coupon(self) -> CartState:
        if self._state.applied_coupon is None:
            return self.state
        state = self._draft()
        state.applied_coupon = None
        return self._commit(state, "remove coupon")

    def set_delivery_option(self, option: DeliveryOption) -> CartState:
        state = self._draft()
        state.delivery_option = option
        return self._commit(state, f"delivery option {option.type.value}")

    def set_selected_address(self, address: Address) -> CartState:
        state = self._draft()
        state.selected_address = address
        return self._commit(state, f"address {address.id}")

    def set_delivery_time(self, delivery_time: str) -> CartState:
        state = self._draft()
        state.delivery_time = delivery_time
        return self._commit(state, f"delivery time {delivery_time}")

    def select_address(self, address: Address, delivery_time: Optional[str]) -> CartState:
        """Store an address with its serviceability verdict and delivery time in one commit"""
        state = self._draft()
        state.selected_address = address
        state.delivery_time = delivery_time
        return self._commit(
            state,
            f"address {address.id} serviceable={address.is_serviceable}",
        )

    # ==================== Whole-state mutations ====================

    def load(self, loaded: CartState) -> bool:
        """
        Replace the state with a persisted snapshot.

        Refused once a user mutation has been committed. The summary is
        recomputed rather than trusted, and nothing is written back.
        """
        if self._revision > 0:
            logger.warning(
                f"Ignoring cart load: {self._revision} mutation(s) already committed"
            )
            return False

        state = loaded.model_copy(deep=True)
        state.summary = self._price(state)
        self._state = state
        logger.info(f"Loaded cart with {len(state.items)} item(s)")
        self._notify()
        return True

    def clear(self) -> CartState:
        """Empty the cart and drop the persisted snapshot"""
        state = self._draft()
        state.items = []
        state.applied_coupon = None
        state.delivery_option = None
        state.summary = OrderSummary()
        self._state = state
        self._revision += 1
        logger.debug("Cart cleared")
        self._notify()
        if self.persister:
            self.persister.schedule_remove()
        return self.state

    # ==================== Internals ====================

    def _draft(self) -> CartState:
        return self._state.model_copy(deep=True)

    @staticmethod
    def _require_item(state: CartState, item_id: str) -> CartItem:
        item = next((i for i in state.items if i.id == item_id), None)
        if item is None:
            raise CartItemNotFoundError(item_id)
        return item

    def _price(self, state: CartState) -> OrderSummary:
        return compute_summary(
            state.items,
            state.applied_coupon,
            state.delivery_option,
            self.rules,
        )

    def _commit(self, state: CartState, description: str) -> CartState:
        state.summary = self._price(state)
        self._state = state
        self._revision += 1
        logger.debug(
            f"Cart commit #{self._revision} ({description}): "
            f"total_payable={state.summary.total_payable}"
        )
        self._notify()
        if self.persister:
            self.persister.schedule_save(self._state)
        return self.state

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.state)
            except Exception:
                logger.exception("Cart listener failed")
