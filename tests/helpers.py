from cart_engine.models.cart import Address, CartItem
from cart_engine.models.product import Product


def make_product(product_id="p1", price=100, options=None, original_price=None, in_stock=True):
    return Product(
        id=product_id,
        name=f"Product {product_id}",
        price=price,
        original_price=original_price,
        options=options or [],
        in_stock=in_stock,
    )


def make_item(product_id="p1", price=100, quantity=1, option=None, item_id=None):
    product = make_product(product_id, price, options=[option] if option else None)
    return CartItem(
        id=item_id or f"{product_id}-{option.id if option else 'base'}",
        product=product,
        quantity=quantity,
        selected_option=option,
    )


def make_address(address_id="a1", serviceable=True, **overrides):
    fields = dict(
        id=address_id,
        address_line1="12 MG Road",
        city="Bengaluru",
        state="Karnataka",
        pincode="560001",
        phone="+91 9876543210",
        is_serviceable=serviceable,
    )
    fields.update(overrides)
    return Address(**fields)
