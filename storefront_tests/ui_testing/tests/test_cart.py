"""
================================================================================
Cart UI Tests (Async / Playwright)
================================================================================

Journeys:
  - Move wishlist products into the cart, change a quantity and check that
    the row subtotals add up to the grand total
  - Empty the cart row by row until the empty-cart message shows

================================================================================
"""

from decimal import Decimal

import allure
import pytest

from storefront_tests.ui_testing.pages import CartPage, HomePage, WishlistPage, WomenPage


ITEMS_TO_MOVE = 2


async def _ensure_wishlist_items(
    home: HomePage,
    women: WomenPage,
    wishlist: WishlistPage,
    needed: int,
) -> None:
    """Top the wishlist up from the price-sorted Women listing."""
    await home.go_to_my_wishlist()
    present = len(await wishlist.get_wishlist_items())
    if present >= needed:
        return

    await home.go_to_all_women()
    await women.sort_by_price_ascending()
    for index in range(needed - present):
        await women.add_product_to_wishlist_by_index(index)


@allure.epic("Storefront")
@allure.feature("Cart")
class TestCart:
    """Shopping cart journeys (async)."""

    @allure.story("Totals")
    @allure.title("Row subtotals add up to the grand total")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P0
    @pytest.mark.e2e
    @pytest.mark.cart
    @pytest.mark.asyncio
    async def test_cart_totals(
        self,
        signed_in_home: HomePage,
        women_page: WomenPage,
        wishlist_page: WishlistPage,
        cart_page: CartPage,
    ):
        with allure.step("Prepare wishlist"):
            await _ensure_wishlist_items(signed_in_home, women_page, wishlist_page, ITEMS_TO_MOVE)

        with allure.step(f"Move {ITEMS_TO_MOVE} wishlist products to the cart"):
            await signed_in_home.go_to_my_wishlist()
            added = await wishlist_page.add_first_n_products_to_cart(ITEMS_TO_MOVE)
            assert added == ITEMS_TO_MOVE

        with allure.step("Set the first row's quantity to 2"):
            await cart_page.open()
            await cart_page.set_first_item_quantity(2)

        with allure.step("Compare subtotals with the grand total"):
            subtotal_sum = await cart_page.get_sum_of_all_subtotals()
            grand_total = await cart_page.get_grand_total()
            assert isinstance(grand_total, Decimal)
            assert subtotal_sum == grand_total

    @allure.story("Removal")
    @allure.title("Removing every row leaves an empty cart")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.e2e
    @pytest.mark.cart
    @pytest.mark.asyncio
    async def test_empty_cart(
        self,
        signed_in_home: HomePage,
        women_page: WomenPage,
        wishlist_page: WishlistPage,
        cart_page: CartPage,
    ):
        await cart_page.open()
        if await cart_page.get_cart_item_count() == 0:
            with allure.step("Fill the cart from the wishlist"):
                await _ensure_wishlist_items(signed_in_home, women_page, wishlist_page, 1)
                await signed_in_home.go_to_my_wishlist()
                await wishlist_page.add_first_n_products_to_cart(1)
                await cart_page.open()

        assert await cart_page.get_cart_item_count() > 0

        await cart_page.empty_cart()

        assert await cart_page.get_cart_item_count() == 0
        assert await cart_page.is_cart_empty_message_visible()
