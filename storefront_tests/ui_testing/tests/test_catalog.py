"""
================================================================================
Catalog UI Tests (Async / Playwright)
================================================================================

Journeys on the category listings:
  - Hovering a product reveals its actions (Women)
  - Sale products show a struck-through old price next to the special price
  - Colour and price filters narrow the Men listing
  - Sorting by price and adding the two cheapest products to the wishlist

================================================================================
"""

import allure
import pytest

from storefront_tests.ui_testing.pages import HomePage, MenPage, SalePage, WomenPage


@allure.epic("Storefront")
@allure.feature("Catalog")
class TestCatalog:
    """Category listing journeys (async)."""

    @allure.story("Hover")
    @allure.title("Hovering the last Women product reveals its actions")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.regression
    @pytest.mark.catalog
    @pytest.mark.asyncio
    async def test_hover_reveals_product_actions(self, home_page: HomePage, women_page: WomenPage):
        await home_page.open()
        await home_page.go_to_all_women()
        await women_page.wait_for_page_load()

        await women_page.hover_last_product()

        await women_page.wait_for_last_product_actions_visible()
        assert await women_page.are_last_product_actions_visible()

    @allure.story("Sale")
    @allure.title("Sale products show old and special prices with distinct styles")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.catalog
    @pytest.mark.asyncio
    async def test_sale_price_styles(self, home_page: HomePage, sale_page: SalePage):
        await home_page.open()
        await home_page.go_to_sale()

        products = await sale_page.get_sale_products()
        assert products, "Sale listing is empty"

        for position, product in enumerate(products, start=1):
            with allure.step(f"Check prices of sale product #{position}"):
                assert await sale_page.has_both_prices(product)

                old_price = await sale_page.get_old_price(product)
                special_price = await sale_page.get_special_price(product)

                assert "line-through" in await sale_page.get_text_decoration(old_price)
                assert "line-through" not in await sale_page.get_text_decoration(special_price)
                assert await sale_page.get_color(old_price) != await sale_page.get_color(special_price)

    @allure.story("Filters")
    @allure.title("Black colour filter marks every product's black swatch")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.catalog
    @pytest.mark.asyncio
    async def test_color_filter(self, home_page: HomePage, men_page: MenPage):
        await home_page.open()
        await home_page.go_to_all_men()
        await men_page.wait_for_page_load()

        await men_page.apply_black_color_filter()

        products = await men_page.get_all_products()
        assert products
        for product in products:
            assert await men_page.has_black_color_selected_with_border(product)

    @allure.story("Filters")
    @allure.title("Price filter keeps only products priced $0.00 - $99.99")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.regression
    @pytest.mark.catalog
    @pytest.mark.asyncio
    async def test_price_filter(self, home_page: HomePage, men_page: MenPage):
        await home_page.open()
        await home_page.go_to_all_men()
        await men_page.wait_for_page_load()
        await men_page.apply_black_color_filter()

        await men_page.apply_price_filter_0_to_99()

        prices = await men_page.get_prices()
        assert prices
        assert await men_page.all_products_price_between()

    @allure.story("Sorting & Wishlist")
    @allure.title("Women products sort by price and the first two go to the wishlist")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.e2e
    @pytest.mark.catalog
    @pytest.mark.asyncio
    async def test_sort_by_price_and_add_to_wishlist(
        self,
        signed_in_home: HomePage,
        women_page: WomenPage,
    ):
        with allure.step("Sort Women listing by price"):
            await signed_in_home.go_to_all_women()
            await women_page.sort_by_price_ascending()
            assert await women_page.are_prices_sorted_ascending()

        with allure.step("Add the two cheapest products to the wishlist"):
            await women_page.add_product_to_wishlist_by_index(0)
            await women_page.add_product_to_wishlist_by_index(1)

        with allure.step("Verify the wishlist counter"):
            label = await signed_in_home.wait_for_wishlist_item_count(2)
            assert label.endswith("(2 items)")
