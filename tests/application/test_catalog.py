"""Integration tests for the product and category use cases."""

import pytest

from storeadmin.application.add_product import AddProductHandler, VariantSpec
from storeadmin.application.delete_product import DeleteProductHandler
from storeadmin.application.list_products import ListProductsHandler
from storeadmin.application.manage_categories import (
    AddCategoryHandler,
    DeleteCategoryHandler,
    UpdateCategoryHandler,
)
from storeadmin.application.update_product import UpdateProductHandler
from storeadmin.domain.exceptions import DuplicateKeyError, EntityNotFoundError, ValidationError
from storeadmin.domain.model.category import Category, slugify
from storeadmin.domain.model.product import Product, ProductStatus, Variant
from storeadmin.domain.model.value_objects import Money
from tests.fakes import FakeCategoryRepository, FakeProductRepository


def _repos():
    products = FakeProductRepository(
        [Product(id="p-mug", sku="MUG", name="Coffee mug", price=Money.of("5.00"), stock=3,
                 category_id="c-home")],
        [Variant(id="v-mug-red", product_id="p-mug", sku="MUG-RED", stock=1)],
    )
    categories = FakeCategoryRepository([Category(id="c-home", name="Home", slug="home")])
    return products, categories


class TestAddProduct:

    def test_adds_product_with_variants(self):
        products, categories = _repos()
        product = AddProductHandler(products, categories).handle(
            sku="TEE",
            name="T-shirt",
            price="15",
            stock=4,
            category_id="c-home",
            variants=[VariantSpec("TEE-S", 2, {"Size": "S"}),
                      VariantSpec("TEE-L", 1, {"Size": "L"}, price="17")],
        )
        assert products.get_by_sku("TEE").stock == 4
        assert product.status == ProductStatus.ACTIVE
        variants = products.list_variants(product.id)
        assert {v.sku: v.stock for v in variants} == {"TEE-S": 2, "TEE-L": 1}
        assert products.get_variant_by_sku("TEE-L").price == Money.of("17")

    def test_duplicate_product_sku(self):
        products, _ = _repos()
        with pytest.raises(DuplicateKeyError, match="already used by product"):
            AddProductHandler(products).handle(sku="MUG", name="Mug 2", price="5")

    def test_sku_taken_by_variant(self):
        products, _ = _repos()
        with pytest.raises(DuplicateKeyError, match="used by a variant"):
            AddProductHandler(products).handle(sku="MUG-RED", name="Red", price="5")

    def test_repeated_variant_skus_save_nothing(self):
        products, _ = _repos()
        with pytest.raises(DuplicateKeyError, match="must be unique"):
            AddProductHandler(products).handle(
                sku="TEE", name="T-shirt", price="15",
                variants=[VariantSpec("TEE-S"), VariantSpec("TEE-S")],
            )
        assert products.get_by_sku("TEE") is None

    def test_negative_variant_stock_saves_nothing(self):
        products, _ = _repos()
        with pytest.raises(ValidationError, match="Insufficient stock"):
            AddProductHandler(products).handle(
                sku="TEE", name="T-shirt", price="15", variants=[VariantSpec("TEE-S", -1)],
            )
        assert products.get_by_sku("TEE") is None

    @pytest.mark.parametrize("kwargs, message", [
        ({"sku": "X", "name": " ", "price": "1"}, "name is required"),
        ({"sku": "", "name": "X", "price": "1"}, "SKU is required"),
        ({"sku": "X", "name": "X", "price": "0"}, "greater than zero"),
        ({"sku": "X", "name": "X", "price": "1", "stock": -2}, "cannot be negative"),
        ({"sku": "X", "name": "X", "price": "1", "status": "Archived"}, "Unknown product status"),
    ])
    def test_validation(self, kwargs, message):
        products, _ = _repos()
        with pytest.raises(ValidationError, match=message):
            AddProductHandler(products).handle(**kwargs)

    def test_unknown_category(self):
        products, categories = _repos()
        with pytest.raises(EntityNotFoundError, match="Category"):
            AddProductHandler(products, categories).handle(
                sku="X", name="X", price="1", category_id="c-nope"
            )


class TestUpdateAndDeleteProduct:

    def test_partial_update(self):
        products, categories = _repos()
        product = UpdateProductHandler(products, categories).handle(
            "p-mug", price="6.50", status="inactive"
        )
        assert product.price == Money.of("6.50")
        assert product.status == ProductStatus.INACTIVE
        assert product.name == "Coffee mug"
        assert product.stock == 3

    def test_clear_category(self):
        products, categories = _repos()
        UpdateProductHandler(products, categories).handle("p-mug", category_id="")
        assert products.get_by_id("p-mug").category_id is None

    def test_update_unknown_product(self):
        products, _ = _repos()
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(products).handle("p-nope", stock=1)

    def test_delete_removes_variants(self):
        products, _ = _repos()
        DeleteProductHandler(products).handle("p-mug")
        assert products.get_by_id("p-mug") is None
        assert products.get_variant("v-mug-red") is None

    def test_delete_unknown_product(self):
        products, _ = _repos()
        with pytest.raises(EntityNotFoundError):
            DeleteProductHandler(products).handle("p-nope")


class TestListProducts:

    def test_filters(self):
        products, _ = _repos()
        products.save(Product(id="p-tee", sku="TEE", name="T-shirt", price=Money.of("15"),
                              status=ProductStatus.DRAFT))
        handler = ListProductsHandler(products)

        assert [p.sku for p in handler.handle(search="mug")] == ["MUG"]
        assert [p.sku for p in handler.handle(category_id="c-home")] == ["MUG"]
        assert [p.sku for p in handler.handle(status="Draft")] == ["TEE"]

    def test_line_shape(self):
        products, _ = _repos()
        line = ListProductsHandler(products).handle()[0]
        assert line.price == "Bs. 5.00"
        assert line.variants == 1


class TestCategories:

    def test_slugify(self):
        assert slugify("Ropa de Niños") == "ropa-de-ninos"

    def test_add(self):
        _, categories = _repos()
        category = AddCategoryHandler(categories).handle(" Kitchen ", "Pots and pans",
                                                        image_url="https://cdn/k.png")
        assert category.name == "Kitchen"
        assert category.slug == "kitchen"
        assert categories.get_by_name("kitchen").image_url == "https://cdn/k.png"

    def test_name_required(self):
        _, categories = _repos()
        with pytest.raises(ValidationError, match="Category name is required"):
            AddCategoryHandler(categories).handle("  ")

    def test_duplicate_name_is_case_insensitive(self):
        _, categories = _repos()
        with pytest.raises(DuplicateKeyError, match="already exists"):
            AddCategoryHandler(categories).handle("HOME")

    def test_rename_to_own_name_is_allowed(self):
        _, categories = _repos()
        category = UpdateCategoryHandler(categories).handle("c-home", name="home")
        assert category.name == "home"

    def test_rename_onto_another_category(self):
        _, categories = _repos()
        categories.save(Category(id="c-toys", name="Toys", slug="toys"))
        with pytest.raises(DuplicateKeyError):
            UpdateCategoryHandler(categories).handle("c-toys", name="Home")

    def test_delete_detaches_products(self):
        products, categories = _repos()
        detached = DeleteCategoryHandler(categories, products).handle("c-home")
        assert detached == 1
        assert categories.get_by_id("c-home") is None
        assert products.get_by_id("p-mug").category_id is None

    def test_delete_unknown(self):
        products, categories = _repos()
        with pytest.raises(EntityNotFoundError):
            DeleteCategoryHandler(categories, products).handle("c-nope")
