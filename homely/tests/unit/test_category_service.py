"""Unit tests for category and category type services."""

import pytest

from homely.api.schemas.category import (
    CategoryCreate,
    CategorySortOrderItem,
    CategoryTypeCreate,
    CategoryTypeUpdate,
    CategoryUpdate,
)
from homely.core.exceptions import ConflictError, NotFoundError
from homely.services.category_service import CategoryService, CategoryTypeService
from homely.tests.factories import CategoryFactory, CategoryTypeFactory, persisted


class TestCategoryTypeService:
    @pytest.fixture
    def service(self, mock_uow) -> CategoryTypeService:
        mock_uow.category_types.create.side_effect = persisted
        mock_uow.category_types.update.side_effect = lambda entity: entity
        return CategoryTypeService(mock_uow)

    @pytest.mark.asyncio
    async def test_create_strips_name(self, service, mock_uow):
        mock_uow.category_types.name_exists.return_value = False

        response = await service.create_category_type(
            CategoryTypeCreate(name="  Pojazdy ", sort_order=2)
        )

        assert response.name == "Pojazdy"
        assert response.sort_order == 2
        mock_uow.category_types.name_exists.assert_awaited_once_with("Pojazdy", exclude_id=None)

    @pytest.mark.asyncio
    async def test_duplicate_name_conflicts(self, service, mock_uow):
        mock_uow.category_types.name_exists.return_value = True

        with pytest.raises(ConflictError) as exc_info:
            await service.create_category_type(CategoryTypeCreate(name="Dom"))

        assert exc_info.value.status_code == 409
        mock_uow.category_types.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_rename_checks_other_types_only(self, service, mock_uow):
        category_type = CategoryTypeFactory(id=4, name="Old")
        mock_uow.category_types.get_by_id.return_value = category_type
        mock_uow.category_types.name_exists.return_value = False

        response = await service.update_category_type(4, CategoryTypeUpdate(name="New"))

        assert response.name == "New"
        mock_uow.category_types.name_exists.assert_awaited_once_with("New", exclude_id=4)

    @pytest.mark.asyncio
    async def test_update_without_name_skips_uniqueness(self, service, mock_uow):
        mock_uow.category_types.get_by_id.return_value = CategoryTypeFactory(id=4)

        response = await service.update_category_type(4, CategoryTypeUpdate(is_active=False))

        assert response.is_active is False
        mock_uow.category_types.name_exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_missing_type(self, service, mock_uow):
        mock_uow.category_types.get_by_id.return_value = None
        with pytest.raises(NotFoundError):
            await service.delete_category_type(99)


class TestCategoryService:
    @pytest.fixture
    def service(self, mock_uow) -> CategoryService:
        mock_uow.categories.create.side_effect = persisted
        mock_uow.categories.update.side_effect = lambda entity: entity
        return CategoryService(mock_uow)

    @pytest.mark.asyncio
    async def test_response_carries_type_name(self, service, mock_uow):
        category = CategoryFactory(category_type=CategoryTypeFactory(name="Ogród"))
        mock_uow.categories.get_active.return_value = [category]

        [response] = await service.get_active_categories()

        assert response.category_type_name == "Ogród"

    @pytest.mark.asyncio
    async def test_create_requires_existing_type(self, service, mock_uow):
        mock_uow.category_types.exists.return_value = False

        with pytest.raises(NotFoundError):
            await service.create_category(CategoryCreate(category_type_id=7, name="Auto"))
        mock_uow.categories.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_without_type(self, service, mock_uow):
        response = await service.create_category(CategoryCreate(name=" Auto "))

        assert response.name == "Auto"
        assert response.category_type_id is None
        mock_uow.category_types.exists.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_moves_category(self, service, mock_uow):
        category = CategoryFactory(category_type=None, category_type_id=1)
        mock_uow.categories.get_with_type.return_value = category
        mock_uow.category_types.exists.return_value = True

        response = await service.update_category(category.id, CategoryUpdate(category_type_id=2))

        assert response.category_type_id == 2

    @pytest.mark.asyncio
    async def test_sort_order_skips_unknown_ids(self, service, mock_uow):
        first = CategoryFactory(id=1, sort_order=0)
        second = CategoryFactory(id=2, sort_order=0)
        mock_uow.categories.get_many.return_value = [first, second]

        updated = await service.update_sort_order(
            [
                CategorySortOrderItem(id=2, sort_order=1),
                CategorySortOrderItem(id=1, sort_order=2),
                CategorySortOrderItem(id=42, sort_order=3),
            ]
        )

        assert updated == 2
        assert (first.sort_order, second.sort_order) == (2, 1)
        mock_uow.save_changes.assert_awaited_once()
        mock_uow.execute_in_transaction.assert_awaited_once()
