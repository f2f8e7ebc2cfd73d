"""
Bus Pass Backend - Bus Pass Service Tests
===========================================

What:  Pass creation (with and without photo), value casting, photo cleanup
       on failure, server-side pricing and retrieval.
"""

from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from buspass.exceptions import DatabaseError, InvalidRouteError, NotFoundError, ValidationError
from buspass.schemas.bus_pass import BusPassForm
from buspass.services.bus_pass_service import BusPassService, coerce_date, coerce_price
from buspass.services.photo_storage import LocalPhotoStorage


class TestCoercion:

    def test_iso_date(self):
        assert coerce_date("2025-06-30") == date(2025, 6, 30)

    def test_iso_datetime_from_browser(self):
        assert coerce_date("2025-06-30T00:00:00.000Z") == date(2025, 6, 30)

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_date_is_null(self, value):
        assert coerce_date(value) is None

    def test_unparseable_date(self):
        with pytest.raises(ValueError, match="Cast to date failed"):
            coerce_date("next tuesday")

    def test_numeric_price(self):
        assert coerce_price("1000") == 1000.0
        assert coerce_price("250.5") == 250.5

    def test_blank_price_is_null(self):
        assert coerce_price("") is None

    def test_non_numeric_price(self):
        with pytest.raises(ValueError, match="Cast to Number failed"):
            coerce_price("a lot")

    @pytest.mark.parametrize("value", ["nan", "NaN", "inf", "-Infinity"])
    def test_non_finite_price(self, value):
        with pytest.raises(ValueError, match="Cast to Number failed"):
            coerce_price(value)

    def test_json_numbers_become_text(self):
        form = BusPassForm.model_validate({"price": 1000, "validTill": "2025-06-30"})
        assert form.price == "1000"
        assert form.valid_till == "2025-06-30"


class TestCreateBusPass:

    @pytest.fixture(autouse=True)
    def _storage(self, temp_storage):
        self.service = BusPassService()
        self.storage = LocalPhotoStorage(storage_root=temp_storage)
        with patch("buspass.services.bus_pass_service.photo_storage", self.storage):
            yield

    @pytest.mark.asyncio
    async def test_create_without_photo_echoes_fields(self, db_session, sample_form_data):
        form = BusPassForm.model_validate(sample_form_data)

        result = await self.service.create_bus_pass(db_session, form)

        assert result.message == "Bus pass created successfully"
        bus_pass = result.bus_pass
        assert bus_pass.id is not None
        assert bus_pass.photo is None
        assert bus_pass.photo_url is None
        assert bus_pass.name == "Ravi Kumar"
        assert bus_pass.email == "ravi@example.com"
        assert bus_pass.valid_till == date(2025, 6, 30)
        assert bus_pass.pass_type == "Student"
        assert bus_pass.route == "Uppal - Warangal"
        assert bus_pass.college_name == "Osmania University"
        assert bus_pass.source == "Uppal"
        assert bus_pass.destination == "Warangal"
        assert bus_pass.price == 1000

    @pytest.mark.asyncio
    async def test_create_with_photo_records_reference(
        self, db_session, sample_form_data, sample_image_bytes
    ):
        form = BusPassForm.model_validate(sample_form_data)

        result = await self.service.create_bus_pass(
            db_session, form, photo_filename="rider.jpg", photo_content=sample_image_bytes
        )

        reference = result.bus_pass.photo
        assert reference is not None
        assert result.bus_pass.photo_url == f"/uploads/{reference}"
        assert await self.storage.retrieve(reference) == sample_image_bytes

    @pytest.mark.asyncio
    async def test_absent_fields_stored_as_null(self, db_session):
        result = await self.service.create_bus_pass(db_session, BusPassForm(name="Only Name"))

        assert result.bus_pass.name == "Only Name"
        assert result.bus_pass.email is None
        assert result.bus_pass.valid_till is None
        assert result.bus_pass.price is None

    @pytest.mark.asyncio
    async def test_client_price_is_not_verified(self, db_session, sample_form_data):
        sample_form_data.update(source="Nowhere", destination="Elsewhere", price="1")
        form = BusPassForm.model_validate(sample_form_data)

        result = await self.service.create_bus_pass(db_session, form)

        assert result.bus_pass.price == 1
        assert result.bus_pass.source == "Nowhere"

    @pytest.mark.asyncio
    async def test_uncastable_date_fails_and_removes_photo(
        self, db_session, sample_form_data, sample_image_bytes
    ):
        sample_form_data["validTill"] = "not-a-date"
        form = BusPassForm.model_validate(sample_form_data)

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_bus_pass(
                db_session, form, photo_filename="rider.jpg", photo_content=sample_image_bytes
            )

        assert exc_info.value.message == "Failed to create bus pass"
        assert "validTill" in exc_info.value.error
        assert list(self.storage.storage_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_store_failure_becomes_database_error(self, mock_db_session, sample_form_data):
        mock_db_session.flush = AsyncMock(side_effect=RuntimeError("disk I/O error"))
        form = BusPassForm.model_validate(sample_form_data)

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_bus_pass(mock_db_session, form)

        assert exc_info.value.error == "disk I/O error"
        mock_db_session.add.assert_called_once()

    @pytest.mark.asyncio
    async def test_rejected_photo_is_a_validation_error(self, mock_db_session, sample_form_data):
        form = BusPassForm.model_validate(sample_form_data)

        with pytest.raises(ValidationError):
            await self.service.create_bus_pass(
                mock_db_session, form, photo_filename="resume.pdf", photo_content=b"%PDF-1.4"
            )
        mock_db_session.add.assert_not_called()


    @pytest.mark.asyncio
    async def test_nan_price_fails_and_removes_photo(
        self, db_session, sample_form_data, sample_image_bytes
    ):
        sample_form_data["price"] = "nan"
        form = BusPassForm.model_validate(sample_form_data)

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_bus_pass(
                db_session, form, photo_filename="rider.jpg", photo_content=sample_image_bytes
            )

        assert "price" in exc_info.value.error
        assert list(self.storage.storage_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_commit_failure_removes_photo(
        self, mock_db_session, sample_form_data, sample_image_bytes
    ):
        mock_db_session.commit = AsyncMock(side_effect=RuntimeError("database is locked"))
        form = BusPassForm.model_validate(sample_form_data)

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_bus_pass(
                mock_db_session, form, photo_filename="rider.jpg", photo_content=sample_image_bytes
            )

        assert exc_info.value.error == "database is locked"
        assert list(self.storage.storage_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_created_pass_is_committed(self, db_session, sample_form_data):
        result = await self.service.create_bus_pass(
            db_session, BusPassForm.model_validate(sample_form_data)
        )
        await db_session.rollback()

        fetched = await self.service.get_bus_pass(db_session, result.bus_pass.id)
        assert fetched.name == "Ravi Kumar"


class TestServerPricing:

    @pytest.fixture(autouse=True)
    def _enforce(self):
        self.service = BusPassService()
        with patch("buspass.services.bus_pass_service.settings") as mock_settings:
            mock_settings.enforce_server_price = True
            yield

    @pytest.mark.asyncio
    async def test_submitted_price_replaced_by_table_price(self, seeded_db_session, sample_form_data):
        sample_form_data["price"] = "1"
        form = BusPassForm.model_validate(sample_form_data)

        result = await self.service.create_bus_pass(seeded_db_session, form)

        assert result.bus_pass.price == 1000

    @pytest.mark.asyncio
    async def test_unknown_route_rejected(self, seeded_db_session, sample_form_data):
        sample_form_data.update(source="Warangal", destination="Uppal")
        form = BusPassForm.model_validate(sample_form_data)

        with pytest.raises(InvalidRouteError):
            await self.service.create_bus_pass(seeded_db_session, form)


class TestGetBusPass:

    def setup_method(self):
        self.service = BusPassService()

    @pytest.mark.asyncio
    async def test_get_created_pass(self, db_session, sample_form_data):
        created = await self.service.create_bus_pass(
            db_session, BusPassForm.model_validate(sample_form_data)
        )
        await db_session.commit()

        fetched = await self.service.get_bus_pass(db_session, created.bus_pass.id)

        assert fetched.id == created.bus_pass.id
        assert fetched.name == "Ravi Kumar"

    @pytest.mark.asyncio
    async def test_get_unknown_pass(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_bus_pass(db_session, uuid4())
