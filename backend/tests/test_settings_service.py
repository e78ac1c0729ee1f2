import base64
import io

import pytest
from PIL import Image

from showroom.constants import LOGO_MAX_BYTES, LOGO_MAX_HEIGHT, LOGO_MAX_WIDTH
from showroom.services import settings_service
from showroom.services.settings_service import SettingsValidationError
from showroom.validation import ValidationError


def _logo(width: int, height: int, mode: str = "RGB", color=(200, 30, 30)) -> str:
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def _payload(data_uri: str) -> bytes:
    return base64.b64decode(data_uri.split(",", 1)[1])


def _stored_size(data_uri: str) -> tuple[int, int]:
    with Image.open(io.BytesIO(_payload(data_uri))) as image:
        return image.size


class TestCompanyProfile:

    def test_defaults_from_config(self, app):
        profile = settings_service.get_company_profile()

        assert profile.company_name == "Test Showroom"
        assert profile.company_address == "House 1, Road 2, Dhaka"
        assert profile.company_logo == ""

    def test_partial_update_keeps_other_fields(self, app):
        updated = settings_service.update_company_profile({"company_address": "Gulshan 1, Dhaka"})

        assert updated.company_address == "Gulshan 1, Dhaka"
        assert updated.company_name == "Test Showroom"
        assert settings_service.get_company_profile() == updated

    def test_blank_name_rejected(self, app):
        with pytest.raises(ValidationError):
            settings_service.update_company_profile({"company_name": "  "})

    def test_unknown_field_rejected(self, app):
        with pytest.raises(ValidationError):
            settings_service.update_company_profile({"vat_number": "123"})


class TestLogoValidation:

    def test_small_logo_stored_as_jpeg(self, app):
        stored = settings_service.update_company_profile({"company_logo": _logo(120, 60)}).company_logo

        assert stored.startswith("data:image/jpeg;base64,")
        assert _stored_size(stored) == (120, 60)
        assert settings_service.get_company_profile().company_logo == stored

    def test_large_logo_scaled_into_box(self, app):
        stored = settings_service.update_company_profile({"company_logo": _logo(800, 400)}).company_logo

        assert _stored_size(stored) == (LOGO_MAX_WIDTH, LOGO_MAX_HEIGHT)

    def test_tall_logo_keeps_aspect_ratio(self):
        width, height = _stored_size(settings_service.validate_logo(_logo(300, 600)))

        assert height <= LOGO_MAX_HEIGHT
        assert width <= LOGO_MAX_WIDTH
        assert width * 2 == height

    def test_transparent_png_flattened(self):
        stored = settings_service.validate_logo(_logo(40, 20, mode="RGBA", color=(0, 0, 0, 0)))

        with Image.open(io.BytesIO(_payload(stored))) as image:
            assert image.mode == "RGB"
            assert image.getpixel((10, 10))[0] > 240

    def test_clear_logo(self, app):
        settings_service.update_company_profile({"company_logo": _logo(10, 10)})
        assert settings_service.update_company_profile({"company_logo": ""}).company_logo == ""

    @pytest.mark.parametrize(
        "logo",
        [
            "https://example.com/logo.png",
            "data:text/plain;base64,aGVsbG8=",
            "data:image/png;base64,***",
            "data:image/png;base64,",
            "data:image/png;base64," + base64.b64encode(b"not really a png").decode("ascii"),
        ],
    )
    def test_rejects_invalid_logo(self, app, logo):
        with pytest.raises(SettingsValidationError):
            settings_service.update_company_profile({"company_logo": logo})
        assert settings_service.get_company_profile().company_logo == ""

    def test_rejects_oversized_logo(self, app):
        oversized = "data:image/png;base64," + base64.b64encode(b"\x89" * (LOGO_MAX_BYTES + 1)).decode("ascii")

        with pytest.raises(SettingsValidationError) as excinfo:
            settings_service.validate_logo(oversized)
        assert excinfo.value.details["max_bytes"] == LOGO_MAX_BYTES
