"""Tests for design library creation from screenshots."""

import base64

import pytest

from proposal_maker.database.models import DesignLibrary
from proposal_maker.services.design_library_service import (
    DesignLibraryService,
    estimate_decoded_size,
    strip_data_url,
    validate_image,
)
from proposal_maker.services.credential_service import resolve_api_key
from proposal_maker.services.llm_client import ChatCompletionsClient
from proposal_maker.utils.error_handling import (
    CredentialMissing,
    EmptyResult,
    MalformedModelOutput,
    ResourceNotFoundError,
    TemplateNotFound,
    UpstreamError,
    ValidationError,
)
from tests.fixtures.factories import TEST_API_KEY, create_account, create_design_library, create_template
from tests.unit.conftest_images import jpeg_base64, png_base64

SCENARIO_COMPLETION = '{"css": ":root{--c:#fff;}", "implementationNote": {"approach":"grid"}}'


@pytest.fixture
def design_template(db_session):
    return create_template(
        db_session,
        name="Design System Analyzer",
        category="design",
        prompt="Analyze this UI screenshot and extract design tokens.",
    )


def service_for(db_session, account, model_service):
    def factory(db, acct):
        return ChatCompletionsClient(resolve_api_key(db, acct), http_client=model_service.client())

    return DesignLibraryService(db_session, account, factory)


class TestValidateImage:
    def test_png_detected(self):
        payload, mime = validate_image(png_base64())
        assert mime == "image/png"
        base64.b64decode(payload, validate=True)

    def test_jpeg_detected(self):
        assert validate_image(jpeg_base64())[1] == "image/jpeg"

    def test_data_url_prefix_stripped(self):
        raw = png_base64()
        payload, mime = validate_image(f"data:image/png;base64,{raw}")
        assert payload == raw
        assert strip_data_url("abc") == "abc"

    def test_too_short(self):
        with pytest.raises(ValidationError):
            validate_image("aGVsbG8=")

    def test_too_large(self):
        payload = png_base64()
        with pytest.raises(ValidationError) as exc_info:
            validate_image(payload, max_bytes=estimate_decoded_size(payload) - 1)
        assert "too large" in exc_info.value.message

    def test_size_estimate(self):
        assert estimate_decoded_size("A" * 4) == 3
        assert estimate_decoded_size("A" * 5) == 4

    def test_not_base64(self):
        with pytest.raises(ValidationError):
            validate_image("!" * 200)

    def test_not_an_image(self):
        with pytest.raises(ValidationError):
            validate_image(base64.b64encode(b"plain text, definitely not an image " * 10).decode())


class TestCreateLibrary:
    def test_scenario_css_and_note_variant_persisted(self, db_session, account_with_key, design_template, model_service):
        model_service.reply(SCENARIO_COMPLETION)

        library = service_for(db_session, account_with_key, model_service).create_library(
            name="Brand", description="Marketing site", image_base64=png_base64(), prompt_template_id=design_template.id
        )

        assert library.css_variables == ":root{--c:#fff;}"
        assert library.analysis_result == '{\n  "approach": "grid"\n}'
        assert library.prompt_template_id == design_template.id
        assert library.created_by == account_with_key.id
        assert db_session.query(DesignLibrary).count() == 1

        assert model_service.call_count == 1
        payload = model_service.payload()
        assert payload["messages"][0]["content"][0]["text"] == design_template.prompt
        assert payload["messages"][0]["content"][1]["image_url"]["url"].startswith("data:image/png;base64,")
        assert model_service.requests[0].headers["Authorization"] == f"Bearer {TEST_API_KEY}"

    @pytest.mark.parametrize("failure", [
        lambda svc: svc.fail(429, "slow down"),
        lambda svc: svc.fail(500),
        lambda svc: svc.reply("not json at all"),
        lambda svc: svc.reply('{"css": "", "implementationNote": ""}'),
    ])
    def test_failed_analysis_leaves_no_row(self, db_session, account_with_key, design_template, model_service, failure):
        failure(model_service)

        with pytest.raises((UpstreamError, MalformedModelOutput, EmptyResult)):
            service_for(db_session, account_with_key, model_service).create_library(
                name="Brand", description="desc", image_base64=png_base64(), prompt_template_id=design_template.id
            )
        assert db_session.query(DesignLibrary).count() == 0
        assert model_service.call_count == 1

    def test_inactive_template_checked_before_credential(self, db_session, account, design_template, model_service):
        design_template.is_active = False
        db_session.commit()

        with pytest.raises(TemplateNotFound):
            service_for(db_session, account, model_service).create_library(
                name="Brand", description="desc", image_base64=png_base64(), prompt_template_id=design_template.id
            )
        assert model_service.call_count == 0

    def test_missing_credential(self, db_session, account, design_template, model_service):
        with pytest.raises(CredentialMissing):
            service_for(db_session, account, model_service).create_library(
                name="Brand", description="desc", image_base64=png_base64(), prompt_template_id=design_template.id
            )
        assert model_service.call_count == 0
        assert db_session.query(DesignLibrary).count() == 0

    def test_bad_image_makes_no_call(self, db_session, account_with_key, design_template, model_service):
        with pytest.raises(ValidationError):
            service_for(db_session, account_with_key, model_service).create_library(
                name="Brand", description="desc", image_base64="x" * 50, prompt_template_id=design_template.id
            )
        assert model_service.call_count == 0

    @pytest.mark.parametrize("name,description", [("", "desc"), ("Brand", "   ")])
    def test_required_fields(self, db_session, account_with_key, design_template, model_service, name, description):
        with pytest.raises(ValidationError):
            service_for(db_session, account_with_key, model_service).create_library(
                name=name, description=description, image_base64=png_base64(), prompt_template_id=design_template.id
            )


class TestManageLibraries:
    def test_update_changes_name_and_description_only(self, db_session, account):
        library = create_design_library(db_session, account)
        service = DesignLibraryService(db_session, account)

        updated = service.update_library(library.id, name="Renamed", description=None)

        assert updated.name == "Renamed"
        assert updated.description == "Brand tokens"
        assert updated.css_variables == ":root { --primary: #ff0000; }"

    def test_libraries_are_owner_scoped(self, db_session, account):
        other = create_account(db_session, email="other@example.com")
        library = create_design_library(db_session, other)
        service = DesignLibraryService(db_session, account)

        assert service.list_libraries() == []
        with pytest.raises(ResourceNotFoundError):
            service.get_library(library.id)
        with pytest.raises(ResourceNotFoundError):
            service.delete_library(library.id)

    def test_delete(self, db_session, account):
        library = create_design_library(db_session, account)
        DesignLibraryService(db_session, account).delete_library(library.id)
        assert db_session.query(DesignLibrary).count() == 0
