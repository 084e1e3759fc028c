"""
Workbench session tests

StudioSession is driven against the in-process FastAPI app through
httpx.ASGITransport, with the Gemini model handles mocked out.
"""
import httpx
import pytest
import pytest_asyncio

from workbench.api_client import StudioAPIClient, StudioAPIError
from workbench.session import StudioSession, WorkflowError, data_uri_to_bytes


@pytest_asyncio.fixture
async def api(app):
    client = StudioAPIClient("http://testserver/api", transport=httpx.ASGITransport(app=app))
    yield client
    await client.aclose()


@pytest.fixture
def session(api):
    return StudioSession(api)


@pytest.mark.integration
@pytest.mark.asyncio
class TestPromptWorkflow:
    """Text -> Enhance -> Approve -> Image"""

    async def test_full_workflow(self, session, png_bytes):
        session.text_prompt = "a castle"

        await session.enhance_prompt()
        assert session.enhanced_prompt == "A castle at dusk."
        assert session.approved_prompt == "A castle at dusk."
        assert session.is_prompt_approved is False
        assert session.status == "Prompt enhanced. Review & approve."

        session.approve_prompt()
        assert session.status == "Prompt approved. Ready to generate image."

        await session.generate_image()
        assert session.status == "Image generation complete!"
        assert session.generated_image.startswith("data:image/png;base64,")
        assert data_uri_to_bytes(session.generated_image) == png_bytes
        assert session.loading is False

    async def test_generate_requires_approval(self, session, image_model):
        session.text_prompt = "a castle"
        await session.enhance_prompt()

        with pytest.raises(WorkflowError):
            await session.generate_image()

        image_model.generate_content.assert_not_called()

    async def test_editing_revokes_approval(self, session):
        session.text_prompt = "a castle"
        await session.enhance_prompt()
        session.approve_prompt()

        session.edit_approved_prompt("A castle at dawn.")

        assert session.is_prompt_approved is False
        with pytest.raises(WorkflowError):
            await session.generate_image()

    async def test_approve_without_prompt(self, session):
        with pytest.raises(WorkflowError):
            session.approve_prompt()

    async def test_enhance_error_sets_status(self, session):
        session.text_prompt = ""

        await session.enhance_prompt()

        assert session.status == "Error: Invalid request type or missing parameters."
        assert session.enhanced_prompt == ""
        assert session.loading is False

    async def test_generate_error_sets_status(self, session, image_model, make_text_response):
        image_model.generate_content.return_value = make_text_response("no image")
        session.text_prompt = "a castle"
        await session.enhance_prompt()
        session.approve_prompt()

        await session.generate_image()

        assert session.status == "Error generating image: No image data returned from Gemini."
        assert session.generated_image == ""


@pytest.mark.integration
@pytest.mark.asyncio
class TestImageWorkflow:
    """Image -> Analysis -> Variation"""

    async def test_full_workflow(self, session, text_model, png_bytes, make_text_response, tmp_path):
        text_model.generate_content.return_value = make_text_response("A fox in neon snow.")
        image_file = tmp_path / "fox.png"
        image_file.write_bytes(png_bytes)

        session.upload_image_file(image_file)
        assert session.status == "Image uploaded"
        assert session.uploaded_mime_type == "image/png"

        await session.analyze_image()
        assert session.image_analysis == "A fox in neon snow."
        assert session.status == "Analysis complete. Ready for variation."

        _, image_part = text_model.generate_content.call_args.args[0]
        assert image_part.inline_data.data == png_bytes

        await session.generate_variation()
        assert session.status == "Variation generation complete!"
        assert data_uri_to_bytes(session.variation_image) == png_bytes

    async def test_upload_resets_previous_results(self, session, png_bytes):
        session.image_analysis = "old"
        session.variation_image = "old"
        session.generated_image = "old"

        session.upload_image(png_bytes, "image/png")

        assert session.image_analysis == ""
        assert session.variation_image == ""
        assert session.generated_image == ""

    async def test_clearing_upload(self, session, png_bytes):
        session.upload_image(png_bytes, "image/png")
        session.upload_image(None)

        assert session.uploaded_image is None
        assert session.status == "No image selected"

    async def test_non_image_file_rejected(self, session, tmp_path):
        text_file = tmp_path / "notes.txt"
        text_file.write_text("hello")

        with pytest.raises(WorkflowError):
            session.upload_image_file(text_file)

    async def test_analyze_requires_upload(self, session):
        with pytest.raises(WorkflowError):
            await session.analyze_image()

    async def test_variation_requires_analysis(self, session):
        with pytest.raises(WorkflowError):
            await session.generate_variation()

    async def test_analyze_error_sets_status(self, session, text_model, png_bytes):
        text_model.generate_content.side_effect = RuntimeError("quota exceeded")
        session.upload_image(png_bytes, "image/png")

        await session.analyze_image()

        assert session.status == "Error analyzing image: quota exceeded"
        assert session.image_analysis == ""


@pytest.mark.unit
@pytest.mark.asyncio
class TestStudioAPIClient:
    """Tests for error extraction and health check"""

    async def test_health_check(self, api):
        assert await api.health_check() is True

    async def test_error_body_is_raised(self, api):
        with pytest.raises(StudioAPIError) as exc_info:
            await api.post("generate-image", {"approvedPrompt": ""})

        assert str(exc_info.value) == "Approved prompt is required."

    async def test_error_without_body(self):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        async with StudioAPIClient("http://studio.test/api", transport=httpx.MockTransport(handler)) as api:
            with pytest.raises(StudioAPIError) as exc_info:
                await api.post("generate-image", {"approvedPrompt": "x"})

        assert str(exc_info.value) == "Request failed with status code 502"

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with StudioAPIClient("http://studio.test/api", transport=httpx.MockTransport(handler)) as api:
            with pytest.raises(StudioAPIError) as exc_info:
                await api.post("generate-image", {"approvedPrompt": "x"})

        assert "connection refused" in str(exc_info.value)

    async def test_base_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("STUDIO_API_URL", "http://remote.test/api/")

        async with StudioAPIClient() as api:
            assert api.base_url == "http://remote.test/api"

    async def test_request_payload(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(200, json={"result": "ok"})

        async with StudioAPIClient("http://studio.test/api", transport=httpx.MockTransport(handler)) as api:
            data = await api.post("enhance-and-analyze", {"type": "enhance", "textPrompt": "a castle"})

        assert data == {"result": "ok"}
        assert seen["url"] == "http://studio.test/api/enhance-and-analyze"
        assert b'"textPrompt"' in seen["body"]
