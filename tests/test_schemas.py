"""Tests for the tool input models and the tool response shape."""

import pytest
from pydantic import ValidationError

from toolhub.schemas.tools import (
    AgentInput,
    BatchScraperInput,
    CodeReviewInput,
    PythonExecInput,
    ResearchInput,
    TextContent,
    ToolResponse,
    WebScraperInput,
    text_response,
)
from toolhub.tools.base import ToolConfig, error_message


class TestToolResponse:
    def test_text_response(self) -> None:
        response = text_response("hi")
        assert response.model_dump() == {"content": [{"type": "text", "text": "hi"}]}

    def test_text_joins_parts(self) -> None:
        response = ToolResponse(content=[TextContent(text="a"), TextContent(text="b")])
        assert response.text == "a\nb"


class TestInputs:
    def test_agent_defaults(self) -> None:
        params = AgentInput(prompt="hi")
        assert params.system_prompt is None
        assert params.model is None
        assert params.use_tools is True

    def test_agent_requires_prompt(self) -> None:
        with pytest.raises(ValidationError):
            AgentInput()

    def test_python_packages_default(self) -> None:
        assert PythonExecInput(code="pass").packages == []

    def test_url_must_be_http(self) -> None:
        assert WebScraperInput(url="http://example.com").only_main_content is True
        with pytest.raises(ValidationError):
            WebScraperInput(url="example.com")

    def test_batch_accepts_any_length(self) -> None:
        # The handler reports out-of-range lists as text.
        assert BatchScraperInput(urls=[]).urls == []
        assert len(BatchScraperInput(urls=["https://a"] * 9).urls) == 9

    def test_batch_urls_must_be_http(self) -> None:
        with pytest.raises(ValidationError):
            BatchScraperInput(urls=["https://example.com", "example.org"])
        with pytest.raises(ValidationError):
            BatchScraperInput(urls=["ftp://example.com"])

    def test_research_language(self) -> None:
        assert ResearchInput(query="q").language == "both"
        with pytest.raises(ValidationError):
            ResearchInput(query="q", language="java")

    def test_review_focus(self) -> None:
        assert CodeReviewInput(code="x", focus="solid_principles").focus == "solid_principles"
        with pytest.raises(ValidationError):
            CodeReviewInput(code="x", focus="style")


class TestToolConfig:
    def test_input_schema(self) -> None:
        cfg = ToolConfig(name="t", description="d", input_model=ResearchInput)
        schema = cfg.input_schema()
        assert schema["required"] == ["query"]
        assert schema["properties"]["language"]["enum"] == ["swift", "kotlin", "both"]

    def test_error_message(self) -> None:
        assert error_message(ValueError("bad")) == "bad"
        assert error_message(TimeoutError()) == "TimeoutError"
