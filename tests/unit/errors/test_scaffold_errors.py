"""Unit tests for the error registry, matchers and factory."""

import subprocess

import httpx
import pytest
import yaml

from scaffold_core.errors import (
    ErrorCategory,
    ErrorFactory,
    ErrorMatcherChain,
    ErrorRegistry,
    ScaffoldError,
    create_error,
)

ERROR_CODES = [
    "RETRIEVAL_FAILED",
    "DOCUMENT_INVALID",
    "INSUFFICIENT_ARGUMENTS",
    "TEMPLATE_ERROR",
    "STEP_FAILED",
    "COMMAND_FAILED",
    "CONFIG_INVALID",
    "INTERNAL_ERROR",
]


class TestErrorRegistry:
    @pytest.fixture
    def registry(self):
        return ErrorRegistry()

    @pytest.mark.parametrize("code", ERROR_CODES)
    def test_code_registered(self, registry, code):
        template = registry.get_template(code)
        assert template is not None
        assert template.code == code

    @pytest.mark.parametrize(
        "code,category",
        [
            ("RETRIEVAL_FAILED", ErrorCategory.RETRIEVAL),
            ("DOCUMENT_INVALID", ErrorCategory.DOCUMENT),
            ("INSUFFICIENT_ARGUMENTS", ErrorCategory.VALIDATION),
            ("TEMPLATE_ERROR", ErrorCategory.RENDER),
            ("STEP_FAILED", ErrorCategory.EXECUTION),
            ("COMMAND_FAILED", ErrorCategory.EXECUTION),
            ("CONFIG_INVALID", ErrorCategory.SYSTEM),
        ],
    )
    def test_categories(self, registry, code, category):
        assert registry.create(code).category == category

    @pytest.mark.parametrize("code", ERROR_CODES)
    def test_every_template_has_suggestion(self, registry, code):
        assert registry.get_template(code).suggestion_template

    def test_unknown_code(self, registry):
        with pytest.raises(ValueError, match="Unknown error code"):
            registry.create("NOPE")

    def test_missing_context_keeps_template(self, registry):
        error = registry.create("RETRIEVAL_FAILED")
        assert error.message == "Failed to load template '{reference}'"

    def test_interpolation(self, registry):
        error = registry.create(
            "INSUFFICIENT_ARGUMENTS", {"required": 3, "supplied": 1}
        )
        assert error.message == (
            "not enough arguments: template requires at least 3 argument(s), got 1"
        )
        assert error.suggestion == "Pass 3 positional argument(s) after the template"


class TestScaffoldError:
    def test_str_includes_detail(self):
        error = create_error("TEMPLATE_ERROR", target="mkdir", detail="boom")
        assert str(error) == "Failed to render mkdir: boom"

    def test_is_exception(self):
        with pytest.raises(ScaffoldError):
            raise create_error("CONFIG_INVALID", detail="bad")

    def test_with_context(self):
        error = create_error("STEP_FAILED", step_index=1, action="mkdir", detail="x")
        updated = error.with_context(step_index=5, field_name="mkdir")

        assert updated.step_index == 5
        assert updated.field_name == "mkdir"
        assert updated.message == error.message
        assert error.step_index == 1

    def test_to_dict(self):
        error = create_error("COMMAND_FAILED", step_index=2, command="false", exit_code=1)
        data = error.to_dict()

        assert data["code"] == "COMMAND_FAILED"
        assert data["category"] == "EXECUTION"
        assert data["step_index"] == 2
        assert data["detail"] == "command 'false' exited with status 1"
        assert data["context"]["exit_code"] == "1"


class TestMatchers:
    @pytest.fixture
    def chain(self):
        return ErrorMatcherChain()

    def test_called_process_error(self, chain):
        result = chain.match(subprocess.CalledProcessError(3, ["sh", "-c", "exit 3"]))
        assert result.code == "COMMAND_FAILED"
        assert result.context == {"command": "exit 3", "exit_code": 3}

    def test_os_error(self, chain):
        result = chain.match(FileNotFoundError(2, "No such file or directory", "x/y"))
        assert result.code == "STEP_FAILED"
        assert result.context["detail"] == "No such file or directory: 'x/y'"

    def test_yaml_error(self, chain):
        assert chain.match(yaml.YAMLError("bad")).code == "DOCUMENT_INVALID"

    def test_http_status_error(self, chain):
        request = httpx.Request("GET", "https://example.com/t.yaml")
        response = httpx.Response(404, request=request)
        error = httpx.HTTPStatusError("not found", request=request, response=response)

        result = chain.match(error)
        assert result.code == "RETRIEVAL_FAILED"
        assert result.context["detail"] == "status 404"

    def test_transport_error(self, chain):
        result = chain.match(httpx.ConnectError("connection refused"))
        assert result.code == "RETRIEVAL_FAILED"
        assert result.context["detail"] == "connection refused"

    def test_invalid_url(self, chain):
        result = chain.match(httpx.InvalidURL("Invalid IPv6 URL"))
        assert result.code == "RETRIEVAL_FAILED"
        assert result.context["detail"] == "Invalid IPv6 URL"

    def test_fallback(self, chain):
        result = chain.match(RuntimeError("surprise"))
        assert result.code == "INTERNAL_ERROR"
        assert result.context["error_type"] == "RuntimeError"


class TestErrorFactory:
    @pytest.fixture
    def factory(self):
        return ErrorFactory()

    def test_from_exception_keeps_cause(self, factory):
        cause = PermissionError(13, "Permission denied", "out")
        error = factory.from_exception(cause, step_index=3, action="write_file")

        assert error.code == "STEP_FAILED"
        assert error.cause is cause
        assert str(error) == "Step 3 (write_file) failed: Permission denied: 'out'"

    def test_from_scaffold_error(self, factory):
        original = create_error("TEMPLATE_ERROR", target="x", detail="y")
        error = factory.from_exception(original, step_index=7)

        assert error.code == "TEMPLATE_ERROR"
        assert error.step_index == 7

    def test_create_with_kwargs(self, factory):
        error = factory.create("RETRIEVAL_FAILED", {"reference": "t.yaml"}, detail="gone")
        assert str(error) == "Failed to load template 't.yaml': gone"

    def test_internal_error(self, factory):
        error = factory.from_exception(KeyError("k"))
        assert error.code == "INTERNAL_ERROR"
        assert "KeyError" in str(error)
